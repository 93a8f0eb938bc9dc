"""
URL configuration for tryon_backend.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone


def health(request):
    return JsonResponse({
        'success': True,
        'message': 'Server is running',
        'timestamp': timezone.now().isoformat(),
    })


urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('health', health, name='health'),
    path('api/', include('users.urls')),
    path('api/', include('garments.urls')),
    path('api/', include('tryon.urls')),
    path('api/', include('audit.urls')),
    path('api/', include('analytics.urls')),
]
