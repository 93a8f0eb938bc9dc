from django.urls import path

from . import views

urlpatterns = [
    path('admin/analytics', views.admin_analytics, name='admin-analytics'),
]
