"""
URL Configuration for Try-On App
"""

from django.urls import path

from .views import admin_tryon_detail, admin_tryon_list, tryon_create, tryon_detail, tryon_history

urlpatterns = [
    path('tryon', tryon_create, name='tryon-create'),
    path('tryon/history', tryon_history, name='tryon-history'),
    path('tryon/<int:tryon_request_id>', tryon_detail, name='tryon-detail'),
    path('admin/tryons', admin_tryon_list, name='admin-tryon-list'),
    path('admin/tryons/<int:tryon_request_id>', admin_tryon_detail, name='admin-tryon-detail'),
]
