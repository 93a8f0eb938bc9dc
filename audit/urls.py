"""
URL Configuration for Audit App
"""

from django.urls import path

from .views import admin_log_list

urlpatterns = [
    path('admin/logs', admin_log_list, name='admin-log-list'),
]
