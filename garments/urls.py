from django.urls import path

from . import views

urlpatterns = [
    path('garments', views.garment_list, name='garment-list'),
    path('garments/categories', views.garment_categories, name='garment-categories'),
    path('garments/colors', views.garment_colors, name='garment-colors'),
    path('garments/<int:pk>', views.garment_detail, name='garment-detail'),
    path('admin/garments', views.admin_garment_list, name='admin-garment-list'),
    path('admin/garments/<int:pk>', views.admin_garment_detail, name='admin-garment-detail'),
]
