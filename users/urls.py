"""
URL Configuration for accounts, profiles and admin user management
"""

from django.urls import path

from . import views

urlpatterns = [
    path('auth/register', views.RegisterUserView.as_view(), name='auth-register'),
    path('auth/login', views.LoginUserView.as_view(), name='auth-login'),
    path('auth/logout', views.LogoutUserView.as_view(), name='auth-logout'),
    path('auth/me', views.CurrentUserView.as_view(), name='auth-me'),
    path('auth/forgot-password', views.ForgotPasswordView.as_view(), name='auth-forgot-password'),
    path('auth/reset-password', views.ResetPasswordView.as_view(), name='auth-reset-password'),

    path('users/profile', views.profile, name='user-profile'),
    path('users/profile-image', views.profile_image, name='user-profile-image'),
    path('users/password', views.change_password, name='user-password'),
    path('users/account', views.delete_account, name='user-account'),
    path('users/favorites', views.favorite_list, name='user-favorites'),
    path('users/favorites/<int:garment_id>', views.favorite_detail, name='user-favorite-detail'),

    path('admin/users', views.admin_user_list, name='admin-user-list'),
    path('admin/users/<int:user_id>', views.admin_user_delete, name='admin-user-delete'),
    path('admin/users/<int:user_id>/block', views.admin_user_block, name='admin-user-block'),
    path('admin/users/<int:user_id>/activity', views.admin_user_activity, name='admin-user-activity'),
]
