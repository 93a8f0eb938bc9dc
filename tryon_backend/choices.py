"""
Enumerations shared by models, serializers and filters.
"""

from django.db import models


class UserRole(models.TextChoices):
    USER = 'user', 'User'
    ADMIN = 'admin', 'Admin'


class BodyGender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    OTHER = 'other', 'Other'


class BodyType(models.TextChoices):
    SLIM = 'slim', 'Slim'
    REGULAR = 'regular', 'Regular'
    ATHLETIC = 'athletic', 'Athletic'
    PLUS = 'plus', 'Plus'


class GarmentCategory(models.TextChoices):
    SHIRT = 'shirt', 'Shirt'
    KURTI = 'kurti', 'Kurti'
    SAREE = 'saree', 'Saree'
    DRESS = 'dress', 'Dress'
    PANTS = 'pants', 'Pants'
    JACKET = 'jacket', 'Jacket'
    T_SHIRT = 't-shirt', 'T-Shirt'
    BLOUSE = 'blouse', 'Blouse'
    SWEATER = 'sweater', 'Sweater'
    OTHER = 'other', 'Other'


class GarmentGender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    UNISEX = 'unisex', 'Unisex'


class TryOnStatus(models.TextChoices):
    # PENDING is part of the stored schema but never assigned: requests are
    # created directly in PROCESSING.
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'


class AuditAction(models.TextChoices):
    USER_REGISTER = 'user_register', 'User register'
    USER_LOGIN = 'user_login', 'User login'
    USER_LOGOUT = 'user_logout', 'User logout'
    PASSWORD_RESET_REQUEST = 'password_reset_request', 'Password reset request'
    PASSWORD_RESET_COMPLETE = 'password_reset_complete', 'Password reset complete'
    PROFILE_UPDATE = 'profile_update', 'Profile update'
    PROFILE_IMAGE_UPLOAD = 'profile_image_upload', 'Profile image upload'
    ACCOUNT_DELETE = 'account_delete', 'Account delete'
    TRYON_REQUEST = 'tryon_request', 'Try-on request'
    TRYON_COMPLETE = 'tryon_complete', 'Try-on complete'
    TRYON_FAILED = 'tryon_failed', 'Try-on failed'
    GARMENT_CREATE = 'garment_create', 'Garment create'
    GARMENT_UPDATE = 'garment_update', 'Garment update'
    GARMENT_DELETE = 'garment_delete', 'Garment delete'
    USER_BLOCK = 'user_block', 'User block'
    USER_UNBLOCK = 'user_unblock', 'User unblock'
    ADMIN_ACTION = 'admin_action', 'Admin action'
