"""
User account and profile model.
"""

import hashlib
import secrets
from datetime import timedelta

from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from tryon_backend.choices import BodyGender, BodyType, UserRole


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', UserRole.USER)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', UserRole.ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, username):
        return self.get(**{self.model.USERNAME_FIELD: (username or '').lower()})


class User(AbstractUser):
    """
    Account identified by a lowercased email address.

    Body profile fields are optional and only used by the mobile client to
    suggest garments; favorites behave as a set of garment references.
    """
    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=UserRole.choices, default=UserRole.USER)
    profile_image_url = models.URLField(max_length=500, blank=True, null=True)

    body_gender = models.CharField(max_length=10, choices=BodyGender.choices, blank=True, null=True)
    body_height_cm = models.PositiveSmallIntegerField(
        blank=True,
        null=True,
        validators=[MinValueValidator(50), MaxValueValidator(300)],
    )
    body_type = models.CharField(max_length=10, choices=BodyType.choices, blank=True, null=True)

    favorites = models.ManyToManyField('garments.Garment', blank=True, related_name='favorited_by')
    is_blocked = models.BooleanField(default=False)

    reset_password_token = models.CharField(max_length=64, blank=True, null=True)
    reset_password_expires = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.email} ({self.role})"

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def body_info(self):
        return {
            'gender': self.body_gender,
            'height': self.body_height_cm,
            'bodyType': self.body_type,
        }

    @staticmethod
    def hash_reset_token(token):
        return hashlib.sha256(token.encode('utf-8')).hexdigest()

    def issue_password_reset(self, lifetime_seconds):
        """Store a hashed reset token and return the raw one."""
        token = secrets.token_hex(32)
        self.reset_password_token = self.hash_reset_token(token)
        self.reset_password_expires = timezone.now() + timedelta(seconds=lifetime_seconds)
        self.save(update_fields=['reset_password_token', 'reset_password_expires', 'updated_at'])
        return token

    def clear_password_reset(self):
        self.reset_password_token = None
        self.reset_password_expires = None
