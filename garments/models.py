"""
Garment catalog model
"""

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models

from tryon_backend.choices import GarmentCategory, GarmentGender


class GarmentQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Garment(models.Model):
    """
    A piece of clothing available for try-on.

    Inactive garments are hidden from the public catalog and cannot be used
    for new try-on requests, but stay readable for historical records.
    """
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    category = models.CharField(max_length=20, choices=GarmentCategory.choices)
    gender = models.CharField(max_length=10, choices=GarmentGender.choices)
    fabric = models.CharField(max_length=50, blank=True, null=True)
    color = models.CharField(max_length=30, blank=True, null=True)
    description = models.TextField(max_length=500, blank=True, null=True)
    image_url = models.URLField(max_length=500)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_garments',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = GarmentQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'gender', 'is_active'], name='garments_ga_categor_4e8b1d_idx'),
            models.Index(fields=['color'], name='garments_ga_color_9a1f3c_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.category}) | Active: {self.is_active}"
