"""
Serializers for the garment catalog
"""

from rest_framework import serializers

from tryon_backend.choices import GarmentCategory, GarmentGender
from .models import Garment


class GarmentSummarySerializer(serializers.ModelSerializer):
    imageUrl = serializers.URLField(source='image_url', read_only=True)

    class Meta:
        model = Garment
        fields = ('id', 'name', 'category', 'gender', 'imageUrl')
        read_only_fields = fields


class GarmentSerializer(serializers.ModelSerializer):
    imageUrl = serializers.URLField(source='image_url', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Garment
        fields = (
            'id', 'name', 'category', 'gender', 'fabric', 'color', 'description',
            'imageUrl', 'isActive', 'createdAt', 'updatedAt',
        )
        read_only_fields = fields


class AdminGarmentSerializer(GarmentSerializer):
    createdBy = serializers.SerializerMethodField()

    class Meta(GarmentSerializer.Meta):
        fields = GarmentSerializer.Meta.fields + ('createdBy',)
        read_only_fields = fields

    def get_createdBy(self, obj):
        if obj.created_by is None:
            return None
        return {'id': obj.created_by.pk, 'name': obj.created_by.name, 'email': obj.created_by.email}


class GarmentWriteSerializer(serializers.Serializer):
    """Validates admin create/update payloads; the image is handled by the view."""
    name = serializers.CharField(min_length=2, max_length=100)
    category = serializers.ChoiceField(choices=GarmentCategory.choices)
    gender = serializers.ChoiceField(choices=GarmentGender.choices)
    fabric = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    color = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    isActive = serializers.BooleanField(source='is_active', required=False, default=True)
