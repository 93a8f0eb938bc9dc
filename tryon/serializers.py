"""
Serializers for Try-On App
"""

from rest_framework import serializers

from garments.serializers import GarmentSummarySerializer
from .models import TryonRequest


class TryonRequestSerializer(serializers.ModelSerializer):
    """Read-only representation of a try-on request with its garment summary."""
    userId = serializers.IntegerField(source='user_id', read_only=True)
    garmentId = serializers.IntegerField(source='garment_id', read_only=True, allow_null=True)
    garment = GarmentSummarySerializer(read_only=True, allow_null=True)
    inputImageUrl = serializers.URLField(source='input_image_url', read_only=True)
    outputImageUrl = serializers.URLField(source='output_image_url', read_only=True, allow_null=True)
    processingTime = serializers.IntegerField(source='processing_time', read_only=True, allow_null=True)
    errorMessage = serializers.CharField(source='error_message', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = TryonRequest
        fields = (
            'id', 'userId', 'garmentId', 'garment', 'inputImageUrl', 'outputImageUrl',
            'status', 'processingTime', 'errorMessage', 'createdAt', 'updatedAt',
        )
        read_only_fields = fields
