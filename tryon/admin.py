"""
Admin configuration for Try-On App
"""

from django.contrib import admin

from tryon.models import TryonRequest


@admin.register(TryonRequest)
class TryonRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'user_info', 'garment', 'status', 'processing_time', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['user__email', 'garment__name']
    readonly_fields = [
        'user', 'garment', 'input_image_url', 'output_image_url', 'status',
        'processing_time', 'error_message', 'idempotency_key', 'created_at', 'updated_at',
    ]

    def user_info(self, obj):
        if obj.user:
            return f"{obj.user.id} - {obj.user.email}"
        return "Anonymous"
    user_info.short_description = "User Information"

    def has_add_permission(self, request):
        return False
