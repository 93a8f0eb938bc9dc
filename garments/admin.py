from django.contrib import admin

from .models import Garment


@admin.register(Garment)
class GarmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'gender', 'color', 'is_active', 'created_at')
    list_filter = ('category', 'gender', 'is_active', 'created_at')
    search_fields = ('name', 'description', 'color', 'fabric')
    readonly_fields = ('created_by', 'created_at', 'updated_at')
    ordering = ('-created_at',)
