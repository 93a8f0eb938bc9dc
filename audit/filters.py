from django_filters import rest_framework as filters

from tryon_backend.choices import AuditAction
from .models import AuditLog


class AuditLogFilter(filters.FilterSet):
    action = filters.ChoiceFilter(choices=AuditAction.choices)
    userId = filters.NumberFilter(field_name='user_id')

    class Meta:
        model = AuditLog
        fields = ['action']
