from django_filters import rest_framework as filters

from tryon_backend.choices import TryOnStatus
from .models import TryonRequest


class TryonRequestFilter(filters.FilterSet):
    """FilterSet for TryonRequest with inline filtering."""
    status = filters.ChoiceFilter(choices=TryOnStatus.choices)
    userId = filters.NumberFilter(field_name='user_id')
    garmentId = filters.NumberFilter(field_name='garment_id')
    created_at__gte = filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    created_at__lte = filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = TryonRequest
        fields = ['status']
