from django.db.models import Q
from django_filters import rest_framework as filters

from tryon_backend.choices import GarmentCategory, GarmentGender
from .models import Garment


class GarmentFilter(filters.FilterSet):
    """Public catalog filters."""
    category = filters.ChoiceFilter(choices=GarmentCategory.choices)
    gender = filters.ChoiceFilter(choices=GarmentGender.choices)
    color = filters.CharFilter(lookup_expr='icontains')
    fabric = filters.CharFilter(lookup_expr='icontains')
    search = filters.CharFilter(method='filter_search')
    sort = filters.OrderingFilter(
        fields=(
            ('created_at', 'createdAt'),
            ('name', 'name'),
            ('category', 'category'),
        ),
    )

    class Meta:
        model = Garment
        fields = ['category', 'gender', 'color', 'fabric']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))


class AdminGarmentFilter(filters.FilterSet):
    category = filters.ChoiceFilter(choices=GarmentCategory.choices)
    isActive = filters.BooleanFilter(field_name='is_active')
    search = filters.CharFilter(method='filter_search')

    class Meta:
        model = Garment
        fields = ['category']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))
