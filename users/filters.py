from django.contrib.auth import get_user_model
from django.db.models import Q
from django_filters import rest_framework as filters

User = get_user_model()


class AdminUserFilter(filters.FilterSet):
    search = filters.CharFilter(method='filter_search')
    isBlocked = filters.BooleanFilter(field_name='is_blocked')

    class Meta:
        model = User
        fields = ['is_blocked']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(email__icontains=value))
