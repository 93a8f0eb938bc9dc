"""
Admin view over the audit trail
"""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from tryon_backend.errors import ValidationError
from tryon_backend.pagination import LogPagination
from users.permissions import IsAdminRole
from .filters import AuditLogFilter
from .models import AuditLog
from .serializers import AuditLogSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_log_list(request):
    """
    List audit entries, newest first.

    Query Parameters:
    - action: Filter by action tag
    - userId: Filter by acting user
    - page / limit: Pagination (default limit 50)
    """
    queryset = AuditLog.objects.select_related('user').order_by('-created_at', '-id')
    filterset = AuditLogFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        raise ValidationError('Invalid log filter')

    paginator = LogPagination()
    page = paginator.paginate_queryset(filterset.qs, request)
    serializer = AuditLogSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)
