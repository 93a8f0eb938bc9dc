from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsAdminRole
from .services import AnalyticsAggregator


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_analytics(request):
    """System overview, popular garments, 7-day trend and category split."""
    return Response({'success': True, 'data': AnalyticsAggregator().dashboard()})
