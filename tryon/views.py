"""
Django REST Framework Views for Try-On App
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from tryon_backend.errors import NotFoundError, ValidationError
from tryon_backend.pagination import StandardPagination
from tryon_backend.utils import read_image_upload
from users.permissions import IsAdminRole
from .filters import TryonRequestFilter
from .models import TryonRequest
from .serializers import TryonRequestSerializer
from .services.orchestrator import get_tryon_orchestrator

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def tryon_create(request):
    """
    Run a virtual try-on for the authenticated user.

    Accepts (multipart):
    - image: photo of the person
    - garmentId: ID of an active garment

    Optional header Idempotency-Key rejects a repeated submission with 409.

    Returns 200 in both outcomes; a failed composition carries
    success=false together with the id of the failed request, which stays
    in the user's history.
    """
    user = request.user
    garment_id = request.data.get('garmentId')
    if garment_id in (None, ''):
        raise ValidationError('Garment ID is required')

    person_image = read_image_upload(request.FILES.get('image'), settings.MAX_UPLOAD_BYTES)
    idempotency_key = (request.headers.get('Idempotency-Key') or '').strip()[:128] or None

    logger.info("Try-on request received from user=%s garment=%s", user.pk, garment_id)
    outcome = get_tryon_orchestrator().initiate(
        user,
        garment_id,
        person_image,
        request=request,
        idempotency_key=idempotency_key,
    )
    tryon = outcome.tryon

    if outcome.succeeded:
        garment = outcome.garment
        return Response(
            {
                'success': True,
                'message': 'Try-on completed successfully',
                'data': {
                    'id': tryon.pk,
                    'status': tryon.status,
                    'inputImageUrl': tryon.input_image_url,
                    'outputImageUrl': tryon.output_image_url,
                    'garment': {
                        'id': garment.pk,
                        'name': garment.name,
                        'imageUrl': garment.image_url,
                    },
                    'processingTime': tryon.processing_time,
                },
            },
            status=status.HTTP_200_OK,
        )

    return Response(
        {
            'success': False,
            'message': 'Try-on processing failed',
            'error': outcome.error,
            'data': {
                'id': tryon.pk,
                'status': tryon.status,
                'inputImageUrl': tryon.input_image_url,
                'errorMessage': tryon.error_message,
                'processingTime': tryon.processing_time,
            },
        },
        status=status.HTTP_200_OK,
    )


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def tryon_history(request):
    """
    GET: the caller's try-on requests, newest first (page, limit).
    DELETE: remove all of them together with their images.
    """
    if request.method == 'DELETE':
        removed = get_tryon_orchestrator().clear_all(request.user)
        return Response({
            'success': True,
            'message': 'Try-on history cleared',
            'data': {'deleted': removed},
        })

    queryset = (
        TryonRequest.objects.filter(user=request.user)
        .select_related('garment')
        .order_by('-created_at', '-id')
    )
    paginator = StandardPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = TryonRequestSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def tryon_detail(request, tryon_request_id):
    """Get or delete one of the caller's try-on requests."""
    if request.method == 'DELETE':
        get_tryon_orchestrator().delete_one(tryon_request_id, request.user)
        return Response({'success': True, 'message': 'Try-on result deleted'})

    tryon = (
        TryonRequest.objects.select_related('garment')
        .filter(id=tryon_request_id, user=request.user)
        .first()
    )
    if tryon is None:
        raise NotFoundError('Try-on result not found')
    return Response({'success': True, 'data': TryonRequestSerializer(tryon).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_tryon_list(request):
    """
    Query Parameters:
    - status, userId, garmentId
    - created_at__gte / created_at__lte: YYYY-MM-DD
    - page / limit
    """
    queryset = TryonRequest.objects.select_related('garment').order_by('-created_at', '-id')
    filterset = TryonRequestFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        raise ValidationError('Invalid try-on filter')

    paginator = StandardPagination()
    page = paginator.paginate_queryset(filterset.qs, request)
    serializer = TryonRequestSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_tryon_detail(request, tryon_request_id):
    tryon = TryonRequest.objects.select_related('garment', 'user').filter(id=tryon_request_id).first()
    if tryon is None:
        raise NotFoundError('Try-on result not found')
    data = TryonRequestSerializer(tryon).data
    data['user'] = {'id': tryon.user.pk, 'name': tryon.user.name, 'email': tryon.user.email}
    return Response({'success': True, 'data': data})
