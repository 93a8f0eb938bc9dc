"""
Garment catalog views: public browsing and admin management
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from analytics.services import AnalyticsAggregator
from audit.models import AuditLog
from tryon.services.bunny_storage import get_bunny_storage_service
from tryon_backend.choices import AuditAction
from tryon_backend.errors import NotFoundError, ValidationError
from tryon_backend.pagination import StandardPagination
from tryon_backend.utils import read_image_upload
from users.permissions import IsAdminRole
from .filters import AdminGarmentFilter, GarmentFilter
from .models import Garment
from .serializers import AdminGarmentSerializer, GarmentSerializer, GarmentWriteSerializer

logger = logging.getLogger(__name__)

GARMENT_FOLDER = 'garments'


def _filtered(filterset_class, request, queryset):
    filterset = filterset_class(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        raise ValidationError('Invalid garment filter')
    return filterset.qs


@api_view(['GET'])
@permission_classes([AllowAny])
def garment_list(request):
    """
    Active garments, newest first.

    Query Parameters:
    - category, gender, color, fabric, search
    - sort: createdAt | -createdAt | name | -name | category
    - page / limit
    """
    queryset = _filtered(GarmentFilter, request, Garment.objects.active())
    paginator = StandardPagination()
    page = paginator.paginate_queryset(queryset, request)
    return paginator.get_paginated_response(GarmentSerializer(page, many=True).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def garment_categories(request):
    """Active garment counts per category, largest first."""
    return Response({'success': True, 'data': AnalyticsAggregator().category_distribution()})


@api_view(['GET'])
@permission_classes([AllowAny])
def garment_colors(request):
    colors = (
        Garment.objects.active()
        .exclude(color__isnull=True)
        .exclude(color='')
        .order_by('color')
        .values_list('color', flat=True)
        .distinct()
    )
    return Response({'success': True, 'data': list(colors)})


@api_view(['GET'])
@permission_classes([AllowAny])
def garment_detail(request, pk):
    garment = Garment.objects.active().filter(pk=pk).first()
    if garment is None:
        raise NotFoundError('Garment not found')
    return Response({'success': True, 'data': GarmentSerializer(garment).data})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def admin_garment_list(request):
    """
    GET: every garment including inactive ones (category, isActive, search).
    POST: create a garment; multipart with a required image file.
    """
    if request.method == 'GET':
        queryset = _filtered(AdminGarmentFilter, request, Garment.objects.select_related('created_by'))
        paginator = StandardPagination()
        page = paginator.paginate_queryset(queryset, request)
        return paginator.get_paginated_response(AdminGarmentSerializer(page, many=True).data)

    serializer = GarmentWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    upload = request.FILES.get('image')
    image = read_image_upload(upload, settings.MAX_UPLOAD_BYTES)
    if not image:
        raise ValidationError('Garment image is required')

    blob = get_bunny_storage_service().upload(image, GARMENT_FOLDER, hint=upload.name)
    garment = Garment.objects.create(
        image_url=blob.url,
        created_by=request.user,
        **serializer.validated_data,
    )
    logger.info("Garment %s created by admin=%s", garment.pk, request.user.pk)
    AuditLog.record(
        AuditAction.GARMENT_CREATE,
        request.user,
        {'garmentId': garment.pk, 'name': garment.name},
        request,
    )
    return Response(
        {'success': True, 'message': 'Garment created', 'data': AdminGarmentSerializer(garment).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def admin_garment_detail(request, pk):
    """
    PUT: partial update; a new image replaces the stored one.
    DELETE: remove the garment and its image. Past try-on requests keep
    their rows with the garment reference cleared.
    """
    garment = Garment.objects.filter(pk=pk).first()
    if garment is None:
        raise NotFoundError('Garment not found')
    storage = get_bunny_storage_service()

    if request.method == 'DELETE':
        image_url = garment.image_url
        name = garment.name
        garment.delete()
        storage.delete_url(image_url)
        logger.info("Garment %s deleted by admin=%s", pk, request.user.pk)
        AuditLog.record(AuditAction.GARMENT_DELETE, request.user, {'garmentId': pk, 'name': name}, request)
        return Response({'success': True, 'message': 'Garment deleted'})

    serializer = GarmentWriteSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    changes = dict(serializer.validated_data)

    upload = request.FILES.get('image')
    image = read_image_upload(upload, settings.MAX_UPLOAD_BYTES)
    old_image_url = None
    if image:
        blob = storage.upload(image, GARMENT_FOLDER, hint=upload.name)
        old_image_url = garment.image_url
        changes['image_url'] = blob.url

    for field, value in changes.items():
        setattr(garment, field, value)
    garment.save()

    if old_image_url:
        storage.delete_url(old_image_url)

    AuditLog.record(
        AuditAction.GARMENT_UPDATE,
        request.user,
        {'garmentId': garment.pk, 'fields': sorted(changes)},
        request,
    )
    return Response({'success': True, 'message': 'Garment updated', 'data': AdminGarmentSerializer(garment).data})
