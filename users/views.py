"""
Account views: JWT registration and login, password reset, profile,
favorites and admin user management
"""

import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.core.mail import send_mail
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from analytics.services import AnalyticsAggregator
from audit.models import AuditLog
from audit.serializers import AuditLogSerializer
from garments.models import Garment
from garments.serializers import GarmentSerializer
from tryon.models import TryonRequest
from tryon.serializers import TryonRequestSerializer
from tryon.services.bunny_storage import get_bunny_storage_service
from tryon.services.orchestrator import get_tryon_orchestrator
from tryon_backend.choices import AuditAction, UserRole
from tryon_backend.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from tryon_backend.pagination import StandardPagination
from tryon_backend.utils import read_image_upload
from .filters import AdminUserFilter
from .permissions import IsAdminRole
from .serializers import (
    ChangePasswordSerializer,
    DeleteAccountSerializer,
    ForgotPasswordSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)

PROFILE_FOLDER = 'profiles'


def get_tokens_for_user(user):
    """Generate JWT tokens for user."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def _remove_account(user):
    """Delete a user together with their try-ons and stored images."""
    get_tryon_orchestrator().clear_all(user)
    if user.profile_image_url:
        get_bunny_storage_service().delete_url(user.profile_image_url)
    user.delete()


class RegisterUserView(APIView):
    """
    Accepts: name, email, password
    Returns: JWT tokens (access, refresh) and user data
    """
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("User registered successfully: %s", user.email)
        AuditLog.record(AuditAction.USER_REGISTER, user, {'email': user.email}, request)

        return Response(
            {
                'success': True,
                'message': 'User registered successfully',
                'data': {
                    'tokens': get_tokens_for_user(user),
                    'user': UserSerializer(user).data,
                },
            },
            status=status.HTTP_201_CREATED,
        )


class LoginUserView(APIView):
    """
    Accepts: email, password
    Returns: JWT tokens (access, refresh) and user data
    """
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']

        user = authenticate(request, username=email, password=serializer.validated_data['password'])
        if user is None:
            logger.warning("Failed login attempt for email: %s", email)
            raise AuthenticationError('Invalid email or password')
        if user.is_blocked:
            logger.warning("Login attempt for blocked user: %s", email)
            raise AuthorizationError('Your account has been blocked. Contact support.')

        logger.info("User logged in successfully: %s", user.email)
        AuditLog.record(AuditAction.USER_LOGIN, user, None, request)

        return Response({
            'success': True,
            'message': 'Login successful',
            'data': {
                'tokens': get_tokens_for_user(user),
                'user': UserSerializer(user).data,
            },
        })


class LogoutUserView(APIView):
    """Tokens are stateless; logout is recorded and the client drops them."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        AuditLog.record(AuditAction.USER_LOGOUT, request.user, None, request)
        return Response({'success': True, 'message': 'Logged out successfully'})


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'success': True, 'data': UserSerializer(request.user).data})


class ForgotPasswordView(APIView):
    """
    Issue a one-hour reset token.

    The response is the same whether or not the email is registered.
    """
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = {
            'success': True,
            'message': 'If that email is registered, a password reset link has been sent',
        }

        user = User.objects.filter(email=serializer.validated_data['email']).first()
        if user is None:
            return Response(payload)

        token = user.issue_password_reset(settings.PASSWORD_RESET_TIMEOUT_SECONDS)
        send_mail(
            'Reset your password',
            f'Use this token to reset your password: {token}\nIt expires in one hour.',
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
            fail_silently=True,
        )
        AuditLog.record(AuditAction.PASSWORD_RESET_REQUEST, user, None, request)
        if settings.DEBUG:
            payload['resetToken'] = token
        return Response(payload)


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(
            reset_password_token=User.hash_reset_token(serializer.validated_data['token']),
            reset_password_expires__gt=timezone.now(),
        ).first()
        if user is None:
            raise ValidationError('Invalid or expired reset token')

        user.set_password(serializer.validated_data['password'])
        user.clear_password_reset()
        user.save()
        AuditLog.record(AuditAction.PASSWORD_RESET_COMPLETE, user, None, request)
        return Response({'success': True, 'message': 'Password has been reset'})


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def profile(request):
    user = request.user
    if request.method == 'GET':
        return Response({'success': True, 'data': UserSerializer(user).data})

    serializer = ProfileUpdateSerializer(user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    AuditLog.record(AuditAction.PROFILE_UPDATE, user, {'fields': serializer.updated_fields}, request)
    return Response({'success': True, 'message': 'Profile updated', 'data': UserSerializer(user).data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def profile_image(request):
    upload = request.FILES.get('image')
    image = read_image_upload(upload, settings.MAX_UPLOAD_BYTES)
    if not image:
        raise ValidationError('Please upload an image')

    user = request.user
    storage = get_bunny_storage_service()
    blob = storage.upload(image, PROFILE_FOLDER, hint=upload.name)
    old_url = user.profile_image_url
    user.profile_image_url = blob.url
    user.save(update_fields=['profile_image_url', 'updated_at'])
    if old_url:
        storage.delete_url(old_url)

    AuditLog.record(AuditAction.PROFILE_IMAGE_UPLOAD, user, {'url': blob.url}, request)
    return Response({'success': True, 'message': 'Profile image updated', 'data': UserSerializer(user).data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = request.user
    if not user.check_password(serializer.validated_data['currentPassword']):
        raise ValidationError('Current password is incorrect')

    user.set_password(serializer.validated_data['newPassword'])
    user.save()
    AuditLog.record(AuditAction.PROFILE_UPDATE, user, {'fields': ['password']}, request)
    return Response({'success': True, 'message': 'Password changed successfully'})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_account(request):
    serializer = DeleteAccountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = request.user
    if not user.check_password(serializer.validated_data['password']):
        raise ValidationError('Password is incorrect')
    if user.is_admin:
        raise ValidationError('Admin accounts cannot be deleted')

    email = user.email
    AuditLog.record(AuditAction.ACCOUNT_DELETE, user, {'userId': user.pk, 'email': email}, request)
    _remove_account(user)
    logger.info("Account deleted: %s", email)
    return Response({'success': True, 'message': 'Account deleted'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def favorite_list(request):
    garments = request.user.favorites.order_by('-created_at')
    return Response({'success': True, 'data': GarmentSerializer(garments, many=True).data})


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def favorite_detail(request, garment_id):
    """Favorites are a set: adding twice or removing an absent garment changes nothing."""
    user = request.user
    if request.method == 'POST':
        garment = Garment.objects.active().filter(pk=garment_id).first()
        if garment is None:
            raise NotFoundError('Garment not found')
        user.favorites.add(garment)
        message = 'Added to favorites'
    else:
        user.favorites.remove(garment_id)
        message = 'Removed from favorites'

    favorites = list(user.favorites.order_by('pk').values_list('pk', flat=True))
    return Response({'success': True, 'message': message, 'data': {'favorites': favorites}})


def _get_managed_user(user_id):
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFoundError('User not found')
    return user


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_user_list(request):
    """
    Query Parameters:
    - search: name or email substring
    - isBlocked: true / false
    - page / limit
    """
    queryset = User.objects.filter(role=UserRole.USER).order_by('-created_at')
    filterset = AdminUserFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        raise ValidationError('Invalid user filter')

    paginator = StandardPagination()
    page = paginator.paginate_queryset(filterset.qs, request)
    return paginator.get_paginated_response(UserSerializer(page, many=True).data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_user_block(request, user_id):
    """Toggle the blocked flag of a regular account."""
    user = _get_managed_user(user_id)
    if user.is_admin:
        raise ValidationError('Cannot block admin users')

    user.is_blocked = not user.is_blocked
    user.save(update_fields=['is_blocked', 'updated_at'])
    action = AuditAction.USER_BLOCK if user.is_blocked else AuditAction.USER_UNBLOCK
    AuditLog.record(action, request.user, {'targetUserId': user.pk, 'email': user.email}, request)
    logger.info("User %s %s by admin=%s", user.pk, action, request.user.pk)

    return Response({
        'success': True,
        'message': 'User blocked' if user.is_blocked else 'User unblocked',
        'data': UserSerializer(user).data,
    })


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_user_delete(request, user_id):
    user = _get_managed_user(user_id)
    if user.is_admin:
        raise ValidationError('Cannot delete admin users')

    AuditLog.record(
        AuditAction.ADMIN_ACTION,
        request.user,
        {'action': 'delete_user', 'targetUserId': user.pk, 'email': user.email},
        request,
    )
    _remove_account(user)
    logger.info("User %s deleted by admin=%s", user_id, request.user.pk)
    return Response({'success': True, 'message': 'User deleted'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_user_activity(request, user_id):
    user = _get_managed_user(user_id)
    tryons = TryonRequest.objects.filter(user=user).select_related('garment').order_by('-created_at', '-id')[:10]
    logs = AuditLog.objects.filter(user=user).order_by('-created_at', '-id')[:20]
    return Response({
        'success': True,
        'data': {
            'user': UserSerializer(user).data,
            'stats': AnalyticsAggregator().user_activity(user),
            'recentTryOns': TryonRequestSerializer(tryons, many=True).data,
            'recentLogs': AuditLogSerializer(logs, many=True).data,
        },
    })
