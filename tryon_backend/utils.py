"""
Request helpers shared across apps.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_ipv46_address

from .errors import ValidationError


def get_client_ip(request):
    """
    Get the client IP address from the request.
    Handles proxy headers (X-Forwarded-For, X-Real-IP) for production deployments.
    Returns None when the value is not a valid IPv4 or IPv6 address.
    """
    if request is None:
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('HTTP_X_REAL_IP') or request.META.get('REMOTE_ADDR')
    if not ip:
        return None
    try:
        validate_ipv46_address(ip)
    except DjangoValidationError:
        return None
    return ip


def get_user_agent(request):
    if request is None:
        return None
    return request.META.get('HTTP_USER_AGENT') or None


def read_image_upload(upload, max_bytes):
    """
    Read an uploaded image into memory.

    Returns None when nothing was uploaded; raises ValidationError for
    non-image content types and oversize files.
    """
    if upload is None:
        return None
    content_type = getattr(upload, 'content_type', '') or ''
    if content_type and not content_type.startswith('image/'):
        raise ValidationError('Only image files are allowed')
    if upload.size is not None and upload.size > max_bytes:
        raise ValidationError(f'File exceeds max size of {max_bytes} bytes')
    return upload.read()
