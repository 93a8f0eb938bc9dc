"""
API-wide rate limiting, keyed by client IP.
"""

import logging

from django.conf import settings
from django.http import JsonResponse
from django_ratelimit.core import is_ratelimited

logger = logging.getLogger(__name__)

API_PREFIX = '/api/'


class ApiRateLimitMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith(API_PREFIX) and self._is_limited(request):
            logger.warning(
                "Rate limit exceeded for ip=%s path=%s",
                request.META.get('REMOTE_ADDR'),
                request.path,
            )
            return JsonResponse(
                {
                    'success': False,
                    'message': 'Too many requests, please try again later.',
                    'error': 'rate_limited',
                },
                status=429,
            )
        return self.get_response(request)

    def _is_limited(self, request):
        return is_ratelimited(
            request,
            group='api',
            key='ip',
            rate=getattr(settings, 'RATELIMIT_RATE', '100/15m'),
            increment=True,
        )
