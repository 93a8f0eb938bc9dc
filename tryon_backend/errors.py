"""
Error taxonomy for the try-on service.

Every error is a DRF APIException so views can simply raise and let
api_exception_handler render the response envelope.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class ServiceError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error'
    default_code = 'service_error'


class ValidationError(ServiceError):
    """Malformed or missing input, rejected before any side effect."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input'
    default_code = 'validation_error'


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication required'
    default_code = 'authentication_error'


class AuthorizationError(ServiceError):
    """Caller lacks ownership or role."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action'
    default_code = 'authorization_error'


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict'
    default_code = 'conflict'

    def __init__(self, detail=None, code=None, resource_id=None):
        super().__init__(detail, code)
        self.resource_id = resource_id


class ExternalServiceError(ServiceError):
    """Blob Store or Inference Client failure."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Upstream service failure'
    default_code = 'external_service_error'
