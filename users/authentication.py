"""
JWT authentication that also refuses blocked accounts.
"""

from rest_framework_simplejwt.authentication import JWTAuthentication

from tryon_backend.errors import AuthorizationError


class ActiveUserJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if user.is_blocked:
            raise AuthorizationError('Your account has been blocked. Contact support.')
        return user
