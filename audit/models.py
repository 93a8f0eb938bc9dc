"""
Append-only audit trail of significant user and admin actions.
"""

import logging

from django.conf import settings
from django.db import models

from tryon_backend.choices import AuditAction
from tryon_backend.utils import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)


class AuditLog(models.Model):
    action = models.CharField(max_length=40, choices=AuditAction.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    details = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['action', '-created_at'], name='audit_audit_action_3f0c2b_idx'),
            models.Index(fields=['user', '-created_at'], name='audit_audit_user_id_8d41e6_idx'),
        ]

    def __str__(self):
        return f"{self.action} | User: {self.user_id} | {self.created_at:%Y-%m-%d %H:%M:%S}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ValueError('Audit log entries are immutable')
        super().save(*args, **kwargs)

    @classmethod
    def record(cls, action, user=None, details=None, request=None):
        """Append an entry; request metadata is captured when available."""
        if user is not None and not getattr(user, 'is_authenticated', False):
            user = None
        ip_address = get_client_ip(request)
        user_agent = get_user_agent(request)
        entry = cls.objects.create(
            action=action,
            user=user,
            details=details or {},
            ip_address=ip_address,
            user_agent=user_agent[:512] if user_agent else None,
        )
        logger.debug("Audit %s user=%s details=%s", action, getattr(user, 'pk', None), details)
        return entry
