"""
Models for Try-On App
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from tryon_backend.choices import TryOnStatus


class TryonRequest(models.Model):
    """
    One attempt to composite a person photo with a garment.

    Rows are created in PROCESSING and moved exactly once more, by the
    orchestrator, to COMPLETED or FAILED. The output URL exists only on
    completed rows and the error message only on failed rows.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='tryon_requests')
    garment = models.ForeignKey(
        'garments.Garment',
        on_delete=models.SET_NULL,
        null=True,
        related_name='tryon_requests',
    )
    input_image_url = models.URLField(max_length=500)
    output_image_url = models.URLField(max_length=500, blank=True, null=True)
    status = models.CharField(max_length=20, choices=TryOnStatus.choices, default=TryOnStatus.PROCESSING)
    processing_time = models.PositiveIntegerField(blank=True, null=True, help_text="Milliseconds")
    error_message = models.TextField(blank=True, null=True)
    idempotency_key = models.CharField(max_length=128, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='tryon_tryon_user_id_5c2e7a_idx'),
            models.Index(fields=['status'], name='tryon_tryon_status_b71d04_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status=TryOnStatus.COMPLETED, output_image_url__isnull=False)
                    | (~Q(status=TryOnStatus.COMPLETED) & Q(output_image_url__isnull=True))
                ),
                name='tryon_output_iff_completed',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status=TryOnStatus.FAILED, error_message__isnull=False)
                    | (~Q(status=TryOnStatus.FAILED) & Q(error_message__isnull=True))
                ),
                name='tryon_error_iff_failed',
            ),
            models.UniqueConstraint(
                fields=['user', 'idempotency_key'],
                condition=Q(idempotency_key__isnull=False),
                name='tryon_unique_idempotency_key',
            ),
        ]

    def __str__(self):
        return f"TryonRequest #{self.id} | User: {self.user_id} | Garment: {self.garment_id} | Status: {self.status}"

    def _finish(self, **fields):
        """
        Move a PROCESSING row to a terminal state in a single conditional
        UPDATE. Returns False when the row was no longer PROCESSING.
        """
        fields['updated_at'] = timezone.now()
        updated = TryonRequest.objects.filter(
            pk=self.pk,
            status=TryOnStatus.PROCESSING,
        ).update(**fields)
        if updated:
            for name, value in fields.items():
                setattr(self, name, value)
        return bool(updated)

    def mark_completed(self, output_image_url, processing_time):
        return self._finish(
            status=TryOnStatus.COMPLETED,
            output_image_url=output_image_url,
            processing_time=processing_time,
        )

    def mark_failed(self, error_message, processing_time):
        return self._finish(
            status=TryOnStatus.FAILED,
            error_message=error_message or 'Try-on processing failed',
            processing_time=processing_time,
        )
