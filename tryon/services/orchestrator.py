"""
Try-on request lifecycle.

    initiate()  upload input -> create PROCESSING row -> audit ->
                compose -> upload output -> COMPLETED | FAILED

Nothing is written before the input image is stored. Once the row exists,
every outcome ends in a terminal state before initiate() returns; inference
failures are reported through TryOnOutcome, not raised.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction

from audit.models import AuditLog
from garments.models import Garment
from tryon.models import TryonRequest
from tryon_backend.choices import AuditAction, TryOnStatus
from tryon_backend.config import ServiceConfig, get_service_config
from tryon_backend.errors import ConflictError, NotFoundError, ValidationError

from .bunny_storage import BunnyStorageService, get_bunny_storage_service
from .vertex_tryon import VertexTryOnClient, get_vertex_tryon_client

logger = logging.getLogger(__name__)

INPUT_FOLDER = 'tryon/input'
OUTPUT_FOLDER = 'tryon/output'


@dataclass(frozen=True)
class TryOnOutcome:
    tryon: TryonRequest
    garment: Garment
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.tryon.status == TryOnStatus.COMPLETED


class TryOnOrchestrator:
    """The only writer of TryonRequest status after creation."""

    def __init__(self, config: ServiceConfig, storage: BunnyStorageService, inference: VertexTryOnClient):
        self.config = config
        self.storage = storage
        self.inference = inference

    def initiate(self, user, garment_id, person_image: Optional[bytes], request=None,
                 idempotency_key: Optional[str] = None) -> TryOnOutcome:
        garment = self._active_garment(garment_id)
        if not person_image:
            raise ValidationError('Please upload your photo')
        if idempotency_key:
            self._ensure_new_key(user, idempotency_key)

        # 1. input image; a failure here leaves nothing behind
        input_blob = self.storage.upload_tryon_input(person_image, INPUT_FOLDER)
        logger.info("Try-on input uploaded for user=%s garment=%s: %s", user.pk, garment.pk, input_blob.url)

        # 2. first durable write
        tryon = self._create_record(user, garment, input_blob, idempotency_key)
        logger.info("TryonRequest %s created in processing state", tryon.pk)

        started = time.monotonic()
        duration_ms = None
        output_blob = None
        try:
            # 3.
            AuditLog.record(
                AuditAction.TRYON_REQUEST,
                user,
                {'garmentId': garment.pk, 'tryOnId': tryon.pk},
                request,
            )

            # 4.
            result = self.inference.compose(input_blob.url, garment.image_url)
            duration_ms = result.duration_ms

            if result.ok:
                # 5.
                output_blob = self.storage.upload(result.image_bytes, OUTPUT_FOLDER)
                if tryon.mark_completed(output_blob.url, duration_ms):
                    logger.info("TryonRequest %s completed in %sms", tryon.pk, duration_ms)
                    AuditLog.record(
                        AuditAction.TRYON_COMPLETE,
                        user,
                        {'tryOnId': tryon.pk, 'processingTime': duration_ms},
                        request,
                    )
                else:
                    logger.warning("TryonRequest %s left processing before completion", tryon.pk)
                    self.storage.delete(output_blob.path)
            else:
                # 6.
                self._fail(tryon, user, result.reason, duration_ms, request)

        except Exception as e:
            reason = str(e) or e.__class__.__name__
            logger.exception("Try-on processing error for request %s: %s", tryon.pk, reason)
            if duration_ms is None:
                duration_ms = int(round((time.monotonic() - started) * 1000))
            if tryon.status == TryOnStatus.PROCESSING:
                if output_blob is not None:
                    self.storage.delete(output_blob.path)
                self._fail(tryon, user, reason, duration_ms, request)

        return self._outcome(tryon, garment)

    def delete_one(self, request_id, owner) -> None:
        tryon = TryonRequest.objects.filter(pk=request_id, user=owner).first()
        if tryon is None:
            raise NotFoundError('Try-on result not found')
        self._release_blobs(tryon)
        tryon.delete()
        logger.info("TryonRequest %s deleted by user=%s", request_id, owner.pk)

    def clear_all(self, owner) -> int:
        """Delete every request owned by owner; returns how many were removed."""
        tryons = list(TryonRequest.objects.filter(user=owner))
        for tryon in tryons:
            self._release_blobs(tryon)
        if not tryons:
            return 0
        deleted, _ = TryonRequest.objects.filter(pk__in=[t.pk for t in tryons]).delete()
        logger.info("Cleared %d try-on requests for user=%s", deleted, owner.pk)
        return deleted

    def _active_garment(self, garment_id) -> Garment:
        try:
            garment_pk = int(garment_id)
        except (TypeError, ValueError):
            raise NotFoundError('Garment not found')
        garment = Garment.objects.active().filter(pk=garment_pk).first()
        if garment is None:
            raise NotFoundError('Garment not found')
        return garment

    @staticmethod
    def _ensure_new_key(user, idempotency_key):
        existing = TryonRequest.objects.filter(user=user, idempotency_key=idempotency_key).first()
        if existing is not None:
            raise ConflictError(
                'A try-on request with this idempotency key already exists',
                resource_id=existing.pk,
            )

    def _create_record(self, user, garment, input_blob, idempotency_key) -> TryonRequest:
        try:
            with transaction.atomic():
                return TryonRequest.objects.create(
                    user=user,
                    garment=garment,
                    input_image_url=input_blob.url,
                    status=TryOnStatus.PROCESSING,
                    idempotency_key=idempotency_key or None,
                )
        except IntegrityError:
            self.storage.delete(input_blob.path)
            if idempotency_key:
                self._ensure_new_key(user, idempotency_key)
            raise
        except Exception:
            self.storage.delete(input_blob.path)
            raise

    def _fail(self, tryon, user, reason, duration_ms, request):
        if not tryon.mark_failed(reason, duration_ms):
            logger.warning("TryonRequest %s was no longer processing; failure not recorded", tryon.pk)
            return
        logger.info("TryonRequest %s failed after %sms: %s", tryon.pk, duration_ms, reason)
        AuditLog.record(
            AuditAction.TRYON_FAILED,
            user,
            {'tryOnId': tryon.pk, 'error': reason},
            request,
        )

    @staticmethod
    def _outcome(tryon, garment) -> TryOnOutcome:
        if tryon.status == TryOnStatus.PROCESSING:
            # the terminal write found no PROCESSING row to update
            try:
                tryon.refresh_from_db()
            except TryonRequest.DoesNotExist:
                logger.warning("TryonRequest %s was removed while processing", tryon.pk)
                raise NotFoundError('Try-on request was removed')
        return TryOnOutcome(
            tryon=tryon,
            garment=garment,
            error=tryon.error_message if tryon.status == TryOnStatus.FAILED else None,
        )

    def _release_blobs(self, tryon):
        for url in (tryon.input_image_url, tryon.output_image_url):
            path = self.storage.url_to_path(url)
            if path and not self.storage.delete(path):
                logger.warning("Could not delete blob %s of try-on request %s", path, tryon.pk)


_tryon_orchestrator = None


def get_tryon_orchestrator() -> TryOnOrchestrator:
    """Get or create the singleton orchestrator wired to the shared services."""
    global _tryon_orchestrator
    if _tryon_orchestrator is None:
        _tryon_orchestrator = TryOnOrchestrator(
            get_service_config(),
            get_bunny_storage_service(),
            get_vertex_tryon_client(),
        )
    return _tryon_orchestrator
