"""
Vertex AI Virtual Try-On client.

compose() is the only entry point the orchestrator uses. Whatever the remote
model returns (inline bytes, a storage URI, nothing at all, an exception or no
answer before the timeout) is normalised here into InferenceSuccess or
InferenceFailure.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

import google.auth
import requests
from google import genai
from google.auth.exceptions import DefaultCredentialsError
from google.genai.types import (
    Image as GenAIImage,
    ProductImage,
    RecontextImageConfig,
    RecontextImageSource,
)

from tryon_backend.config import ServiceConfig, get_service_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InferenceSuccess:
    image_bytes: bytes
    duration_ms: int
    ok: bool = True


@dataclass(frozen=True)
class InferenceFailure:
    reason: str
    duration_ms: int
    ok: bool = False


InferenceResult = Union[InferenceSuccess, InferenceFailure]


class InferenceError(Exception):
    """Raised inside the client for any condition that becomes a failure result."""


def check_credentials():
    """
    Check if Application Default Credentials are set up.
    Returns (credentials, project_id) if successful, (None, None) otherwise.
    """
    try:
        credentials, project_id = google.auth.default()
        logger.debug("Obtained ADC credentials for project_id=%s", project_id)
        return credentials, project_id
    except DefaultCredentialsError as e:
        logger.error("Application Default Credentials not found: %s", e)
        return None, None


class VertexTryOnClient:
    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def create_client(self):
        """
        Create a Vertex-AI-backed Gen AI client.

        Requires GOOGLE_CLOUD_PROJECT, GOOGLE_CLOUD_LOCATION and Application
        Default Credentials.
        """
        project = self.config.google_cloud_project
        location = self.config.google_cloud_location
        if not project or not location:
            logger.error(
                "Missing GOOGLE_CLOUD_PROJECT or GOOGLE_CLOUD_LOCATION (project=%s, location=%s)",
                project,
                location,
            )
            raise InferenceError('GOOGLE_CLOUD_PROJECT and GOOGLE_CLOUD_LOCATION must be set')

        creds, detected_project = check_credentials()
        if creds is None:
            raise InferenceError('Application Default Credentials not found')

        use_vertex = str(self.config.genai_use_vertexai).lower() in ('1', 'true', 'yes')
        client = genai.Client(vertexai=use_vertex, project=project, location=location)
        logger.debug(
            "Created Vertex GenAI client for project=%s (detected_project=%s) location=%s",
            project,
            detected_project,
            location,
        )
        return client

    def compose(self, person_image_url: str, garment_image_url: str) -> InferenceResult:
        """Composite the garment onto the person; never raises."""
        started = time.monotonic()
        logger.info(
            "Starting virtual try-on person_image=%s garment_image=%s model=%s",
            person_image_url,
            garment_image_url,
            self.config.tryon_model,
        )
        try:
            person_bytes = self._download(person_image_url)
            garment_bytes = self._download(garment_image_url)
            response = self._call_with_timeout(person_bytes, garment_bytes)
            image_bytes = self._extract_image(response)
        except Exception as e:
            duration_ms = self._elapsed_ms(started)
            reason = str(e) or 'Try-on processing failed'
            logger.warning("Virtual try-on failed after %sms: %s", duration_ms, reason)
            return InferenceFailure(reason=reason, duration_ms=duration_ms)

        duration_ms = self._elapsed_ms(started)
        logger.info("Virtual try-on completed in %sms (%d bytes)", duration_ms, len(image_bytes))
        return InferenceSuccess(image_bytes=image_bytes, duration_ms=duration_ms)

    def _download(self, url: str) -> bytes:
        try:
            response = self.session.get(url, timeout=self.config.download_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise InferenceError(f'Failed to fetch image {url}: {e}')
        return response.content

    def _call_with_timeout(self, person_bytes: bytes, garment_bytes: bytes):
        timeout = self.config.inference_timeout_seconds
        outcome = {}

        def api_thread():
            try:
                outcome['response'] = self._recontext(person_bytes, garment_bytes)
            except Exception as e:
                logger.exception("[thread] Try-on API call raised exception: %r", e)
                outcome['error'] = e

        worker = threading.Thread(target=api_thread, daemon=True)
        worker.start()
        logger.debug("Waiting for try-on response (timeout=%ss, thread_id=%s)", timeout, worker.ident)
        worker.join(timeout=timeout)

        if worker.is_alive():
            raise InferenceError(f'Try-on model timed out after {timeout}s')
        if 'error' in outcome:
            raise outcome['error']
        return outcome.get('response')

    def _recontext(self, person_bytes: bytes, garment_bytes: bytes):
        client = self.create_client()
        source = RecontextImageSource(
            person_image=GenAIImage(image_bytes=person_bytes, mime_type='image/webp'),
            product_images=[
                ProductImage(
                    product_image=GenAIImage(image_bytes=garment_bytes, mime_type='image/webp')
                )
            ],
        )
        config_params = {'number_of_images': 1, 'add_watermark': False}
        if self.config.base_steps is not None:
            config_params['base_steps'] = self.config.base_steps

        return client.models.recontext_image(
            model=self.config.tryon_model,
            source=source,
            config=RecontextImageConfig(**config_params),
        )

    def _extract_image(self, response) -> bytes:
        generated = list(getattr(response, 'generated_images', None) or [])
        if not generated:
            raise InferenceError('No images generated from virtual try-on')

        first = generated[0]
        filtered_reason = getattr(first, 'rai_filtered_reason', None)
        image = getattr(first, 'image', None)
        if image is None:
            raise InferenceError(filtered_reason or 'Unexpected output format from try-on model')

        image_bytes = getattr(image, 'image_bytes', None)
        if image_bytes:
            return image_bytes

        uri = getattr(image, 'gcs_uri', None) or getattr(image, 'url', None)
        if uri and uri.startswith(('http://', 'https://')):
            return self._download(uri)
        raise InferenceError('Unexpected output format from try-on model')

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int(round((time.monotonic() - started) * 1000))


# Singleton instance
_vertex_tryon_client = None


def get_vertex_tryon_client() -> VertexTryOnClient:
    """Get or create the singleton try-on inference client."""
    global _vertex_tryon_client
    if _vertex_tryon_client is None:
        _vertex_tryon_client = VertexTryOnClient(get_service_config())
    return _vertex_tryon_client
