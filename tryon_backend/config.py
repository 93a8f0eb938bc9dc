"""
Service configuration.

ServiceConfig is built once from Django settings and handed to the storage,
inference and orchestration components through their constructors.
"""

from dataclasses import dataclass
from typing import Optional

from django.conf import settings


@dataclass(frozen=True)
class ServiceConfig:
    bunny_storage_zone: str
    bunny_access_key: str
    bunny_pull_zone: str
    bunny_storage_host: str
    genai_use_vertexai: str
    google_cloud_project: str
    google_cloud_location: str
    tryon_model: str
    inference_timeout_seconds: int
    download_timeout_seconds: int
    base_steps: Optional[int]
    input_width: int
    input_height: int
    input_quality: int
    upload_quality: int

    @classmethod
    def from_settings(cls) -> 'ServiceConfig':
        tryon = settings.TRYON_CONFIG
        return cls(
            bunny_storage_zone=settings.BUNNY_STORAGE_ZONE,
            bunny_access_key=settings.BUNNY_ACCESS_KEY,
            bunny_pull_zone=settings.BUNNY_PULL_ZONE,
            bunny_storage_host=settings.BUNNY_STORAGE_HOST,
            genai_use_vertexai=settings.GOOGLE_GENAI_USE_VERTEXAI,
            google_cloud_project=settings.GOOGLE_CLOUD_PROJECT,
            google_cloud_location=settings.GOOGLE_CLOUD_LOCATION,
            tryon_model=tryon['model'],
            inference_timeout_seconds=int(tryon['timeout_seconds']),
            download_timeout_seconds=int(tryon['download_timeout_seconds']),
            base_steps=tryon.get('base_steps'),
            input_width=int(tryon['input_width']),
            input_height=int(tryon['input_height']),
            input_quality=int(tryon['input_quality']),
            upload_quality=int(tryon['upload_quality']),
        )

    @property
    def public_base_url(self) -> str:
        """Base URL that uploaded blobs are served from."""
        if self.bunny_pull_zone:
            pull_zone = self.bunny_pull_zone.replace('https://', '').replace('http://', '').rstrip('/')
            return f"https://{pull_zone}"
        return f"https://{self.bunny_storage_host}/{self.bunny_storage_zone}"


_service_config = None


def get_service_config() -> ServiceConfig:
    """Get or create the process-wide configuration instance."""
    global _service_config
    if _service_config is None:
        _service_config = ServiceConfig.from_settings()
    return _service_config
