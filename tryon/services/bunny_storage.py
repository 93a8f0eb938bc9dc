"""
BunnyCDN Storage Service: the blob store for every image the service keeps.

Images are normalised with Pillow before upload (WEBP, fixed quality);
try-on inputs are additionally cropped to the canonical model input size.
"""

import logging
import uuid
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Tuple

import requests
from PIL import Image as PILImage
from PIL import ImageOps, UnidentifiedImageError

from tryon_backend.config import ServiceConfig, get_service_config
from tryon_backend.errors import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

IMAGE_FORMAT = 'WEBP'
IMAGE_EXTENSION = 'webp'
IMAGE_CONTENT_TYPE = 'image/webp'


@dataclass(frozen=True)
class StoredBlob:
    url: str
    path: str


def normalize_image(data: bytes, quality: int, size: Optional[Tuple[int, int]] = None) -> bytes:
    """
    Re-encode image bytes as WEBP.

    When size is given the image is scaled and centre-cropped to exactly
    that (width, height).
    """
    try:
        img = PILImage.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError) as e:
        logger.warning("Rejecting unreadable image upload: %s", e)
        raise ValidationError('Uploaded file is not a valid image')

    img = ImageOps.exif_transpose(img)
    if img.mode not in ('RGB', 'RGBA'):
        img = img.convert('RGB')
    if size is not None:
        img = ImageOps.fit(img, size, method=PILImage.Resampling.LANCZOS, centering=(0.5, 0.5))

    out = BytesIO()
    img.save(out, format=IMAGE_FORMAT, quality=quality)
    return out.getvalue()


class BunnyStorageService:
    """
    Upload and delete files in a BunnyCDN storage zone.

    Public URLs are served from the pull zone when one is configured,
    otherwise from the storage endpoint itself.
    """

    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

        if not config.bunny_storage_zone or not config.bunny_access_key:
            logger.warning(
                "BunnyCDN credentials not configured. "
                "Set BUNNY_STORAGE_ZONE and BUNNY_ACCESS_KEY in environment variables or .env file."
            )

    def _storage_url(self, path: str) -> str:
        return f"https://{self.config.bunny_storage_host}/{self.config.bunny_storage_zone}/{path}"

    def public_url(self, path: str) -> str:
        return f"{self.config.public_base_url}/{path}"

    def url_to_path(self, url: Optional[str]) -> Optional[str]:
        """Map a public URL produced by this service back to its storage path."""
        if not url:
            return None
        prefix = self.config.public_base_url + '/'
        if not url.startswith(prefix):
            return None
        path = url[len(prefix):].split('?', 1)[0]
        return path or None

    def upload_bytes(self, data: bytes, path: str, content_type: str = IMAGE_CONTENT_TYPE) -> StoredBlob:
        """
        Upload raw bytes to the storage zone under path.

        Raises:
            ExternalServiceError: credentials missing or the upload was rejected
        """
        if not self.config.bunny_storage_zone or not self.config.bunny_access_key:
            logger.error("BunnyCDN credentials not configured")
            raise ExternalServiceError('Storage is not configured')

        headers = {
            'AccessKey': self.config.bunny_access_key,
            'Content-Type': content_type,
        }
        try:
            response = self.session.put(self._storage_url(path), data=data, headers=headers, timeout=30)
        except requests.RequestException as e:
            logger.error("Error uploading file bytes to BunnyCDN: %s", e, exc_info=True)
            raise ExternalServiceError(f'Storage upload error: {e}')

        if response.status_code not in (200, 201):
            logger.error(
                "Failed to upload file bytes to BunnyCDN. Status: %d, Response: %s",
                response.status_code,
                response.text,
            )
            raise ExternalServiceError(f'Storage upload error: HTTP {response.status_code}')

        blob = StoredBlob(url=self.public_url(path), path=path)
        logger.info("Successfully uploaded %d bytes to BunnyCDN: %s", len(data), blob.url)
        return blob

    def upload(self, data: bytes, folder: str, hint: Optional[str] = None) -> StoredBlob:
        """Normalise an image and upload it under folder with a fresh unique name."""
        optimized = normalize_image(data, quality=self.config.upload_quality)
        return self.upload_bytes(optimized, self._unique_path(folder, hint))

    def upload_tryon_input(self, data: bytes, folder: str) -> StoredBlob:
        """Resize a person photo to the model input size and upload it."""
        size = (self.config.input_width, self.config.input_height)
        processed = normalize_image(data, quality=self.config.input_quality, size=size)
        return self.upload_bytes(processed, self._unique_path(folder))

    def delete(self, path: Optional[str]) -> bool:
        """Delete a stored file. Never raises; returns whether it succeeded."""
        if not path:
            return False
        if not self.config.bunny_storage_zone or not self.config.bunny_access_key:
            logger.error("BunnyCDN credentials not configured, cannot delete %s", path)
            return False
        try:
            response = self.session.delete(
                self._storage_url(path),
                headers={'AccessKey': self.config.bunny_access_key},
                timeout=30,
            )
        except requests.RequestException as e:
            logger.warning("Error deleting %s from BunnyCDN: %s", path, e)
            return False

        if response.status_code not in (200, 204, 404):
            logger.warning(
                "Failed to delete %s from BunnyCDN. Status: %d, Response: %s",
                path,
                response.status_code,
                response.text,
            )
            return False
        logger.info("Deleted %s from BunnyCDN", path)
        return True

    def delete_url(self, url: Optional[str]) -> bool:
        return self.delete(self.url_to_path(url))

    @staticmethod
    def _unique_path(folder: str, hint: Optional[str] = None) -> str:
        name = uuid.uuid4().hex
        if hint:
            stem = ''.join(c for c in hint.rsplit('.', 1)[0] if c.isalnum() or c in '-_')[:40]
            if stem:
                name = f"{stem}_{name}"
        return f"{folder.strip('/')}/{name}.{IMAGE_EXTENSION}"


# Singleton instance
_bunny_storage_service = None


def get_bunny_storage_service() -> BunnyStorageService:
    """Get or create the singleton BunnyCDN storage service instance."""
    global _bunny_storage_service
    if _bunny_storage_service is None:
        _bunny_storage_service = BunnyStorageService(get_service_config())
    return _bunny_storage_service
