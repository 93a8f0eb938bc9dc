import dataclasses

import pytest
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from garments.models import Garment
from tryon.models import TryonRequest
from tryon.services.bunny_storage import StoredBlob
from tryon.services.orchestrator import TryOnOrchestrator
from tryon.services.vertex_tryon import InferenceSuccess
from tryon_backend.choices import GarmentCategory, GarmentGender, TryOnStatus
from tryon_backend.config import ServiceConfig
from tryon_backend.errors import ExternalServiceError
from users.models import User

CDN = 'https://cdn.test'


class FakeStorage:
    """In-memory stand-in for BunnyStorageService."""

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail_folders = set()
        self.delete_ok = True

    def _store(self, data, folder):
        if folder in self.fail_folders:
            raise ExternalServiceError('Storage upload error: HTTP 500')
        path = f"{folder}/blob{len(self.uploads) + 1}.webp"
        self.uploads.append((folder, data))
        return StoredBlob(url=f"{CDN}/{path}", path=path)

    def upload(self, data, folder, hint=None):
        return self._store(data, folder)

    def upload_tryon_input(self, data, folder):
        return self._store(data, folder)

    def url_to_path(self, url):
        if not url or not url.startswith(CDN + '/'):
            return None
        return url[len(CDN) + 1:]

    def delete(self, path):
        if not path:
            return False
        self.deleted.append(path)
        return self.delete_ok

    def delete_url(self, url):
        return self.delete(self.url_to_path(url))


class FakeInference:
    def __init__(self, result=None):
        self.result = result or InferenceSuccess(image_bytes=b'composited', duration_ms=2000)
        self.calls = []

    def compose(self, person_image_url, garment_image_url):
        self.calls.append((person_image_url, garment_image_url))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture(autouse=True)
def _no_rate_limit(settings):
    settings.RATELIMIT_ENABLE = False
    cache.clear()


@pytest.fixture
def service_config():
    return dataclasses.replace(
        ServiceConfig.from_settings(),
        bunny_storage_zone='zone',
        bunny_access_key='key',
        bunny_pull_zone='',
        bunny_storage_host='storage.bunnycdn.com',
    )


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def inference():
    return FakeInference()


@pytest.fixture
def orchestrator(service_config, storage, inference):
    return TryOnOrchestrator(service_config, storage, inference)


@pytest.fixture
def wired(monkeypatch, orchestrator, storage):
    """Point every view at the fake storage and inference."""
    monkeypatch.setattr('tryon.views.get_tryon_orchestrator', lambda: orchestrator)
    monkeypatch.setattr('users.views.get_tryon_orchestrator', lambda: orchestrator)
    monkeypatch.setattr('users.views.get_bunny_storage_service', lambda: storage)
    monkeypatch.setattr('garments.views.get_bunny_storage_service', lambda: storage)
    return orchestrator


@pytest.fixture
def user(db):
    return User.objects.create_user(email='u1@example.com', password='secret123', name='User One')


@pytest.fixture
def other_user(db):
    return User.objects.create_user(email='u2@example.com', password='secret123', name='User Two')


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(email='admin@example.com', password='secret123', name='Admin')


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_client(user):
    client = APIClient()
    client.force_authenticate(user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(admin_user)
    return client


@pytest.fixture
def make_garment(db):
    def _make(name='Blue Shirt', category=GarmentCategory.SHIRT, is_active=True, **extra):
        extra.setdefault('gender', GarmentGender.MALE)
        extra.setdefault('image_url', f"{CDN}/garments/{name.lower().replace(' ', '-')}.webp")
        return Garment.objects.create(name=name, category=category, is_active=is_active, **extra)
    return _make


@pytest.fixture
def garment(make_garment):
    return make_garment(color='Blue')


@pytest.fixture
def make_tryon(db):
    def _make(user, garment, status=TryOnStatus.COMPLETED, processing_time=1000, created_at=None):
        fields = {
            'user': user,
            'garment': garment,
            'input_image_url': f"{CDN}/tryon/input/in.webp",
            'status': status,
            'processing_time': processing_time,
        }
        if status == TryOnStatus.COMPLETED:
            fields['output_image_url'] = f"{CDN}/tryon/output/out.webp"
        elif status == TryOnStatus.FAILED:
            fields['error_message'] = 'model timeout'
        tryon = TryonRequest.objects.create(**fields)
        if created_at is not None:
            TryonRequest.objects.filter(pk=tryon.pk).update(created_at=created_at)
            tryon.refresh_from_db()
        return tryon
    return _make


@pytest.fixture
def photo():
    def _photo(name='me.jpg', content=b'person-photo', content_type='image/jpeg'):
        return SimpleUploadedFile(name, content, content_type=content_type)
    return _photo
