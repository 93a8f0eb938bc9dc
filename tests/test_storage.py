import dataclasses
from io import BytesIO
from unittest import mock

import pytest
import requests
from PIL import Image

from tryon.services.bunny_storage import BunnyStorageService, normalize_image
from tryon_backend.errors import ExternalServiceError, ValidationError


def jpeg_bytes(size=(400, 300), color='red'):
    out = BytesIO()
    Image.new('RGB', size, color).save(out, format='JPEG')
    return out.getvalue()


@pytest.fixture
def session():
    session = mock.Mock(spec=requests.Session)
    session.put.return_value = mock.Mock(status_code=201, text='')
    session.delete.return_value = mock.Mock(status_code=200, text='')
    return session


@pytest.fixture
def bunny(service_config, session):
    return BunnyStorageService(service_config, session=session)


def test_normalize_image_crops_to_target_size():
    data = normalize_image(jpeg_bytes(), quality=90, size=(768, 1024))

    img = Image.open(BytesIO(data))
    assert img.format == 'WEBP'
    assert img.size == (768, 1024)


def test_normalize_image_rejects_garbage():
    with pytest.raises(ValidationError):
        normalize_image(b'not an image', quality=85)


def test_normalize_image_rejects_oversized_dimensions(bunny, session):
    out = BytesIO()
    Image.new('1', (20000, 20000)).save(out, format='PNG')

    with pytest.raises(ValidationError):
        normalize_image(out.getvalue(), quality=85)
    with pytest.raises(ValidationError):
        bunny.upload_tryon_input(out.getvalue(), 'tryon/input')
    session.put.assert_not_called()


def test_upload_tryon_input(bunny, session):
    blob = bunny.upload_tryon_input(jpeg_bytes(), 'tryon/input')

    url, = session.put.call_args.args
    kwargs = session.put.call_args.kwargs
    assert url == f'https://storage.bunnycdn.com/zone/{blob.path}'
    assert kwargs['headers']['AccessKey'] == 'key'
    assert kwargs['headers']['Content-Type'] == 'image/webp'
    assert blob.path.startswith('tryon/input/') and blob.path.endswith('.webp')
    assert blob.url == f'https://storage.bunnycdn.com/zone/{blob.path}'
    assert Image.open(BytesIO(kwargs['data'])).size == (768, 1024)


def test_upload_uses_pull_zone_and_hint(service_config, session):
    config = dataclasses.replace(service_config, bunny_pull_zone='https://cdn.example.net/')
    bunny = BunnyStorageService(config, session=session)

    blob = bunny.upload(jpeg_bytes(), 'garments', hint='Summer Dress.JPG')

    assert blob.path.startswith('garments/SummerDress_')
    assert blob.url == f'https://cdn.example.net/{blob.path}'
    assert bunny.url_to_path(blob.url) == blob.path


def test_upload_rejected_by_storage(bunny, session):
    session.put.return_value = mock.Mock(status_code=401, text='Unauthorized')

    with pytest.raises(ExternalServiceError):
        bunny.upload(jpeg_bytes(), 'garments')


def test_upload_network_error(bunny, session):
    session.put.side_effect = requests.ConnectionError('unreachable')

    with pytest.raises(ExternalServiceError):
        bunny.upload(jpeg_bytes(), 'garments')


def test_upload_without_credentials(service_config, session):
    bunny = BunnyStorageService(dataclasses.replace(service_config, bunny_access_key=''), session=session)

    with pytest.raises(ExternalServiceError):
        bunny.upload(jpeg_bytes(), 'garments')
    session.put.assert_not_called()


def test_url_to_path(bunny):
    assert bunny.url_to_path('https://storage.bunnycdn.com/zone/tryon/output/a.webp') == 'tryon/output/a.webp'
    assert bunny.url_to_path('https://elsewhere.example.com/a.webp') is None
    assert bunny.url_to_path(None) is None


@pytest.mark.parametrize('status_code, expected', [(200, True), (404, True), (500, False)])
def test_delete_status_codes(bunny, session, status_code, expected):
    session.delete.return_value = mock.Mock(status_code=status_code, text='')

    assert bunny.delete('garments/a.webp') is expected


def test_delete_never_raises(bunny, session):
    session.delete.side_effect = requests.Timeout('slow')

    assert bunny.delete('garments/a.webp') is False
    assert bunny.delete(None) is False
