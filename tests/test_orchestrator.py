import pytest
from django.db import IntegrityError, transaction

from audit.models import AuditLog
from tryon.models import TryonRequest
from tryon.services.vertex_tryon import InferenceFailure
from tryon_backend.choices import AuditAction, TryOnStatus
from tryon_backend.errors import ConflictError, ExternalServiceError, NotFoundError, ValidationError

pytestmark = pytest.mark.django_db


def actions():
    return list(AuditLog.objects.order_by('id').values_list('action', flat=True))


def test_successful_tryon_completes_record(orchestrator, storage, inference, user, garment):
    outcome = orchestrator.initiate(user, garment.pk, b'photo')

    assert outcome.succeeded
    assert outcome.error is None
    tryon = TryonRequest.objects.get(pk=outcome.tryon.pk)
    assert tryon.status == TryOnStatus.COMPLETED
    assert tryon.processing_time == 2000
    assert tryon.output_image_url.startswith('https://cdn.test/tryon/output/')
    assert tryon.error_message is None
    assert [folder for folder, _ in storage.uploads] == ['tryon/input', 'tryon/output']
    assert inference.calls == [(tryon.input_image_url, garment.image_url)]
    assert actions() == [AuditAction.TRYON_REQUEST, AuditAction.TRYON_COMPLETE]


def test_inference_failure_is_returned_not_raised(orchestrator, inference, user, garment):
    inference.result = InferenceFailure(reason='model timeout', duration_ms=90000)

    outcome = orchestrator.initiate(user, garment.pk, b'photo')

    assert not outcome.succeeded
    assert outcome.error == 'model timeout'
    tryon = TryonRequest.objects.get(pk=outcome.tryon.pk)
    assert tryon.status == TryOnStatus.FAILED
    assert tryon.error_message == 'model timeout'
    assert tryon.output_image_url is None
    assert tryon.processing_time == 90000
    assert actions() == [AuditAction.TRYON_REQUEST, AuditAction.TRYON_FAILED]


@pytest.mark.parametrize('garment_id', [999999, 'abc', None])
def test_unknown_garment_creates_nothing(orchestrator, storage, user, garment_id):
    with pytest.raises(NotFoundError):
        orchestrator.initiate(user, garment_id, b'photo')
    assert TryonRequest.objects.count() == 0
    assert storage.uploads == []


def test_inactive_garment_creates_nothing(orchestrator, storage, user, make_garment):
    hidden = make_garment(name='Old Kurti', is_active=False)

    with pytest.raises(NotFoundError):
        orchestrator.initiate(user, hidden.pk, b'photo')
    assert TryonRequest.objects.count() == 0
    assert storage.uploads == []


def test_missing_garment_reported_before_missing_image(orchestrator, user):
    with pytest.raises(NotFoundError):
        orchestrator.initiate(user, 424242, None)


def test_empty_image_rejected(orchestrator, storage, user, garment):
    with pytest.raises(ValidationError):
        orchestrator.initiate(user, garment.pk, b'')
    assert TryonRequest.objects.count() == 0
    assert storage.uploads == []


def test_input_upload_failure_leaves_no_record(orchestrator, storage, user, garment):
    storage.fail_folders.add('tryon/input')

    with pytest.raises(ExternalServiceError):
        orchestrator.initiate(user, garment.pk, b'photo')
    assert TryonRequest.objects.count() == 0
    assert AuditLog.objects.count() == 0


def test_output_upload_failure_marks_failed(orchestrator, storage, user, garment):
    storage.fail_folders.add('tryon/output')

    outcome = orchestrator.initiate(user, garment.pk, b'photo')

    tryon = TryonRequest.objects.get(pk=outcome.tryon.pk)
    assert tryon.status == TryOnStatus.FAILED
    assert tryon.output_image_url is None
    assert 'Storage upload error' in tryon.error_message
    assert tryon.processing_time == 2000


def test_unexpected_inference_exception_marks_failed(orchestrator, inference, user, garment):
    inference.result = RuntimeError('connection reset')

    outcome = orchestrator.initiate(user, garment.pk, b'photo')

    assert outcome.tryon.status == TryOnStatus.FAILED
    assert outcome.error == 'connection reset'
    assert TryonRequest.objects.filter(status=TryOnStatus.PROCESSING).count() == 0


def test_audit_failure_before_inference_marks_failed(monkeypatch, orchestrator, inference, user, garment):
    original = AuditLog.record

    def flaky_record(action, *args, **kwargs):
        if action == AuditAction.TRYON_REQUEST:
            raise RuntimeError('audit unavailable')
        return original(action, *args, **kwargs)

    monkeypatch.setattr(AuditLog, 'record', flaky_record)

    outcome = orchestrator.initiate(user, garment.pk, b'photo')

    assert outcome.tryon.status == TryOnStatus.FAILED
    assert outcome.error == 'audit unavailable'
    assert inference.calls == []


@pytest.mark.parametrize('result', [
    None,
    InferenceFailure(reason='model timeout', duration_ms=10),
])
def test_request_cleared_while_processing(monkeypatch, orchestrator, inference, user, garment, result):
    if result is not None:
        inference.result = result
    compose = inference.compose

    def compose_then_clear(person_image_url, garment_image_url):
        outcome = compose(person_image_url, garment_image_url)
        orchestrator.clear_all(user)
        return outcome

    monkeypatch.setattr(inference, 'compose', compose_then_clear)

    with pytest.raises(NotFoundError, match='removed'):
        orchestrator.initiate(user, garment.pk, b'photo')
    assert TryonRequest.objects.count() == 0
    assert actions() == [AuditAction.TRYON_REQUEST]


def test_repeated_submissions_without_key_are_independent(orchestrator, user, garment):
    first = orchestrator.initiate(user, garment.pk, b'photo')
    second = orchestrator.initiate(user, garment.pk, b'photo')

    assert first.tryon.pk != second.tryon.pk
    assert TryonRequest.objects.filter(user=user).count() == 2


def test_idempotency_key_rejects_repeat(orchestrator, storage, user, garment):
    first = orchestrator.initiate(user, garment.pk, b'photo', idempotency_key='abc-1')

    with pytest.raises(ConflictError) as exc_info:
        orchestrator.initiate(user, garment.pk, b'photo', idempotency_key='abc-1')

    assert exc_info.value.resource_id == first.tryon.pk
    assert TryonRequest.objects.count() == 1
    assert len(storage.uploads) == 2


def test_idempotency_key_is_scoped_per_user(orchestrator, user, other_user, garment):
    orchestrator.initiate(user, garment.pk, b'photo', idempotency_key='shared')
    orchestrator.initiate(other_user, garment.pk, b'photo', idempotency_key='shared')

    assert TryonRequest.objects.count() == 2


def test_delete_one_twice(orchestrator, storage, user, garment):
    tryon = orchestrator.initiate(user, garment.pk, b'photo').tryon

    orchestrator.delete_one(tryon.pk, user)
    assert not TryonRequest.objects.filter(pk=tryon.pk).exists()
    assert storage.deleted == ['tryon/input/blob1.webp', 'tryon/output/blob2.webp']

    with pytest.raises(NotFoundError):
        orchestrator.delete_one(tryon.pk, user)


def test_delete_one_requires_ownership(orchestrator, user, other_user, garment):
    tryon = orchestrator.initiate(user, garment.pk, b'photo').tryon

    with pytest.raises(NotFoundError):
        orchestrator.delete_one(tryon.pk, other_user)
    assert TryonRequest.objects.filter(pk=tryon.pk).exists()


def test_delete_proceeds_when_blob_delete_fails(orchestrator, storage, user, garment):
    tryon = orchestrator.initiate(user, garment.pk, b'photo').tryon
    storage.delete_ok = False

    orchestrator.delete_one(tryon.pk, user)

    assert TryonRequest.objects.count() == 0


def test_clear_all_without_requests_is_noop(orchestrator, storage, user):
    assert orchestrator.clear_all(user) == 0
    assert storage.deleted == []


def test_clear_all_only_touches_owner(orchestrator, storage, inference, user, other_user, garment):
    inference.result = InferenceFailure(reason='model timeout', duration_ms=10)
    for _ in range(3):
        orchestrator.initiate(user, garment.pk, b'photo')
    kept = orchestrator.initiate(other_user, garment.pk, b'photo').tryon
    storage.delete_ok = False

    assert orchestrator.clear_all(user) == 3

    assert list(TryonRequest.objects.values_list('pk', flat=True)) == [kept.pk]
    assert len(storage.deleted) == 3


def test_terminal_state_is_not_rewritten(make_tryon, user, garment):
    tryon = make_tryon(user, garment, status=TryOnStatus.COMPLETED)

    assert tryon.mark_failed('late failure', 5) is False

    tryon.refresh_from_db()
    assert tryon.status == TryOnStatus.COMPLETED
    assert tryon.error_message is None


def test_database_rejects_completed_without_output(user, garment):
    with pytest.raises(IntegrityError), transaction.atomic():
        TryonRequest.objects.create(
            user=user,
            garment=garment,
            input_image_url='https://cdn.test/tryon/input/in.webp',
            status=TryOnStatus.COMPLETED,
        )


def test_database_rejects_failed_without_error(user, garment):
    with pytest.raises(IntegrityError), transaction.atomic():
        TryonRequest.objects.create(
            user=user,
            garment=garment,
            input_image_url='https://cdn.test/tryon/input/in.webp',
            status=TryOnStatus.FAILED,
        )
