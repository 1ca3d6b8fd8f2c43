"""Tests for the database-backed collaborator adapter."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from alumni_forms.core.errors import CollaboratorError, NotFoundError, ValidationError
from alumni_forms.db.enums import FormStatus, ProcessOutcome, SubmissionStatus
from alumni_forms.db.models import FormSubmission
from alumni_forms.schemas.forms import FieldDefinition, FormSchema
from alumni_forms.schemas.submissions import SubmissionDraft, SubmittedBy
from alumni_forms.services import contact_service, form_service, submission_processing_service
from alumni_forms.services.collaborators import DatabaseCollaborators


def _schema(**overrides) -> FormSchema:
    data = {
        "title": "Reunion Survey",
        "fields": [FieldDefinition(id="f1", type="text", label="Name", mapped_field="firstName")],
    }
    data.update(overrides)
    return FormSchema(**data)


@pytest.mark.asyncio
async def test_save_load_and_delete_form(db: Session):
    collaborators = DatabaseCollaborators(db)

    saved = await collaborators.save_form(_schema(status=FormStatus.ACTIVE))
    assert saved.id is not None
    assert saved.status == FormStatus.ACTIVE

    renamed = await collaborators.save_form(saved.model_copy(update={"title": "Reunion 2026"}))
    assert renamed.id == saved.id
    assert renamed.title == "Reunion 2026"

    loaded = await collaborators.load_form(saved.id, public_access_only=True)
    assert loaded.fields[0].mapped_field == "firstName"

    await collaborators.persist_submission(
        SubmissionDraft(
            form_id=saved.id,
            submitted_by=SubmittedBy(kind="external_id", name="UVID: u1", external_id="u1"),
        )
    )
    await collaborators.delete_form(saved.id)

    assert await collaborators.load_form(saved.id) is None
    assert db.query(FormSubmission).count() == 0
    with pytest.raises(NotFoundError):
        await collaborators.delete_form(saved.id)


@pytest.mark.asyncio
async def test_save_form_validates(db: Session):
    collaborators = DatabaseCollaborators(db)

    with pytest.raises(ValidationError):
        await collaborators.save_form(_schema(title=""))


@pytest.mark.asyncio
async def test_public_load_hides_drafts(db: Session):
    collaborators = DatabaseCollaborators(db)
    draft = await collaborators.save_form(_schema())

    assert await collaborators.load_form(draft.id, public_access_only=True) is None
    assert (await collaborators.load_form(draft.id)).status == FormStatus.DRAFT


@pytest.mark.asyncio
async def test_contact_and_employment_round_trip(db: Session):
    collaborators = DatabaseCollaborators(db)

    contact = await collaborators.create_contact({"first_name": "Jane"}, external_id="u1")
    assert (await collaborators.find_contact_by_external_id("u1")).id == contact.id

    updated = await collaborators.update_contact(contact.id, {"graduation_year": 2010})
    assert updated.first_name == "Jane"
    assert updated.graduation_year == 2010

    assert await collaborators.find_current_employment(contact.id) is None
    record = await collaborators.create_employment_record(contact.id, {"job_title": "Analyst"})
    assert record.is_current is True
    current = await collaborators.find_current_employment(contact.id)
    assert current.id == record.id

    record = await collaborators.update_employment_record(record.id, {"organization": "Acme"})
    assert record.job_title == "Analyst"
    assert record.organization == "Acme"


@pytest.mark.asyncio
async def test_status_update_sets_timestamps(db: Session):
    collaborators = DatabaseCollaborators(db)
    submission = await collaborators.persist_submission(
        SubmissionDraft(submitted_by=SubmittedBy(kind="anonymous", name="Anonymous User"))
    )

    reviewed = await collaborators.update_submission_status(
        submission.id, SubmissionStatus.REVIEWED
    )
    processed = await collaborators.update_submission_status(
        submission.id, SubmissionStatus.PROCESSED
    )

    assert reviewed.reviewed_at is not None
    assert processed.processed_at is not None
    assert processed.status == SubmissionStatus.PROCESSED


@pytest.mark.asyncio
async def test_database_errors_become_collaborator_errors(db: Session, monkeypatch):
    collaborators = DatabaseCollaborators(db)

    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(contact_service, "find_contact_by_external_id", broken)
    monkeypatch.setattr(contact_service, "create_contact", broken)

    with pytest.raises(CollaboratorError) as read_error:
        await collaborators.find_contact_by_external_id("u1")
    with pytest.raises(CollaboratorError) as write_error:
        await collaborators.create_contact({}, external_id="u1")

    assert read_error.value.retryable is True
    assert write_error.value.retryable is False


@pytest.mark.asyncio
async def test_unknown_records_raise_not_found(db: Session):
    collaborators = DatabaseCollaborators(db)

    with pytest.raises(NotFoundError):
        await collaborators.update_contact(uuid.uuid4(), {"first_name": "X"})
    with pytest.raises(NotFoundError):
        await collaborators.update_employment_record(uuid.uuid4(), {"job_title": "X"})
    with pytest.raises(NotFoundError):
        await collaborators.set_submission_notes(uuid.uuid4(), "x")
    assert form_service.get_form(db, uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_save_form_with_unknown_id_is_not_found(db: Session):
    collaborators = DatabaseCollaborators(db)

    with pytest.raises(NotFoundError):
        await collaborators.save_form(_schema(id=uuid.uuid4()))
    assert form_service.list_forms(db) == []


@pytest.mark.asyncio
async def test_processing_skips_values_the_contact_rejects(db: Session):
    collaborators = DatabaseCollaborators(db)
    submission = await collaborators.persist_submission(
        SubmissionDraft(
            mapped_fields={
                "email": "not-an-email",
                "graduationYear": "1500",
                "firstName": "J" * 101,
                "lastName": "Doe",
            },
            submitted_by=SubmittedBy(kind="external_id", name="UVID: u9", external_id="u9"),
        )
    )

    result = await submission_processing_service.process_submission(
        submission.id, contacts=collaborators, submissions=collaborators
    )

    assert result.outcome == ProcessOutcome.CONTACT_CREATED
    assert result.applied_fields == ["lastName"]
    assert sorted(result.skipped_fields) == ["email", "firstName", "graduationYear"]
    contact = await collaborators.find_contact_by_external_id("u9")
    assert contact.last_name == "Doe"
    assert contact.email is None
    assert contact.graduation_year is None
    assert contact.first_name is None
