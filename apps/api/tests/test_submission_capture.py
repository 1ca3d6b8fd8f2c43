"""Tests for submission capture against in-memory collaborators."""

import uuid

import pytest

from alumni_forms.core.errors import CollaboratorError, NotFoundError, ValidationError
from alumni_forms.db.enums import (
    FormStatus,
    FormType,
    PipelineStage,
    SubmissionStatus,
    SubmissionType,
    SubmitterKind,
)
from alumni_forms.schemas.context import RequestContext
from alumni_forms.schemas.forms import FieldDefinition, FormSchema
from alumni_forms.services import submission_capture_service


def _alumni_update_form(
    form_type: FormType = FormType.STANDARD, status: FormStatus = FormStatus.ACTIVE
) -> FormSchema:
    return FormSchema(
        title="Alumni Update",
        status=status,
        form_type=form_type,
        fields=[
            FieldDefinition(id="intro", type="header", label="Tell us about you"),
            FieldDefinition(
                id="f1", type="text", label="First Name", required=True, mapped_field="firstName"
            ),
            FieldDefinition(
                id="f2", type="text", label="Job Title", mapped_field="employment.jobTitle"
            ),
            FieldDefinition(id="f3", type="textarea", label="Anything else?"),
        ],
    )


async def _capture(collaborators, form_id, content, external_id=None, is_anonymous=False):
    return await submission_capture_service.capture_submission(
        form_id=form_id,
        content=content,
        external_id=external_id,
        is_anonymous=is_anonymous,
        forms=collaborators,
        contacts=collaborators,
        submissions=collaborators,
        context=RequestContext(request_id="req-1"),
    )


@pytest.mark.asyncio
async def test_capture_computes_mapped_fields_and_stays_pending(collaborators):
    form = collaborators.add_form(_alumni_update_form())

    submission = await _capture(
        collaborators, form.id, {"f1": "Jane", "f2": "Engineer"}, external_id="u123"
    )

    assert submission.status == SubmissionStatus.PENDING
    assert submission.type == SubmissionType.FORM_RESPONSE
    assert submission.mapped_fields == {"firstName": "Jane", "employment.jobTitle": "Engineer"}
    assert submission.submitter_kind == SubmitterKind.EXTERNAL_ID
    assert submission.submitter_name == "UVID: u123"
    assert submission.external_id == "u123"
    assert submission.contact_id is None
    assert collaborators.entity_write_calls == []


@pytest.mark.asyncio
async def test_capture_links_existing_contact(collaborators):
    form = collaborators.add_form(_alumni_update_form())
    contact = collaborators.add_contact(external_id="u123", first_name="Janet")

    submission = await _capture(collaborators, form.id, {"f1": "Jane"}, external_id=" u123 ")

    assert submission.contact_id == contact.id
    assert submission.external_id == "u123"
    assert collaborators.contacts[contact.id].first_name == "Janet"


@pytest.mark.asyncio
async def test_capture_keeps_only_input_field_answers(collaborators):
    form = collaborators.add_form(_alumni_update_form())

    submission = await _capture(
        collaborators,
        form.id,
        {"f1": "Jane", "intro": "x", "unknown": "y", "f3": ""},
        external_id="u123",
    )

    assert submission.content == {"f1": "Jane", "f3": ""}
    assert submission.mapped_fields == {"firstName": "Jane"}


@pytest.mark.asyncio
async def test_capture_rejects_missing_required_answer(collaborators):
    form = collaborators.add_form(_alumni_update_form())

    with pytest.raises(ValidationError) as exc_info:
        await _capture(collaborators, form.id, {"f1": "", "f2": "Engineer"}, external_id="u123")

    assert exc_info.value.field_ids == ["f1"]
    assert exc_info.value.stage == PipelineStage.VALIDATION
    assert collaborators.write_calls == []


@pytest.mark.asyncio
async def test_capture_rejects_inactive_or_missing_form(collaborators):
    draft = collaborators.add_form(_alumni_update_form(status=FormStatus.DRAFT))

    with pytest.raises(NotFoundError) as exc_info:
        await _capture(collaborators, draft.id, {"f1": "Jane"}, external_id="u123")
    assert exc_info.value.stage == PipelineStage.VALIDATION

    with pytest.raises(NotFoundError):
        await _capture(collaborators, uuid.uuid4(), {"f1": "Jane"}, external_id="u123")


@pytest.mark.asyncio
async def test_standard_form_requires_external_id(collaborators):
    form = collaborators.add_form(_alumni_update_form())

    with pytest.raises(ValidationError):
        await _capture(collaborators, form.id, {"f1": "Jane"})
    with pytest.raises(ValidationError):
        await _capture(collaborators, form.id, {"f1": "Jane"}, external_id="   ")
    with pytest.raises(ValidationError):
        await _capture(collaborators, form.id, {"f1": "Jane"}, external_id="u1", is_anonymous=True)


@pytest.mark.asyncio
async def test_anonymous_capture_never_looks_up_contacts(collaborators):
    form = collaborators.add_form(_alumni_update_form(FormType.ANONYMOUS))
    collaborators.add_contact(external_id="u123")

    submission = await _capture(collaborators, form.id, {"f1": "Jane"}, is_anonymous=True)

    assert submission.submitter_kind == SubmitterKind.ANONYMOUS
    assert submission.submitter_name == "Anonymous User"
    assert submission.external_id is None
    assert submission.contact_id is None
    assert "find_contact_by_external_id" not in collaborators.calls


@pytest.mark.asyncio
async def test_anonymous_form_rejects_identity(collaborators):
    form = collaborators.add_form(_alumni_update_form(FormType.ANONYMOUS))

    with pytest.raises(ValidationError):
        await _capture(collaborators, form.id, {"f1": "Jane"}, external_id="u123")
    with pytest.raises(ValidationError):
        await _capture(collaborators, form.id, {"f1": "Jane"})


@pytest.mark.asyncio
async def test_capture_retries_transient_form_load(collaborators):
    form = collaborators.add_form(_alumni_update_form())
    collaborators.fail("load_form", CollaboratorError("timeout", retryable=True))

    submission = await _capture(collaborators, form.id, {"f1": "Jane"}, external_id="u123")

    assert collaborators.calls.count("load_form") == 2
    assert submission.status == SubmissionStatus.PENDING


@pytest.mark.asyncio
async def test_capture_persist_failure_is_not_retried(collaborators):
    form = collaborators.add_form(_alumni_update_form())
    collaborators.fail("persist_submission", CollaboratorError("write failed"))

    with pytest.raises(CollaboratorError) as exc_info:
        await _capture(collaborators, form.id, {"f1": "Jane"}, external_id="u123")

    assert exc_info.value.stage == PipelineStage.PERSISTENCE
    assert collaborators.calls.count("persist_submission") == 1
    assert collaborators.submissions == {}


# =============================================================================
# Legacy (non-form) submissions
# =============================================================================


@pytest.mark.asyncio
async def test_legacy_submission_is_named_and_pending(collaborators):
    contact = collaborators.add_contact(external_id="u9")

    submission = await submission_capture_service.capture_legacy_submission(
        submission_type=SubmissionType.EVENT_RSVP,
        content={"event": "Homecoming", "guests": 2},
        name="  Jane Doe ",
        email="jane@example.com",
        contact_id=contact.id,
        contacts=collaborators,
        submissions=collaborators,
    )

    assert submission.form_id is None
    assert submission.submitter_kind == SubmitterKind.NAMED
    assert submission.submitter_name == "Jane Doe"
    assert submission.contact_id == contact.id
    assert submission.mapped_fields == {}


@pytest.mark.asyncio
async def test_legacy_submission_validation(collaborators):
    with pytest.raises(ValidationError):
        await submission_capture_service.capture_legacy_submission(
            submission_type=SubmissionType.FORM_RESPONSE,
            content={},
            name="Jane",
            email=None,
            contact_id=None,
            contacts=collaborators,
            submissions=collaborators,
        )
    with pytest.raises(ValidationError):
        await submission_capture_service.capture_legacy_submission(
            submission_type=SubmissionType.VOLUNTEER,
            content={},
            name=" ",
            email=None,
            contact_id=None,
            contacts=collaborators,
            submissions=collaborators,
        )
    with pytest.raises(NotFoundError):
        await submission_capture_service.capture_legacy_submission(
            submission_type=SubmissionType.VOLUNTEER,
            content={},
            name="Jane",
            email=None,
            contact_id=uuid.uuid4(),
            contacts=collaborators,
            submissions=collaborators,
        )
    assert collaborators.write_calls == []
