"""Submission capture: validate answers, identify the submitter, persist.

Capture never writes to contacts or employment records. Mapped values are
only computed and stored on the submission; applying them happens when the
submission is processed.
"""

import logging
import uuid
from typing import Any

from alumni_forms.core.config import settings
from alumni_forms.core.errors import NotFoundError, ValidationError, pipeline_stage
from alumni_forms.core.structured_logging import build_log_context
from alumni_forms.db.enums import (
    FormType,
    PipelineStage,
    SubmissionStatus,
    SubmissionType,
    SubmitterKind,
)
from alumni_forms.schemas.context import RequestContext
from alumni_forms.schemas.forms import FormSchema
from alumni_forms.schemas.submissions import SubmissionDraft, SubmissionRead, SubmittedBy
from alumni_forms.services.collaborators import ContactDirectory, FormStore, SubmissionStore
from alumni_forms.services.field_mapping import compute_mapped_fields
from alumni_forms.services.field_type_registry import is_display_element
from alumni_forms.services.form_renderer import assert_submittable
from alumni_forms.services.retry_service import call_with_retries

EXTERNAL_ID_NAME_PREFIX = "UVID: "

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_submitter(
    form_type: FormType, external_id: str | None, is_anonymous: bool
) -> SubmittedBy:
    """Build the submitter identity the form's audience demands.

    Standard forms take exactly an external id; anonymous forms take exactly
    the anonymous flag. Supplying both or neither is rejected.
    """
    external_id = _clean(external_id)
    if external_id and is_anonymous:
        raise ValidationError("Provide either an external id or the anonymous flag, not both")
    if form_type == FormType.STANDARD:
        if not external_id:
            raise ValidationError("An external id (UVID) is required for this form")
        return SubmittedBy(
            kind=SubmitterKind.EXTERNAL_ID,
            name=f"{EXTERNAL_ID_NAME_PREFIX}{external_id}",
            external_id=external_id,
        )
    if external_id:
        raise ValidationError("Anonymous forms do not accept an external id")
    if not is_anonymous:
        raise ValidationError("Anonymous forms require the anonymous flag")
    return SubmittedBy(kind=SubmitterKind.ANONYMOUS, name=settings.ANONYMOUS_SUBMITTER_NAME)


def normalize_content(schema: FormSchema, content: dict[str, Any]) -> dict[str, Any]:
    """Keep answers for the form's input fields only, in schema order."""
    if not isinstance(content, dict):
        raise ValidationError("Answers must be an object")
    return {
        field.id: content[field.id]
        for field in schema.fields
        if field.id in content and not is_display_element(field.type)
    }


async def capture_submission(
    *,
    form_id: uuid.UUID,
    content: dict[str, Any],
    external_id: str | None,
    is_anonymous: bool,
    forms: FormStore,
    contacts: ContactDirectory,
    submissions: SubmissionStore,
    context: RequestContext | None = None,
) -> SubmissionRead:
    context = context or RequestContext()
    log_context = build_log_context(
        actor_id=context.actor_id, request_id=context.request_id, form_id=form_id
    )

    with pipeline_stage(PipelineStage.VALIDATION):
        schema = await call_with_retries(
            lambda: forms.load_form(form_id, public_access_only=True),
            operation="load_form",
        )
        if schema is None:
            raise NotFoundError("Form not found", stage=PipelineStage.VALIDATION)

        submitted_by = resolve_submitter(schema.form_type, external_id, is_anonymous)
        answers = normalize_content(schema, content)
        assert_submittable(schema, answers)
    mapped_fields = compute_mapped_fields(schema, answers)

    contact_id = None
    if submitted_by.kind == SubmitterKind.EXTERNAL_ID:
        with pipeline_stage(PipelineStage.IDENTITY_RESOLUTION):
            contact = await call_with_retries(
                lambda: contacts.find_contact_by_external_id(submitted_by.external_id),
                operation="find_contact_by_external_id",
            )
        if contact:
            contact_id = contact.id

    draft = SubmissionDraft(
        form_id=schema.id,
        type=SubmissionType.FORM_RESPONSE,
        status=SubmissionStatus.PENDING,
        content=answers,
        mapped_fields=mapped_fields,
        submitted_by=submitted_by,
        contact_id=contact_id,
        notes="",
    )
    with pipeline_stage(PipelineStage.PERSISTENCE):
        submission = await submissions.persist_submission(draft)

    logger.info(
        "form_submission_captured",
        extra={
            **log_context,
            "submission_id": str(submission.id),
            "submitter_kind": submitted_by.kind.value,
            "contact_resolved": contact_id is not None,
        },
    )
    return submission


async def capture_legacy_submission(
    *,
    submission_type: SubmissionType,
    content: dict[str, Any],
    name: str,
    email: str | None,
    contact_id: uuid.UUID | None,
    contacts: ContactDirectory,
    submissions: SubmissionStore,
    context: RequestContext | None = None,
) -> SubmissionRead:
    """Record an ad-hoc submission (RSVP, volunteer, info update...) from a named person."""
    context = context or RequestContext()
    if submission_type == SubmissionType.FORM_RESPONSE:
        raise ValidationError("Form responses must be submitted through their form")
    name = (name or "").strip()
    if not name:
        raise ValidationError("Submitter name is required")

    if contact_id:
        with pipeline_stage(PipelineStage.IDENTITY_RESOLUTION):
            contact = await call_with_retries(
                lambda: contacts.get_contact(contact_id), operation="get_contact"
            )
            if contact is None:
                raise NotFoundError("Contact not found")

    draft = SubmissionDraft(
        form_id=None,
        type=submission_type,
        status=SubmissionStatus.PENDING,
        content=content,
        submitted_by=SubmittedBy(kind=SubmitterKind.NAMED, name=name, email=email),
        contact_id=contact_id,
        notes="",
    )
    with pipeline_stage(PipelineStage.PERSISTENCE):
        submission = await submissions.persist_submission(draft)

    logger.info(
        "legacy_submission_captured",
        extra={
            **build_log_context(
                actor_id=context.actor_id,
                request_id=context.request_id,
                submission_id=submission.id,
            ),
            "submission_type": submission_type.value,
        },
    )
    return submission
