"""Submission review workflow and mapping resolution ("processing").

Processing projects a submission's mapped fields onto the submitter's contact
profile and current employment record, then marks the submission processed.
The contact and employment writes are separate calls with no transaction
around them: if one fails the error propagates, earlier writes stay, and the
submission keeps its status so processing can be retried. Retries resolve the
contact again (linked contact first, then external id) so they never create a
second contact.
"""

import logging
import uuid
from dataclasses import dataclass, field

from alumni_forms.core.errors import NotFoundError, ValidationError, pipeline_stage
from alumni_forms.core.structured_logging import build_log_context
from alumni_forms.db.enums import PipelineStage, ProcessOutcome, SubmissionStatus, SubmitterKind
from alumni_forms.schemas.context import RequestContext
from alumni_forms.schemas.contacts import ContactRead, EmploymentRecordRead
from alumni_forms.schemas.submissions import SubmissionFilter, SubmissionRead
from alumni_forms.services.collaborators import ContactDirectory, SubmissionStore
from alumni_forms.services.field_mapping import MappedUpdates, split_mapped_fields
from alumni_forms.services.retry_service import call_with_retries

# Statuses the review workflow may set directly; "processed" only comes from processing
REVIEW_STATUSES = frozenset(
    {SubmissionStatus.PENDING, SubmissionStatus.REVIEWED, SubmissionStatus.ARCHIVED}
)

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    submission: SubmissionRead
    outcome: ProcessOutcome
    contact_id: uuid.UUID | None = None
    employment_record_id: uuid.UUID | None = None
    applied_fields: list[str] = field(default_factory=list)
    skipped_fields: list[str] = field(default_factory=list)


async def get_submission(
    submission_id: uuid.UUID, *, submissions: SubmissionStore
) -> SubmissionRead:
    submission = await call_with_retries(
        lambda: submissions.get_submission(submission_id), operation="get_submission"
    )
    if submission is None:
        raise NotFoundError("Submission not found")
    return submission


async def list_submissions(
    filters: SubmissionFilter, *, submissions: SubmissionStore
) -> list[SubmissionRead]:
    return await call_with_retries(
        lambda: submissions.list_submissions(filters), operation="list_submissions"
    )


async def _resolve_contact(
    submission: SubmissionRead, contacts: ContactDirectory
) -> ContactRead | None:
    if submission.contact_id:
        contact = await call_with_retries(
            lambda: contacts.get_contact(submission.contact_id), operation="get_contact"
        )
        if contact:
            return contact
    if submission.external_id:
        return await call_with_retries(
            lambda: contacts.find_contact_by_external_id(submission.external_id),
            operation="find_contact_by_external_id",
        )
    return None


async def _apply_employment(
    contact_id: uuid.UUID, fields: dict, contacts: ContactDirectory
) -> EmploymentRecordRead:
    """Update the contact's current employment record, or start one."""
    current = await call_with_retries(
        lambda: contacts.find_current_employment(contact_id),
        operation="find_current_employment",
    )
    if current:
        return await contacts.update_employment_record(current.id, fields)
    return await contacts.create_employment_record(contact_id, fields)


async def _apply_updates(
    submission: SubmissionRead,
    updates: MappedUpdates,
    result: ProcessResult,
    contacts: ContactDirectory,
    submissions: SubmissionStore,
) -> None:
    if submission.submitter_kind == SubmitterKind.ANONYMOUS:
        result.outcome = ProcessOutcome.NOT_APPLIED
        return

    with pipeline_stage(PipelineStage.IDENTITY_RESOLUTION):
        contact = await _resolve_contact(submission, contacts)

    with pipeline_stage(PipelineStage.ENTITY_WRITE):
        if contact:
            if updates.contact:
                contact = await contacts.update_contact(contact.id, updates.contact)
            outcome = ProcessOutcome.CONTACT_UPDATED
        elif submission.external_id:
            contact = await contacts.create_contact(
                updates.contact, external_id=submission.external_id
            )
            outcome = ProcessOutcome.CONTACT_CREATED
        else:
            result.outcome = ProcessOutcome.NOT_APPLIED
            return

        result.contact_id = contact.id
        if submission.contact_id != contact.id:
            result.submission = await submissions.link_submission_contact(
                submission.id, contact.id
            )
        if updates.employment:
            record = await _apply_employment(contact.id, updates.employment, contacts)
            result.employment_record_id = record.id

    result.applied_fields = list(updates.applied)
    result.outcome = outcome


async def process_submission(
    submission_id: uuid.UUID,
    *,
    contacts: ContactDirectory,
    submissions: SubmissionStore,
    context: RequestContext | None = None,
) -> ProcessResult:
    """Apply mapped fields to downstream records and mark the submission processed."""
    context = context or RequestContext()
    log_context = build_log_context(
        actor_id=context.actor_id,
        request_id=context.request_id,
        submission_id=submission_id,
    )

    with pipeline_stage(PipelineStage.VALIDATION):
        submission = await get_submission(submission_id, submissions=submissions)
        if submission.status == SubmissionStatus.ARCHIVED:
            raise ValidationError("Archived submissions must be re-opened before processing")

    result = ProcessResult(submission=submission, outcome=ProcessOutcome.NOTHING_TO_APPLY)
    if submission.mapped_fields:
        updates = split_mapped_fields(submission.mapped_fields)
        result.skipped_fields = list(updates.skipped)
        if not updates.is_empty:
            try:
                await _apply_updates(submission, updates, result, contacts, submissions)
            except Exception:
                logger.exception("submission_processing_failed", extra=log_context)
                raise

    with pipeline_stage(PipelineStage.PERSISTENCE):
        result.submission = await submissions.update_submission_status(
            submission.id, SubmissionStatus.PROCESSED
        )

    logger.info(
        "submission_processed",
        extra={
            **log_context,
            "outcome": result.outcome.value,
            "applied_count": len(result.applied_fields),
            "skipped_count": len(result.skipped_fields),
        },
    )
    return result


async def set_submission_status(
    submission_id: uuid.UUID,
    status: SubmissionStatus,
    *,
    submissions: SubmissionStore,
    context: RequestContext | None = None,
) -> SubmissionRead:
    """Pending/reviewed/archived writes; allowed from any current status."""
    if status not in REVIEW_STATUSES:
        raise ValidationError("Submissions are marked processed by processing them")
    context = context or RequestContext()
    submission = await submissions.update_submission_status(submission_id, status)
    logger.info(
        "submission_status_set",
        extra={
            **build_log_context(
                actor_id=context.actor_id,
                request_id=context.request_id,
                submission_id=submission_id,
            ),
            "status": status.value,
        },
    )
    return submission


async def set_submission_notes(
    submission_id: uuid.UUID, notes: str, *, submissions: SubmissionStore
) -> SubmissionRead:
    return await submissions.set_submission_notes(submission_id, notes)
