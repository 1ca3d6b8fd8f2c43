"""Submission persistence and the review workflow writes."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from alumni_forms.core.config import settings
from alumni_forms.db.enums import SubmissionStatus
from alumni_forms.db.models import FormSubmission
from alumni_forms.schemas.submissions import SubmissionDraft, SubmissionFilter, SubmissionRead

logger = logging.getLogger(__name__)


def submission_read(submission: FormSubmission) -> SubmissionRead:
    return SubmissionRead.model_validate(submission)


def create_submission(db: Session, draft: SubmissionDraft) -> FormSubmission:
    submitter = draft.submitted_by
    submission = FormSubmission(
        form_id=draft.form_id,
        type=draft.type.value,
        status=draft.status.value,
        content=draft.content,
        mapped_fields=draft.mapped_fields,
        submitter_kind=submitter.kind.value,
        submitter_name=submitter.name,
        submitter_email=submitter.email,
        external_id=submitter.external_id,
        contact_id=draft.contact_id,
        notes=draft.notes,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def get_submission(db: Session, submission_id: uuid.UUID) -> FormSubmission | None:
    return db.query(FormSubmission).filter(FormSubmission.id == submission_id).first()


def _content_strings(content: dict[str, Any]) -> list[str]:
    strings: list[str] = []
    for value in content.values():
        if isinstance(value, str):
            strings.append(value)
        elif isinstance(value, list):
            strings.extend(item for item in value if isinstance(item, str))
    return strings


def _matches_search(submission: FormSubmission, needle: str) -> bool:
    haystack = [
        submission.submitter_name,
        submission.submitter_email,
        submission.external_id,
        *_content_strings(submission.content or {}),
    ]
    return any(needle in value.lower() for value in haystack if value)


def list_submissions(db: Session, filters: SubmissionFilter) -> list[FormSubmission]:
    """Newest first; ``search`` matches submitter identity and text answers."""
    query = db.query(FormSubmission)
    if filters.status:
        query = query.filter(FormSubmission.status == filters.status.value)
    if filters.type:
        query = query.filter(FormSubmission.type == filters.type.value)
    if filters.form_id:
        query = query.filter(FormSubmission.form_id == filters.form_id)
    if filters.contact_id:
        query = query.filter(FormSubmission.contact_id == filters.contact_id)
    query = query.order_by(FormSubmission.submitted_at.desc(), FormSubmission.id)

    limit = filters.limit or settings.SUBMISSION_LIST_LIMIT
    needle = (filters.search or "").strip().lower()
    if not needle:
        return query.limit(limit).all()
    # Content is JSON, matched in Python
    matches = [s for s in query.all() if _matches_search(s, needle)]
    return matches[:limit]


def update_submission_status(
    db: Session, submission: FormSubmission, status: SubmissionStatus
) -> FormSubmission:
    now = datetime.now(timezone.utc)
    submission.status = status.value
    if status == SubmissionStatus.REVIEWED:
        submission.reviewed_at = now
    elif status == SubmissionStatus.PROCESSED:
        submission.processed_at = now
    db.commit()
    db.refresh(submission)
    logger.info(
        "submission_status_changed",
        extra={"submission_id": str(submission.id), "status": status.value},
    )
    return submission


def set_submission_notes(db: Session, submission: FormSubmission, notes: str) -> FormSubmission:
    submission.notes = notes
    db.commit()
    db.refresh(submission)
    return submission


def link_submission_contact(
    db: Session, submission: FormSubmission, contact_id: uuid.UUID
) -> FormSubmission:
    submission.contact_id = contact_id
    db.commit()
    db.refresh(submission)
    return submission
