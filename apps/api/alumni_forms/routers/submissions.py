"""Submission review endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from alumni_forms.core.deps import get_collaborators, get_request_context
from alumni_forms.db.enums import SubmissionStatus, SubmissionType
from alumni_forms.schemas.context import RequestContext
from alumni_forms.schemas.submissions import (
    LegacySubmissionCreate,
    ProcessResultRead,
    SubmissionFilter,
    SubmissionNotesUpdate,
    SubmissionRead,
    SubmissionStatusUpdate,
)
from alumni_forms.services import submission_capture_service, submission_processing_service
from alumni_forms.services.collaborators import DatabaseCollaborators

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("", response_model=list[SubmissionRead])
async def list_submissions(
    status: SubmissionStatus | None = Query(None),
    type: SubmissionType | None = Query(None),
    form_id: UUID | None = Query(None),
    contact_id: UUID | None = Query(None),
    q: str | None = Query(None, max_length=200),
    limit: int | None = Query(None, ge=1, le=1000),
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    filters = SubmissionFilter(
        status=status,
        type=type,
        form_id=form_id,
        contact_id=contact_id,
        search=q,
        limit=limit,
    )
    return await submission_processing_service.list_submissions(
        filters, submissions=collaborators
    )


@router.post("", response_model=SubmissionRead, status_code=201)
async def create_legacy_submission(
    data: LegacySubmissionCreate,
    context: RequestContext = Depends(get_request_context),
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    """Record an ad-hoc submission that is not tied to a form."""
    return await submission_capture_service.capture_legacy_submission(
        submission_type=data.type,
        content=data.content,
        name=data.name,
        email=data.email,
        contact_id=data.contact_id,
        contacts=collaborators,
        submissions=collaborators,
        context=context,
    )


@router.get("/{submission_id}", response_model=SubmissionRead)
async def get_submission(
    submission_id: UUID,
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    return await submission_processing_service.get_submission(
        submission_id, submissions=collaborators
    )


@router.patch("/{submission_id}/status", response_model=SubmissionRead)
async def set_submission_status(
    submission_id: UUID,
    data: SubmissionStatusUpdate,
    context: RequestContext = Depends(get_request_context),
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    return await submission_processing_service.set_submission_status(
        submission_id, data.status, submissions=collaborators, context=context
    )


@router.put("/{submission_id}/notes", response_model=SubmissionRead)
async def set_submission_notes(
    submission_id: UUID,
    data: SubmissionNotesUpdate,
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    return await submission_processing_service.set_submission_notes(
        submission_id, data.notes, submissions=collaborators
    )


@router.post("/{submission_id}/process", response_model=ProcessResultRead)
async def process_submission(
    submission_id: UUID,
    context: RequestContext = Depends(get_request_context),
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    result = await submission_processing_service.process_submission(
        submission_id,
        contacts=collaborators,
        submissions=collaborators,
        context=context,
    )
    return ProcessResultRead(
        submission=result.submission,
        outcome=result.outcome,
        contact_id=result.contact_id,
        employment_record_id=result.employment_record_id,
        applied_fields=result.applied_fields,
        skipped_fields=result.skipped_fields,
    )
