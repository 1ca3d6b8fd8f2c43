"""Schemas for captured submissions and the review workflow."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from alumni_forms.db.enums import (
    ProcessOutcome,
    SubmissionStatus,
    SubmissionType,
    SubmitterKind,
)


class SubmittedBy(BaseModel):
    kind: SubmitterKind
    name: str
    email: str | None = None
    external_id: str | None = None


class SubmissionDraft(BaseModel):
    """Normalized submission ready to be persisted."""

    form_id: UUID | None = None
    type: SubmissionType = SubmissionType.FORM_RESPONSE
    status: SubmissionStatus = SubmissionStatus.PENDING
    content: dict[str, Any] = Field(default_factory=dict)
    mapped_fields: dict[str, Any] = Field(default_factory=dict)
    submitted_by: SubmittedBy
    contact_id: UUID | None = None
    notes: str = ""


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    form_id: UUID | None
    type: SubmissionType
    status: SubmissionStatus
    content: dict[str, Any]
    mapped_fields: dict[str, Any]
    submitter_kind: SubmitterKind
    submitter_name: str
    submitter_email: str | None
    external_id: str | None
    contact_id: UUID | None
    notes: str
    submitted_at: datetime
    reviewed_at: datetime | None
    processed_at: datetime | None


class SubmissionFilter(BaseModel):
    status: SubmissionStatus | None = None
    type: SubmissionType | None = None
    form_id: UUID | None = None
    contact_id: UUID | None = None
    search: str | None = None
    limit: int | None = Field(None, ge=1, le=1000)


class PublicSubmissionCreate(BaseModel):
    content: dict[str, Any] = Field(default_factory=dict)
    external_id: str | None = Field(None, max_length=64)
    is_anonymous: bool = False


class LegacySubmissionCreate(BaseModel):
    type: SubmissionType
    content: dict[str, Any] = Field(default_factory=dict)
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    contact_id: UUID | None = None


class SubmissionPublicResponse(BaseModel):
    id: UUID
    status: SubmissionStatus


class SubmissionStatusUpdate(BaseModel):
    status: SubmissionStatus


class SubmissionNotesUpdate(BaseModel):
    notes: str = Field("", max_length=10000)


class ProcessResultRead(BaseModel):
    submission: SubmissionRead
    outcome: ProcessOutcome
    contact_id: UUID | None = None
    employment_record_id: UUID | None = None
    applied_fields: list[str]
    skipped_fields: list[str]
