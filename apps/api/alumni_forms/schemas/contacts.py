"""Schemas for contacts (alumni profiles) and employment records.

``ContactUpdate`` and ``EmploymentRecordUpdate`` double as the catalog of
attributes a form field may be mapped to.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    graduation_year: int | None = Field(None, ge=1900, le=2100)
    degree: str | None = Field(None, max_length=100)
    major: str | None = Field(None, max_length=100)
    linked_in: str | None = Field(None, max_length=255)
    notes: str | None = None


class ContactRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    external_id: str | None
    first_name: str | None
    last_name: str | None
    email: str | None
    phone: str | None
    graduation_year: int | None
    degree: str | None
    major: str | None
    linked_in: str | None
    notes: str | None
    do_not_contact: bool
    last_contact_date: date | None
    created_at: datetime
    updated_at: datetime


class EmploymentRecordUpdate(BaseModel):
    job_title: str | None = Field(None, max_length=200)
    organization: str | None = Field(None, max_length=200)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_current: bool | None = None


class EmploymentRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    contact_id: UUID
    job_title: str | None
    organization: str | None
    description: str | None
    start_date: date | None
    end_date: date | None
    is_current: bool
    created_at: datetime
    updated_at: datetime
