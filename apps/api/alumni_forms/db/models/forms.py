"""SQLAlchemy ORM models for forms and submissions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumni_forms.db.base import Base, JSONType
from alumni_forms.db.enums import (
    DEFAULT_SUBMISSION_STATUS,
    FormStatus,
    FormType,
    SubmissionType,
    SubmitterKind,
)

if TYPE_CHECKING:
    from alumni_forms.db.models.contacts import Contact


class Form(Base):
    """Form definition: metadata plus the ordered field list."""

    __tablename__ = "forms"
    __table_args__ = (Index("idx_forms_status", "status"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=FormStatus.DRAFT.value,
        server_default=text(f"'{FormStatus.DRAFT.value}'"),
        nullable=False,
    )
    form_type: Mapped[str] = mapped_column(
        String(20),
        default=FormType.STANDARD.value,
        server_default=text(f"'{FormType.STANDARD.value}'"),
        nullable=False,
    )

    # Serialized list of field definitions, in display order
    fields: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)

    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    submissions: Mapped[list[FormSubmission]] = relationship(
        back_populates="form", passive_deletes=True
    )


class FormSubmission(Base):
    """A captured response (form answers or a legacy ad-hoc submission)."""

    __tablename__ = "form_submissions"
    __table_args__ = (
        Index("idx_form_submissions_form", "form_id"),
        Index("idx_form_submissions_status", "status"),
        Index("idx_form_submissions_contact", "contact_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("forms.id", ondelete="CASCADE"), nullable=True
    )
    type: Mapped[str] = mapped_column(
        String(30), default=SubmissionType.FORM_RESPONSE.value, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_SUBMISSION_STATUS.value,
        server_default=text(f"'{DEFAULT_SUBMISSION_STATUS.value}'"),
        nullable=False,
    )

    # Answers keyed by field id (form responses) or fixed semantic keys (legacy types)
    content: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    # Target path -> coerced value, derived at capture time
    mapped_fields: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)

    submitter_kind: Mapped[str] = mapped_column(
        String(20), default=SubmitterKind.NAMED.value, nullable=False
    )
    submitter_name: Mapped[str] = mapped_column(String(255), nullable=False)
    submitter_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True
    )

    notes: Mapped[str] = mapped_column(Text, default="", server_default=text("''"), nullable=False)

    submitted_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    form: Mapped[Form | None] = relationship(back_populates="submissions")
    contact: Mapped[Contact | None] = relationship()
