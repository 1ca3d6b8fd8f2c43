"""Storage boundary used by the submission pipelines.

The pipelines only talk to these protocols, so they can run against the
database (``DatabaseCollaborators``) or an in-memory double in tests. Every
call is async; reads may be retried by the caller, writes never are.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from alumni_forms.core.errors import CollaboratorError, NotFoundError
from alumni_forms.db.enums import SubmissionStatus
from alumni_forms.schemas.contacts import ContactRead, EmploymentRecordRead
from alumni_forms.schemas.forms import FormSchema
from alumni_forms.schemas.submissions import SubmissionDraft, SubmissionFilter, SubmissionRead
from alumni_forms.services import contact_service, form_service, submission_service

logger = logging.getLogger(__name__)


class FormStore(Protocol):
    async def load_form(
        self, form_id: uuid.UUID, public_access_only: bool = False
    ) -> FormSchema | None: ...

    async def save_form(self, schema: FormSchema) -> FormSchema: ...

    async def delete_form(self, form_id: uuid.UUID) -> None: ...


class ContactDirectory(Protocol):
    async def get_contact(self, contact_id: uuid.UUID) -> ContactRead | None: ...

    async def find_contact_by_external_id(self, external_id: str) -> ContactRead | None: ...

    async def create_contact(
        self, fields: dict[str, Any], external_id: str | None = None
    ) -> ContactRead: ...

    async def update_contact(self, contact_id: uuid.UUID, fields: dict[str, Any]) -> ContactRead: ...

    async def find_current_employment(
        self, contact_id: uuid.UUID
    ) -> EmploymentRecordRead | None: ...

    async def create_employment_record(
        self, contact_id: uuid.UUID, fields: dict[str, Any]
    ) -> EmploymentRecordRead: ...

    async def update_employment_record(
        self, record_id: uuid.UUID, fields: dict[str, Any]
    ) -> EmploymentRecordRead: ...


class SubmissionStore(Protocol):
    async def get_submission(self, submission_id: uuid.UUID) -> SubmissionRead | None: ...

    async def persist_submission(self, draft: SubmissionDraft) -> SubmissionRead: ...

    async def update_submission_status(
        self, submission_id: uuid.UUID, status: SubmissionStatus
    ) -> SubmissionRead: ...

    async def set_submission_notes(self, submission_id: uuid.UUID, notes: str) -> SubmissionRead: ...

    async def link_submission_contact(
        self, submission_id: uuid.UUID, contact_id: uuid.UUID
    ) -> SubmissionRead: ...

    async def list_submissions(self, filters: SubmissionFilter) -> list[SubmissionRead]: ...


class DatabaseCollaborators:
    """All three stores over one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _database_call(self, operation: str, *, read: bool) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("collaborator_call_failed", extra={"operation": operation})
            raise CollaboratorError(f"{operation} failed", retryable=read) from exc

    # -- forms ---------------------------------------------------------------

    async def load_form(
        self, form_id: uuid.UUID, public_access_only: bool = False
    ) -> FormSchema | None:
        with self._database_call("load_form", read=True):
            form = form_service.load_form(self.db, form_id, public_access_only=public_access_only)
        return form_service.form_to_schema(form) if form else None

    async def save_form(self, schema: FormSchema) -> FormSchema:
        with self._database_call("save_form", read=False):
            form = form_service.save_form(self.db, schema)
        return form_service.form_to_schema(form)

    async def delete_form(self, form_id: uuid.UUID) -> None:
        with self._database_call("delete_form", read=False):
            form = form_service.get_form(self.db, form_id)
            if not form:
                raise NotFoundError("Form not found")
            form_service.delete_form(self.db, form)

    # -- contacts ------------------------------------------------------------

    async def get_contact(self, contact_id: uuid.UUID) -> ContactRead | None:
        with self._database_call("get_contact", read=True):
            contact = contact_service.get_contact(self.db, contact_id)
        return ContactRead.model_validate(contact) if contact else None

    async def find_contact_by_external_id(self, external_id: str) -> ContactRead | None:
        with self._database_call("find_contact_by_external_id", read=True):
            contact = contact_service.find_contact_by_external_id(self.db, external_id)
        return ContactRead.model_validate(contact) if contact else None

    async def create_contact(
        self, fields: dict[str, Any], external_id: str | None = None
    ) -> ContactRead:
        with self._database_call("create_contact", read=False):
            contact = contact_service.create_contact(self.db, fields, external_id=external_id)
        return ContactRead.model_validate(contact)

    async def update_contact(self, contact_id: uuid.UUID, fields: dict[str, Any]) -> ContactRead:
        with self._database_call("update_contact", read=False):
            contact = contact_service.get_contact(self.db, contact_id)
            if not contact:
                raise NotFoundError("Contact not found")
            contact = contact_service.update_contact(self.db, contact, fields)
        return ContactRead.model_validate(contact)

    async def find_current_employment(
        self, contact_id: uuid.UUID
    ) -> EmploymentRecordRead | None:
        with self._database_call("find_current_employment", read=True):
            record = contact_service.find_current_employment(self.db, contact_id)
        return EmploymentRecordRead.model_validate(record) if record else None

    async def create_employment_record(
        self, contact_id: uuid.UUID, fields: dict[str, Any]
    ) -> EmploymentRecordRead:
        with self._database_call("create_employment_record", read=False):
            record = contact_service.create_employment_record(self.db, contact_id, fields)
        return EmploymentRecordRead.model_validate(record)

    async def update_employment_record(
        self, record_id: uuid.UUID, fields: dict[str, Any]
    ) -> EmploymentRecordRead:
        with self._database_call("update_employment_record", read=False):
            record = contact_service.get_employment_record(self.db, record_id)
            if not record:
                raise NotFoundError("Employment record not found")
            record = contact_service.update_employment_record(self.db, record, fields)
        return EmploymentRecordRead.model_validate(record)

    # -- submissions ---------------------------------------------------------

    def _require_submission(self, submission_id: uuid.UUID):
        submission = submission_service.get_submission(self.db, submission_id)
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    async def get_submission(self, submission_id: uuid.UUID) -> SubmissionRead | None:
        with self._database_call("get_submission", read=True):
            submission = submission_service.get_submission(self.db, submission_id)
        return submission_service.submission_read(submission) if submission else None

    async def persist_submission(self, draft: SubmissionDraft) -> SubmissionRead:
        with self._database_call("persist_submission", read=False):
            submission = submission_service.create_submission(self.db, draft)
        return submission_service.submission_read(submission)

    async def update_submission_status(
        self, submission_id: uuid.UUID, status: SubmissionStatus
    ) -> SubmissionRead:
        with self._database_call("update_submission_status", read=False):
            submission = self._require_submission(submission_id)
            submission = submission_service.update_submission_status(self.db, submission, status)
        return submission_service.submission_read(submission)

    async def set_submission_notes(self, submission_id: uuid.UUID, notes: str) -> SubmissionRead:
        with self._database_call("set_submission_notes", read=False):
            submission = self._require_submission(submission_id)
            submission = submission_service.set_submission_notes(self.db, submission, notes)
        return submission_service.submission_read(submission)

    async def link_submission_contact(
        self, submission_id: uuid.UUID, contact_id: uuid.UUID
    ) -> SubmissionRead:
        with self._database_call("link_submission_contact", read=False):
            submission = self._require_submission(submission_id)
            submission = submission_service.link_submission_contact(self.db, submission, contact_id)
        return submission_service.submission_read(submission)

    async def list_submissions(self, filters: SubmissionFilter) -> list[SubmissionRead]:
        with self._database_call("list_submissions", read=True):
            submissions = submission_service.list_submissions(self.db, filters)
        return [submission_service.submission_read(s) for s in submissions]
