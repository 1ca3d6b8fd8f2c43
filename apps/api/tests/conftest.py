"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created and dropped around each test
- HTTPX AsyncClient with get_db overridden
- In-memory collaborators that record every boundary call
"""
import os
import uuid
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Generator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"
os.environ["RATE_LIMIT_PUBLIC_READ"] = "1000"
os.environ["RATE_LIMIT_PUBLIC_SUBMIT"] = "1000"
os.environ["COLLABORATOR_RETRY_BASE_DELAY"] = "0"
os.environ["COLLABORATOR_RETRY_MAX_DELAY"] = "0"

from alumni_forms.main import app
from alumni_forms.core.deps import get_db
from alumni_forms.core.errors import NotFoundError
from alumni_forms.db.base import Base
from alumni_forms.db.enums import SubmissionStatus, SubmissionType, SubmitterKind
from alumni_forms.db.session import SessionLocal, engine
import alumni_forms.db.models  # noqa: F401
from alumni_forms.schemas.contacts import (
    ContactRead,
    ContactUpdate,
    EmploymentRecordRead,
    EmploymentRecordUpdate,
)
from alumni_forms.schemas.forms import FormSchema
from alumni_forms.schemas.submissions import SubmissionDraft, SubmissionFilter, SubmissionRead


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test on the shared in-memory connection."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Actor-Id": "admin-1", "X-Request-ID": "req-test"},
    ) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# In-memory collaborators
# =============================================================================

WRITE_OPERATIONS = frozenset(
    {
        "save_form",
        "delete_form",
        "create_contact",
        "update_contact",
        "create_employment_record",
        "update_employment_record",
        "persist_submission",
        "update_submission_status",
        "set_submission_notes",
        "link_submission_contact",
    }
)
ENTITY_WRITE_OPERATIONS = frozenset(
    {
        "create_contact",
        "update_contact",
        "create_employment_record",
        "update_employment_record",
    }
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCollaborators:
    """Form, contact and submission stores kept in dicts.

    Contact and employment writes are checked against the update models, as
    the database adapter's columns would be.

    ``fail(operation, exc, ...)`` queues exceptions that the next calls to
    ``operation`` raise, in order.
    """

    def __init__(self) -> None:
        self.forms: dict[uuid.UUID, FormSchema] = {}
        self.contacts: dict[uuid.UUID, ContactRead] = {}
        self.employment: dict[uuid.UUID, EmploymentRecordRead] = {}
        self.submissions: dict[uuid.UUID, SubmissionRead] = {}
        self.calls: list[str] = []
        self._failures: dict[str, list[Exception]] = {}

    def fail(self, operation: str, *errors: Exception) -> None:
        self._failures.setdefault(operation, []).extend(errors)

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    @property
    def write_calls(self) -> list[str]:
        return [c for c in self.calls if c in WRITE_OPERATIONS]

    @property
    def entity_write_calls(self) -> list[str]:
        return [c for c in self.calls if c in ENTITY_WRITE_OPERATIONS]

    # -- seeding helpers -----------------------------------------------------

    def add_form(self, schema: FormSchema) -> FormSchema:
        schema = schema.model_copy(update={"id": schema.id or uuid.uuid4()})
        self.forms[schema.id] = schema
        return schema

    def add_contact(self, external_id: str | None = None, **fields: Any) -> ContactRead:
        contact = self._build_contact(fields, external_id)
        self.contacts[contact.id] = contact
        return contact

    def add_employment(self, contact_id: uuid.UUID, **fields: Any) -> EmploymentRecordRead:
        record = self._build_employment(contact_id, fields)
        self.employment[record.id] = record
        return record

    def contacts_with_external_id(self, external_id: str) -> list[ContactRead]:
        return [c for c in self.contacts.values() if c.external_id == external_id]

    def employment_for(self, contact_id: uuid.UUID) -> list[EmploymentRecordRead]:
        return [r for r in self.employment.values() if r.contact_id == contact_id]

    def _build_contact(self, fields: dict[str, Any], external_id: str | None) -> ContactRead:
        now = _now()
        data: dict[str, Any] = {name: None for name in ContactUpdate.model_fields}
        data.update(fields)
        return ContactRead(
            id=uuid.uuid4(),
            external_id=external_id,
            do_not_contact=False,
            last_contact_date=None,
            created_at=now,
            updated_at=now,
            **data,
        )

    def _build_employment(
        self, contact_id: uuid.UUID, fields: dict[str, Any]
    ) -> EmploymentRecordRead:
        now = _now()
        data: dict[str, Any] = {name: None for name in EmploymentRecordUpdate.model_fields}
        data.update(fields)
        if data.get("is_current") is None:
            data["is_current"] = True
        return EmploymentRecordRead(
            id=uuid.uuid4(), contact_id=contact_id, created_at=now, updated_at=now, **data
        )

    # -- FormStore -----------------------------------------------------------

    async def load_form(self, form_id, public_access_only=False):
        self._record("load_form")
        schema = self.forms.get(form_id)
        if schema and public_access_only and schema.status.value != "active":
            return None
        return schema

    async def save_form(self, schema):
        self._record("save_form")
        return self.add_form(schema)

    async def delete_form(self, form_id):
        self._record("delete_form")
        self.forms.pop(form_id, None)
        for submission_id in [s.id for s in self.submissions.values() if s.form_id == form_id]:
            del self.submissions[submission_id]

    # -- ContactDirectory ----------------------------------------------------

    async def get_contact(self, contact_id):
        self._record("get_contact")
        return self.contacts.get(contact_id)

    async def find_contact_by_external_id(self, external_id):
        self._record("find_contact_by_external_id")
        matches = self.contacts_with_external_id(external_id)
        return matches[0] if matches else None

    async def create_contact(self, fields, external_id=None):
        self._record("create_contact")
        ContactUpdate.model_validate(fields)
        return self.add_contact(external_id=external_id, **fields)

    async def update_contact(self, contact_id, fields):
        self._record("update_contact")
        ContactUpdate.model_validate(fields)
        if contact_id not in self.contacts:
            raise NotFoundError("Contact not found")
        contact = self.contacts[contact_id].model_copy(update={**fields, "updated_at": _now()})
        self.contacts[contact_id] = contact
        return contact

    async def find_current_employment(self, contact_id):
        self._record("find_current_employment")
        current = [r for r in self.employment_for(contact_id) if r.is_current]
        return current[-1] if current else None

    async def create_employment_record(self, contact_id, fields):
        self._record("create_employment_record")
        EmploymentRecordUpdate.model_validate(fields)
        return self.add_employment(contact_id, **fields)

    async def update_employment_record(self, record_id, fields):
        self._record("update_employment_record")
        EmploymentRecordUpdate.model_validate(fields)
        if record_id not in self.employment:
            raise NotFoundError("Employment record not found")
        record = self.employment[record_id].model_copy(update={**fields, "updated_at": _now()})
        self.employment[record_id] = record
        return record

    # -- SubmissionStore -----------------------------------------------------

    async def get_submission(self, submission_id):
        self._record("get_submission")
        return self.submissions.get(submission_id)

    async def persist_submission(self, draft: SubmissionDraft):
        self._record("persist_submission")
        submission = SubmissionRead(
            id=uuid.uuid4(),
            form_id=draft.form_id,
            type=draft.type,
            status=draft.status,
            content=draft.content,
            mapped_fields=draft.mapped_fields,
            submitter_kind=draft.submitted_by.kind,
            submitter_name=draft.submitted_by.name,
            submitter_email=draft.submitted_by.email,
            external_id=draft.submitted_by.external_id,
            contact_id=draft.contact_id,
            notes=draft.notes,
            submitted_at=_now(),
            reviewed_at=None,
            processed_at=None,
        )
        self.submissions[submission.id] = submission
        return submission

    def _require_submission(self, submission_id) -> SubmissionRead:
        if submission_id not in self.submissions:
            raise NotFoundError("Submission not found")
        return self.submissions[submission_id]

    def _replace_submission(self, submission_id, **changes) -> SubmissionRead:
        submission = self._require_submission(submission_id).model_copy(update=changes)
        self.submissions[submission_id] = submission
        return submission

    async def update_submission_status(self, submission_id, status):
        self._record("update_submission_status")
        changes: dict[str, Any] = {"status": status}
        if status == SubmissionStatus.PROCESSED:
            changes["processed_at"] = _now()
        if status == SubmissionStatus.REVIEWED:
            changes["reviewed_at"] = _now()
        return self._replace_submission(submission_id, **changes)

    async def set_submission_notes(self, submission_id, notes):
        self._record("set_submission_notes")
        return self._replace_submission(submission_id, notes=notes)

    async def link_submission_contact(self, submission_id, contact_id):
        self._record("link_submission_contact")
        return self._replace_submission(submission_id, contact_id=contact_id)

    async def list_submissions(self, filters: SubmissionFilter):
        self._record("list_submissions")
        return [
            s
            for s in self.submissions.values()
            if (filters.status is None or s.status == filters.status)
            and (filters.type is None or s.type == filters.type)
        ]

    def seed_submission(
        self,
        *,
        mapped_fields: dict[str, Any],
        external_id: str | None = None,
        kind: SubmitterKind = SubmitterKind.EXTERNAL_ID,
        contact_id: uuid.UUID | None = None,
        status: SubmissionStatus = SubmissionStatus.PENDING,
    ) -> SubmissionRead:
        submission = SubmissionRead(
            id=uuid.uuid4(),
            form_id=uuid.uuid4(),
            type=SubmissionType.FORM_RESPONSE,
            status=status,
            content={},
            mapped_fields=mapped_fields,
            submitter_kind=kind,
            submitter_name=f"UVID: {external_id}" if external_id else "Anonymous User",
            submitter_email=None,
            external_id=external_id,
            contact_id=contact_id,
            notes="",
            submitted_at=_now(),
            reviewed_at=None,
            processed_at=None,
        )
        self.submissions[submission.id] = submission
        return submission


@pytest.fixture
def collaborators() -> InMemoryCollaborators:
    return InMemoryCollaborators()
