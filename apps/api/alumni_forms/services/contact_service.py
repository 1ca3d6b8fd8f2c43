"""Contact (alumni profile) and employment record persistence."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from alumni_forms.db.models import Contact, EmploymentRecord
from alumni_forms.schemas.contacts import ContactUpdate, EmploymentRecordUpdate

CONTACT_FIELDS = frozenset(ContactUpdate.model_fields)
EMPLOYMENT_FIELDS = frozenset(EmploymentRecordUpdate.model_fields)

logger = logging.getLogger(__name__)


def _check_fields(fields: dict[str, Any], allowed: frozenset[str], entity: str) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unknown {entity} fields: {', '.join(sorted(unknown))}")


def get_contact(db: Session, contact_id: uuid.UUID) -> Contact | None:
    return db.query(Contact).filter(Contact.id == contact_id).first()


def find_contact_by_external_id(db: Session, external_id: str) -> Contact | None:
    return db.query(Contact).filter(Contact.external_id == external_id).first()


def create_contact(
    db: Session,
    fields: dict[str, Any],
    external_id: str | None = None,
) -> Contact:
    _check_fields(fields, CONTACT_FIELDS, "contact")
    now = datetime.now(timezone.utc)
    contact = Contact(
        external_id=external_id,
        do_not_contact=False,
        created_at=now,
        updated_at=now,
        **fields,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info("contact_created", extra={"contact_id": str(contact.id)})
    return contact


def update_contact(db: Session, contact: Contact, fields: dict[str, Any]) -> Contact:
    _check_fields(fields, CONTACT_FIELDS, "contact")
    for name, value in fields.items():
        setattr(contact, name, value)
    contact.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(contact)
    logger.info("contact_updated", extra={"contact_id": str(contact.id)})
    return contact


def get_employment_record(db: Session, record_id: uuid.UUID) -> EmploymentRecord | None:
    return db.query(EmploymentRecord).filter(EmploymentRecord.id == record_id).first()


def find_current_employment(db: Session, contact_id: uuid.UUID) -> EmploymentRecord | None:
    return (
        db.query(EmploymentRecord)
        .filter(
            EmploymentRecord.contact_id == contact_id,
            EmploymentRecord.is_current.is_(True),
        )
        .order_by(EmploymentRecord.created_at.desc())
        .first()
    )


def create_employment_record(
    db: Session, contact_id: uuid.UUID, fields: dict[str, Any]
) -> EmploymentRecord:
    _check_fields(fields, EMPLOYMENT_FIELDS, "employment")
    values = dict(fields)
    if values.get("is_current") is None:
        values["is_current"] = True
    record = EmploymentRecord(contact_id=contact_id, **values)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "employment_record_created",
        extra={"contact_id": str(contact_id), "employment_record_id": str(record.id)},
    )
    return record


def update_employment_record(
    db: Session, record: EmploymentRecord, fields: dict[str, Any]
) -> EmploymentRecord:
    _check_fields(fields, EMPLOYMENT_FIELDS, "employment")
    for name, value in fields.items():
        if name == "is_current" and value is None:
            continue
        setattr(record, name, value)
    db.commit()
    db.refresh(record)
    logger.info("employment_record_updated", extra={"employment_record_id": str(record.id)})
    return record
