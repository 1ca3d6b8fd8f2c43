"""Form persistence: CRUD over the forms table plus save-time validation."""

import logging
import uuid

from sqlalchemy.orm import Session

from alumni_forms.core.errors import NotFoundError
from alumni_forms.db.enums import FormStatus
from alumni_forms.db.models import Form, FormSubmission
from alumni_forms.schemas.forms import FormCreate, FormSchema, FormSummary, FormUpdate
from alumni_forms.services.form_editor import validate_for_save

logger = logging.getLogger(__name__)


def form_to_schema(form: Form) -> FormSchema:
    return FormSchema.model_validate(
        {
            "id": form.id,
            "title": form.title,
            "description": form.description,
            "status": form.status,
            "form_type": form.form_type,
            "fields": form.fields or [],
            "created_by": form.created_by,
            "created_at": form.created_at,
            "updated_at": form.updated_at,
        }
    )


def form_summary(form: Form) -> FormSummary:
    return FormSummary(
        id=form.id,
        title=form.title,
        status=form.status,
        form_type=form.form_type,
        field_count=len(form.fields or []),
        created_at=form.created_at,
        updated_at=form.updated_at,
    )


def _dump_fields(schema: FormSchema) -> list[dict]:
    return [field.model_dump(mode="json") for field in schema.fields]


def list_forms(db: Session, status: FormStatus | None = None) -> list[Form]:
    query = db.query(Form)
    if status:
        query = query.filter(Form.status == status.value)
    return query.order_by(Form.updated_at.desc()).all()


def get_form(db: Session, form_id: uuid.UUID) -> Form | None:
    return db.query(Form).filter(Form.id == form_id).first()


def load_form(db: Session, form_id: uuid.UUID, public_access_only: bool = False) -> Form | None:
    """Fetch a form; public access only ever sees active forms."""
    query = db.query(Form).filter(Form.id == form_id)
    if public_access_only:
        query = query.filter(Form.status == FormStatus.ACTIVE.value)
    return query.first()


def create_form(db: Session, data: FormCreate, created_by: str | None = None) -> Form:
    schema = FormSchema(
        title=data.title,
        description=data.description,
        form_type=data.form_type,
        fields=data.fields,
    )
    validate_for_save(schema)
    form = Form(
        title=schema.title.strip(),
        description=schema.description,
        status=FormStatus.DRAFT.value,
        form_type=schema.form_type.value,
        fields=_dump_fields(schema),
        created_by=created_by,
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    logger.info("form_created", extra={"form_id": str(form.id)})
    return form


def update_form(db: Session, form: Form, data: FormUpdate) -> Form:
    """Replace title, audience and fields; id and created_at are kept."""
    schema = form_to_schema(form).model_copy(
        update={
            "title": data.title,
            "description": data.description,
            "form_type": data.form_type,
            "fields": data.fields,
        }
    )
    validate_for_save(schema)
    form.title = schema.title.strip()
    form.description = schema.description
    form.form_type = schema.form_type.value
    form.fields = _dump_fields(schema)
    if data.status:
        form.status = data.status.value
    db.commit()
    db.refresh(form)
    logger.info("form_updated", extra={"form_id": str(form.id)})
    return form


def save_form(db: Session, schema: FormSchema) -> Form:
    """Create the form when ``schema.id`` is unset, else update that form in place."""
    if schema.id:
        form = get_form(db, schema.id)
        if form is None:
            raise NotFoundError("Form not found")
    else:
        form = create_form(
            db,
            FormCreate(
                title=schema.title,
                description=schema.description,
                form_type=schema.form_type,
                fields=schema.fields,
            ),
            created_by=schema.created_by,
        )
        if schema.status != FormStatus.DRAFT:
            form = set_form_status(db, form, schema.status)
        return form
    return update_form(
        db,
        form,
        FormUpdate(
            title=schema.title,
            description=schema.description,
            form_type=schema.form_type,
            fields=schema.fields,
            status=schema.status,
        ),
    )


def set_form_status(db: Session, form: Form, status: FormStatus) -> Form:
    if status == FormStatus.ACTIVE:
        validate_for_save(form_to_schema(form))
    form.status = status.value
    db.commit()
    db.refresh(form)
    logger.info("form_status_changed", extra={"form_id": str(form.id), "status": status.value})
    return form


def delete_form(db: Session, form: Form) -> None:
    """Delete a form together with its submissions."""
    form_id = form.id
    (
        db.query(FormSubmission)
        .filter(FormSubmission.form_id == form_id)
        .delete(synchronize_session=False)
    )
    db.delete(form)
    db.commit()
    logger.info("form_deleted", extra={"form_id": str(form_id)})
