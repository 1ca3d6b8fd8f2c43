"""Form builder endpoints (admin)."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from alumni_forms.core.deps import get_db, get_request_context
from alumni_forms.db.enums import FormStatus
from alumni_forms.schemas.context import RequestContext
from alumni_forms.schemas.forms import (
    FieldTypeRead,
    FormCreate,
    FormSchema,
    FormStatusUpdate,
    FormSummary,
    FormUpdate,
    FormValuesRequest,
    MappingOptionRead,
    RenderedFieldRead,
)
from alumni_forms.services import field_mapping, field_type_registry, form_renderer, form_service

router = APIRouter(prefix="/forms", tags=["forms"])


def _get_form_or_404(db: Session, form_id: UUID):
    form = form_service.get_form(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("", response_model=list[FormSummary])
def list_forms(
    status: FormStatus | None = Query(None),
    db: Session = Depends(get_db),
):
    forms = form_service.list_forms(db, status=status)
    return [form_service.form_summary(form) for form in forms]


@router.get("/field-types", response_model=list[FieldTypeRead])
def list_field_types():
    return field_type_registry.list_field_types()


@router.get("/mapping-options", response_model=list[MappingOptionRead])
def list_mapping_options():
    return field_mapping.list_mapping_options()


@router.post("", response_model=FormSchema, status_code=201)
def create_form(
    data: FormCreate,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    form = form_service.create_form(db, data, created_by=context.actor_id)
    return form_service.form_to_schema(form)


@router.get("/{form_id}", response_model=FormSchema)
def get_form(form_id: UUID, db: Session = Depends(get_db)):
    return form_service.form_to_schema(_get_form_or_404(db, form_id))


@router.put("/{form_id}", response_model=FormSchema)
def update_form(form_id: UUID, data: FormUpdate, db: Session = Depends(get_db)):
    form = _get_form_or_404(db, form_id)
    form = form_service.update_form(db, form, data)
    return form_service.form_to_schema(form)


@router.patch("/{form_id}/status", response_model=FormSchema)
def set_form_status(form_id: UUID, data: FormStatusUpdate, db: Session = Depends(get_db)):
    form = _get_form_or_404(db, form_id)
    form = form_service.set_form_status(db, form, data.status)
    return form_service.form_to_schema(form)


@router.delete("/{form_id}", status_code=204)
def delete_form(form_id: UUID, db: Session = Depends(get_db)):
    form = _get_form_or_404(db, form_id)
    form_service.delete_form(db, form)
    return Response(status_code=204)


@router.post("/{form_id}/preview", response_model=list[RenderedFieldRead])
def preview_form(form_id: UUID, data: FormValuesRequest, db: Session = Depends(get_db)):
    """Render any form (drafts included) against sample answers."""
    schema = form_service.form_to_schema(_get_form_or_404(db, form_id))
    return [
        form_renderer.rendered_field_read(rendered)
        for rendered in form_renderer.render_form(schema, data.values)
    ]
