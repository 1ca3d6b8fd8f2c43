"""Public form endpoints for submitters."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from alumni_forms.core.config import settings
from alumni_forms.core.deps import get_collaborators, get_db, get_request_context
from alumni_forms.core.rate_limit import limiter
from alumni_forms.schemas.context import RequestContext
from alumni_forms.schemas.forms import (
    FieldIssueRead,
    FieldValidateRequest,
    FormPublicRead,
    FormSchema,
    FormValidationRead,
)
from alumni_forms.schemas.submissions import PublicSubmissionCreate, SubmissionPublicResponse
from alumni_forms.services import form_renderer, form_service, submission_capture_service
from alumni_forms.services.collaborators import DatabaseCollaborators

router = APIRouter(prefix="/forms/public", tags=["forms-public"])


def _active_schema_or_404(db: Session, form_id: UUID) -> FormSchema:
    form = form_service.load_form(db, form_id, public_access_only=True)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form_service.form_to_schema(form)


@router.get("/{form_id}", response_model=FormPublicRead)
@limiter.limit(f"{settings.RATE_LIMIT_PUBLIC_READ}/minute")
def get_public_form(request: Request, form_id: UUID, db: Session = Depends(get_db)):
    schema = _active_schema_or_404(db, form_id)
    return FormPublicRead(
        id=schema.id,
        title=schema.title,
        description=schema.description,
        form_type=schema.form_type,
        fields=[
            form_renderer.rendered_field_read(rendered)
            for rendered in form_renderer.render_form(schema)
        ],
    )


@router.post("/{form_id}/validate", response_model=FormValidationRead)
@limiter.limit(f"{settings.RATE_LIMIT_PUBLIC_READ}/minute")
def validate_public_form(
    request: Request,
    form_id: UUID,
    data: FieldValidateRequest,
    db: Session = Depends(get_db),
):
    schema = _active_schema_or_404(db, form_id)
    if data.field_id is not None:
        field = next((f for f in schema.fields if f.id == data.field_id), None)
        if field is None:
            raise HTTPException(status_code=404, detail="Field not found")
        issue = form_renderer.validate_field(field, data.values.get(field.id))
        issues = [issue] if issue else []
    else:
        issues = form_renderer.validate_answers(schema, data.values)
    return FormValidationRead(
        valid=not issues,
        issues=[
            FieldIssueRead(field_id=i.field_id, label=i.label, message=i.message)
            for i in issues
        ],
    )


@router.post("/{form_id}/submit", response_model=SubmissionPublicResponse, status_code=201)
@limiter.limit(f"{settings.RATE_LIMIT_PUBLIC_SUBMIT}/minute")
async def submit_public_form(
    request: Request,
    form_id: UUID,
    data: PublicSubmissionCreate,
    context: RequestContext = Depends(get_request_context),
    collaborators: DatabaseCollaborators = Depends(get_collaborators),
):
    submission = await submission_capture_service.capture_submission(
        form_id=form_id,
        content=data.content,
        external_id=data.external_id,
        is_anonymous=data.is_anonymous,
        forms=collaborators,
        contacts=collaborators,
        submissions=collaborators,
        context=context,
    )
    return SubmissionPublicResponse(id=submission.id, status=submission.status)
