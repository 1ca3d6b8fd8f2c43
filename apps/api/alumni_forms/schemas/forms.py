"""Schemas for form definitions, the builder and public rendering."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, model_validator

from alumni_forms.db.enums import FieldType, FormStatus, FormType, MoveDirection
from alumni_forms.services import field_type_registry


class FieldDefinition(BaseModel):
    """A single question or display element.

    Type-dependent attributes are normalized on construction, so a display
    element never carries ``required``/``placeholder``/``mapped_field`` and
    only choice fields keep ``options``.
    """

    id: str = Field(..., min_length=1, max_length=100)
    type: FieldType
    label: str = Field("", max_length=5000)
    placeholder: str | None = Field(None, max_length=500)
    required: bool = False
    options: list[str] | None = None
    default_value: str | None = None
    mapped_field: str | None = Field(None, max_length=100)

    @model_validator(mode="after")
    def _normalize_for_type(self) -> "FieldDefinition":
        spec = field_type_registry.get_field_type_spec(self.type)
        if spec.is_display_element:
            self.required = False
            self.mapped_field = None
            self.default_value = None
        if not spec.accepts_placeholder:
            self.placeholder = None
        if not spec.accepts_options:
            self.options = None
        if self.mapped_field is not None and not self.mapped_field.strip():
            self.mapped_field = None
        return self


def _check_unique_field_ids(fields: list[FieldDefinition]) -> list[FieldDefinition]:
    seen: set[str] = set()
    for field in fields:
        if field.id in seen:
            raise ValueError(f"Duplicate field id: {field.id}")
        seen.add(field.id)
    return fields


# Field ids are unique within a form
FieldList = Annotated[list[FieldDefinition], AfterValidator(_check_unique_field_ids)]


class FormSchema(BaseModel):
    id: UUID | None = None
    title: str = Field("", max_length=200)
    description: str | None = None
    status: FormStatus = FormStatus.DRAFT
    form_type: FormType = FormType.STANDARD
    fields: FieldList = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FormCreate(BaseModel):
    title: str = Field("", max_length=200)
    description: str | None = None
    form_type: FormType = FormType.STANDARD
    fields: FieldList = Field(default_factory=list)


class FormUpdate(FormCreate):
    status: FormStatus | None = None


class FormStatusUpdate(BaseModel):
    status: FormStatus


class FormSummary(BaseModel):
    id: UUID
    title: str
    status: FormStatus
    form_type: FormType
    field_count: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Rendering / validation
# =============================================================================


class RenderedFieldRead(BaseModel):
    id: str
    type: FieldType
    label: str
    placeholder: str | None = None
    required: bool
    options: list[str]
    affordance: str
    is_display_element: bool
    value: Any = None
    year: int | None = None
    month: int | None = None
    answered: bool
    blocking: bool


class FormPublicRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    form_type: FormType
    fields: list[RenderedFieldRead]


class FormValuesRequest(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)


class FieldValidateRequest(FormValuesRequest):
    # Single-field check when set, whole-form check otherwise
    field_id: str | None = None


class FieldIssueRead(BaseModel):
    field_id: str
    label: str
    message: str


class FormValidationRead(BaseModel):
    valid: bool
    issues: list[FieldIssueRead]


# =============================================================================
# Builder (stateless editor operations)
# =============================================================================


class EditorState(BaseModel):
    form: FormSchema
    active_field_index: int | None = None

    @model_validator(mode="after")
    def _active_index_in_range(self) -> "EditorState":
        index = self.active_field_index
        if index is not None and not 0 <= index < len(self.form.fields):
            raise ValueError("active_field_index is out of range")
        return self


class EditorAddFieldRequest(BaseModel):
    state: EditorState
    type: FieldType = FieldType.TEXT


class EditorUpdateFieldRequest(BaseModel):
    state: EditorState
    index: int
    field: FieldDefinition


class EditorIndexRequest(BaseModel):
    state: EditorState
    index: int


class EditorMoveFieldRequest(EditorIndexRequest):
    direction: MoveDirection


class EditorReorderRequest(BaseModel):
    state: EditorState
    from_id: str
    to_id: str


class MappingOptionRead(BaseModel):
    value: str
    label: str
    entity: str
    value_type: str


class FieldTypeRead(BaseModel):
    value: str
    label: str
    affordance: str
    is_display_element: bool
    accepts_options: bool
    accepts_placeholder: bool


class SaveCheckRead(BaseModel):
    valid: bool
    errors: list[str]
    field_ids: list[str]
