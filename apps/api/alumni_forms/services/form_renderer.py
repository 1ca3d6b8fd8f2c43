"""Form rendering and answer validation.

Works on any ``FormSchema`` plus a bag of answers keyed by field id. Used for
builder previews, the public form, per-field client checks and the
submission gate.
"""

import re
from dataclasses import dataclass
from typing import Any

from alumni_forms.core.errors import ValidationError
from alumni_forms.db.enums import FieldType
from alumni_forms.schemas.forms import FieldDefinition, FormSchema, RenderedFieldRead
from alumni_forms.services.field_type_registry import InputAffordance, get_field_type_spec

MONTH_YEAR_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})")


# =============================================================================
# Month-year composite ("YYYY-MM")
# =============================================================================


def encode_month_year(year: int, month: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    if not 0 <= year <= 9999:
        raise ValueError(f"Invalid year: {year}")
    return f"{year:04d}-{month:02d}"


def decode_month_year(value: Any) -> tuple[int | None, int | None]:
    """Return (year, month), or (None, None) for anything unparseable."""
    if not isinstance(value, str):
        return None, None
    match = MONTH_YEAR_PATTERN.fullmatch(value)
    if not match:
        return None, None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None, None
    return year, month


def join_month_year_parts(year: int | str | None, month: int | str | None) -> str:
    """Combine the two sub-select values; empty until both are chosen."""
    if year in (None, "") or month in (None, ""):
        return ""
    try:
        return encode_month_year(int(year), int(month))
    except ValueError:
        return ""


# =============================================================================
# Answer checks
# =============================================================================


def is_answered(field: FieldDefinition, value: Any) -> bool:
    spec = get_field_type_spec(field.type)
    if spec.is_display_element:
        return False
    if value is None:
        return False
    if spec.affordance == InputAffordance.MULTI_CHOICE:
        return isinstance(value, list) and len(value) > 0
    if spec.affordance == InputAffordance.MONTH_YEAR:
        year, _month = decode_month_year(value)
        return year is not None
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, dict)):
        return len(value) > 0
    # numbers (zero included) and booleans
    return True


def is_blocking(field: FieldDefinition, value: Any) -> bool:
    """True when this field alone prevents the form from being submitted."""
    if get_field_type_spec(field.type).is_display_element or not field.required:
        return False
    return not is_answered(field, value)


@dataclass
class FieldIssue:
    field_id: str
    label: str
    message: str


def validate_field(field: FieldDefinition, value: Any) -> FieldIssue | None:
    if is_blocking(field, value):
        return FieldIssue(
            field_id=field.id,
            label=field.label,
            message=f"{field.label or 'This field'} is required",
        )
    return None


def validate_answers(schema: FormSchema, values: dict[str, Any]) -> list[FieldIssue]:
    issues = []
    for field in schema.fields:
        issue = validate_field(field, values.get(field.id))
        if issue:
            issues.append(issue)
    return issues


def assert_submittable(schema: FormSchema, values: dict[str, Any]) -> None:
    """Submission gate: every required input field must be answered."""
    issues = validate_answers(schema, values)
    if issues:
        labels = ", ".join(issue.label or issue.field_id for issue in issues)
        raise ValidationError(
            f"Missing required fields: {labels}",
            errors=[issue.message for issue in issues],
            field_ids=[issue.field_id for issue in issues],
        )


# =============================================================================
# Rendering
# =============================================================================


@dataclass
class RenderedField:
    id: str
    type: FieldType
    label: str
    placeholder: str | None
    required: bool
    options: list[str]
    affordance: InputAffordance
    is_display_element: bool
    value: Any = None
    year: int | None = None
    month: int | None = None
    answered: bool = False
    blocking: bool = False


def render_field(field: FieldDefinition, value: Any = None) -> RenderedField:
    spec = get_field_type_spec(field.type)
    if value is None and not spec.is_display_element:
        value = field.default_value
    rendered = RenderedField(
        id=field.id,
        type=field.type,
        label=field.label,
        placeholder=field.placeholder,
        required=field.required,
        options=list(field.options or []),
        affordance=spec.affordance,
        is_display_element=spec.is_display_element,
        value=None if spec.is_display_element else value,
        answered=is_answered(field, value),
        blocking=is_blocking(field, value),
    )
    if spec.affordance == InputAffordance.MONTH_YEAR:
        rendered.year, rendered.month = decode_month_year(value)
    if spec.affordance == InputAffordance.MULTI_CHOICE and not isinstance(value, list):
        rendered.value = []
    return rendered


def render_form(schema: FormSchema, values: dict[str, Any] | None = None) -> list[RenderedField]:
    values = values or {}
    return [render_field(field, values.get(field.id)) for field in schema.fields]


def rendered_field_read(rendered: RenderedField) -> RenderedFieldRead:
    return RenderedFieldRead(
        id=rendered.id,
        type=rendered.type,
        label=rendered.label,
        placeholder=rendered.placeholder,
        required=rendered.required,
        options=rendered.options,
        affordance=rendered.affordance.value,
        is_display_element=rendered.is_display_element,
        value=rendered.value,
        year=rendered.year,
        month=rendered.month,
        answered=rendered.answered,
        blocking=rendered.blocking,
    )
