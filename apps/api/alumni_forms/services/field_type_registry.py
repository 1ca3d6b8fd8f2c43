"""Field type registry: per-type structural rules and creation defaults.

Every type-specific decision in the builder, renderer and mapping code is a
lookup into ``FIELD_TYPES`` rather than a branch on the type tag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from alumni_forms.db.enums import FieldType


class InputAffordance(str, Enum):
    """Input widget class a field renders as."""

    FREE_TEXT = "free_text"
    MULTI_LINE_TEXT = "multi_line_text"
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    DATE = "date"
    MONTH_YEAR = "month_year"
    DISPLAY = "display"


DEFAULT_INPUT_LABEL = "New Field"


@dataclass(frozen=True)
class FieldTypeSpec:
    type: FieldType
    display_name: str
    affordance: InputAffordance
    is_display_element: bool = False
    accepts_options: bool = False
    accepts_placeholder: bool = True
    default_label: str = DEFAULT_INPUT_LABEL
    default_required: bool = False


def _display_spec(field_type: FieldType, display_name: str, default_label: str) -> FieldTypeSpec:
    return FieldTypeSpec(
        type=field_type,
        display_name=display_name,
        affordance=InputAffordance.DISPLAY,
        is_display_element=True,
        accepts_placeholder=False,
        default_label=default_label,
    )


FIELD_TYPES: dict[FieldType, FieldTypeSpec] = {
    FieldType.TEXT: FieldTypeSpec(
        type=FieldType.TEXT,
        display_name="Text",
        affordance=InputAffordance.FREE_TEXT,
    ),
    FieldType.TEXTAREA: FieldTypeSpec(
        type=FieldType.TEXTAREA,
        display_name="Paragraph",
        affordance=InputAffordance.MULTI_LINE_TEXT,
    ),
    FieldType.EMAIL: FieldTypeSpec(
        type=FieldType.EMAIL,
        display_name="Email",
        affordance=InputAffordance.FREE_TEXT,
    ),
    FieldType.NUMBER: FieldTypeSpec(
        type=FieldType.NUMBER,
        display_name="Number",
        affordance=InputAffordance.FREE_TEXT,
    ),
    # Choice fields
    FieldType.SELECT: FieldTypeSpec(
        type=FieldType.SELECT,
        display_name="Dropdown",
        affordance=InputAffordance.SINGLE_CHOICE,
        accepts_options=True,
    ),
    FieldType.CHECKBOX: FieldTypeSpec(
        type=FieldType.CHECKBOX,
        display_name="Checkboxes",
        affordance=InputAffordance.MULTI_CHOICE,
        accepts_options=True,
        accepts_placeholder=False,
    ),
    FieldType.RADIO: FieldTypeSpec(
        type=FieldType.RADIO,
        display_name="Multiple Choice",
        affordance=InputAffordance.SINGLE_CHOICE,
        accepts_options=True,
        accepts_placeholder=False,
    ),
    FieldType.DATE: FieldTypeSpec(
        type=FieldType.DATE,
        display_name="Date",
        affordance=InputAffordance.DATE,
    ),
    # Rendered as two sub-selects, stored as "YYYY-MM"
    FieldType.MONTH_YEAR: FieldTypeSpec(
        type=FieldType.MONTH_YEAR,
        display_name="Month & Year",
        affordance=InputAffordance.MONTH_YEAR,
    ),
    # Display elements: the label is the rendered content
    FieldType.HEADER: _display_spec(FieldType.HEADER, "Section Header", "Section Header"),
    FieldType.DESCRIPTION: _display_spec(FieldType.DESCRIPTION, "Description", "Description text"),
    FieldType.DIVIDER: _display_spec(FieldType.DIVIDER, "Divider", ""),
}


def get_field_type_spec(field_type: FieldType | str) -> FieldTypeSpec:
    """Look up a type; raises ValueError for strings that are not a field type."""
    return FIELD_TYPES[FieldType(field_type)]


def is_display_element(field_type: FieldType | str) -> bool:
    return get_field_type_spec(field_type).is_display_element


def accepts_options(field_type: FieldType | str) -> bool:
    return get_field_type_spec(field_type).accepts_options


def accepts_placeholder(field_type: FieldType | str) -> bool:
    return get_field_type_spec(field_type).accepts_placeholder


def new_field_defaults(field_type: FieldType | str) -> dict[str, Any]:
    """Attributes applied to a freshly added field of this type (id excluded)."""
    spec = get_field_type_spec(field_type)
    defaults: dict[str, Any] = {
        "type": spec.type,
        "label": spec.default_label,
        "required": spec.default_required,
    }
    if spec.accepts_placeholder:
        defaults["placeholder"] = ""
    if spec.accepts_options:
        defaults["options"] = []
    return defaults


def list_field_types() -> list[dict[str, Any]]:
    """Catalog for the form builder palette."""
    return [
        {
            "value": spec.type.value,
            "label": spec.display_name,
            "affordance": spec.affordance.value,
            "is_display_element": spec.is_display_element,
            "accepts_options": spec.accepts_options,
            "accepts_placeholder": spec.accepts_placeholder,
        }
        for spec in FIELD_TYPES.values()
    ]
