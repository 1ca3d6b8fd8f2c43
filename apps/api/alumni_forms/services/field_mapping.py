"""Field mapping table: form fields to contact and employment attributes.

Target paths are camelCase attribute names (``firstName``) for the contact
profile and ``employment.``-prefixed names (``employment.jobTitle``) for the
contact's employment record. The catalog of valid targets is derived from the
``ContactUpdate`` and ``EmploymentRecordUpdate`` schemas.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import UnionType
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, EmailStr
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from alumni_forms.schemas.contacts import ContactUpdate, EmploymentRecordUpdate
from alumni_forms.schemas.forms import FormSchema
from alumni_forms.services import field_type_registry
from alumni_forms.services.form_renderer import decode_month_year

EMPLOYMENT_PREFIX = "employment."

logger = logging.getLogger(__name__)


class TargetEntity(str, Enum):
    CONTACT = "contact"
    EMPLOYMENT = "employment"


@dataclass(frozen=True)
class MappingTarget:
    path: str
    entity: TargetEntity
    attribute: str
    value_type: str


@dataclass
class MappedUpdates:
    """Mapped fields split per entity, keyed by model attribute name."""

    contact: dict[str, Any] = field(default_factory=dict)
    employment: dict[str, Any] = field(default_factory=dict)
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.contact and not self.employment


_LABEL_OVERRIDES: dict[str, str] = {
    "linked_in": "LinkedIn",
    "job_title": "Job Title",
    "is_current": "Current Position",
}


def _unwrap_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    if origin in (UnionType, Union):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap_annotation(args[0])
        return annotation
    origin_name = str(origin)
    if "Annotated" in origin_name:
        args = get_args(annotation)
        if args:
            return _unwrap_annotation(args[0])
    return annotation


def _value_type_from_annotation(annotation: Any) -> str | None:
    base = _unwrap_annotation(annotation)
    if base is bool:
        return "bool"
    if base is int:
        return "int"
    if base is date:
        return "date"
    if base is EmailStr or base is str:
        return "str"
    if isinstance(base, type):
        if issubclass(base, bool):
            return "bool"
        if issubclass(base, int):
            return "int"
        if issubclass(base, date):
            return "date"
        if issubclass(base, str):
            return "str"
    return None


def _build_targets(model: type[BaseModel], entity: TargetEntity, prefix: str) -> dict[str, MappingTarget]:
    targets: dict[str, MappingTarget] = {}
    for attribute, model_field in model.model_fields.items():
        value_type = _value_type_from_annotation(model_field.annotation)
        if not value_type:
            continue
        path = f"{prefix}{to_camel(attribute)}"
        targets[path] = MappingTarget(
            path=path, entity=entity, attribute=attribute, value_type=value_type
        )
    return targets


MAPPING_TARGETS: dict[str, MappingTarget] = {
    **_build_targets(ContactUpdate, TargetEntity.CONTACT, ""),
    **_build_targets(EmploymentRecordUpdate, TargetEntity.EMPLOYMENT, EMPLOYMENT_PREFIX),
}

_TARGET_MODELS: dict[TargetEntity, type[BaseModel]] = {
    TargetEntity.CONTACT: ContactUpdate,
    TargetEntity.EMPLOYMENT: EmploymentRecordUpdate,
}


def parse_target_path(path: str) -> MappingTarget:
    target = MAPPING_TARGETS.get(path)
    if target is None:
        raise ValueError(f"Unknown mapping target: {path}")
    return target


def _humanize_attribute(attribute: str) -> str:
    if attribute in _LABEL_OVERRIDES:
        return _LABEL_OVERRIDES[attribute]
    return attribute.replace("_", " ").title()


def list_mapping_options() -> list[dict[str, Any]]:
    options = []
    for target in MAPPING_TARGETS.values():
        label = _humanize_attribute(target.attribute)
        if target.entity == TargetEntity.EMPLOYMENT:
            label = f"Employment: {label}"
        options.append(
            {
                "value": target.path,
                "label": label,
                "entity": target.entity.value,
                "value_type": target.value_type,
            }
        )
    return options


def build_mapping_table(schema: FormSchema) -> dict[str, str]:
    """Field id -> target path for every mapped input field."""
    return {
        f.id: f.mapped_field
        for f in schema.fields
        if f.mapped_field and not field_type_registry.is_display_element(f.type)
    }


def mapping_errors(schema: FormSchema) -> list[tuple[str, str]]:
    """(field id, message) for unknown targets and targets mapped twice."""
    errors: list[tuple[str, str]] = []
    claimed: dict[str, str] = {}
    labels = {f.id: f.label or f.id for f in schema.fields}
    for field_id, path in build_mapping_table(schema).items():
        if path not in MAPPING_TARGETS:
            errors.append((field_id, f"Field '{labels[field_id]}' maps to unknown target '{path}'"))
            continue
        if path in claimed:
            errors.append(
                (
                    field_id,
                    f"Fields '{labels[claimed[path]]}' and '{labels[field_id]}' "
                    f"both map to '{path}'",
                )
            )
            continue
        claimed[path] = field_id
    return errors


def is_present(value: Any) -> bool:
    return not (value is None or value == "" or value == [] or value == {})


def coerce_mapped_value(value: Any) -> str | int | float | bool | None:
    """Reduce a raw answer to a scalar; lists and objects become strings."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return str(value)


def compute_mapped_fields(schema: FormSchema, content: dict[str, Any]) -> dict[str, Any]:
    """Target path -> coerced answer for every mapped field that was answered."""
    mapped: dict[str, Any] = {}
    for field_id, path in build_mapping_table(schema).items():
        value = content.get(field_id)
        if not is_present(value):
            continue
        mapped[path] = coerce_mapped_value(value)
    return mapped


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        cleaned = value.strip().lower()
        if cleaned in {"true", "yes", "1", "y"}:
            return True
        if cleaned in {"false", "no", "0", "n"}:
            return False
    raise ValueError("Invalid boolean value")


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        try:
            return date.fromisoformat(cleaned)
        except ValueError:
            pass
        year, month = decode_month_year(cleaned)
        if year is not None and month is not None:
            return date(year, month, 1)
    raise ValueError("Invalid date value")


def coerce_target_value(target: MappingTarget, value: Any) -> Any:
    """Convert a mapped value to the target attribute's type.

    Raises ValueError when the value cannot represent that type.
    """
    if value is None:
        return None
    if target.value_type == "bool":
        return _parse_bool(value)
    if target.value_type == "int":
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer for {target.path}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"Invalid integer for {target.path}")
            return int(value)
        try:
            return int(str(value).strip())
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid integer for {target.path}") from exc
    if target.value_type == "date":
        return _parse_date(value)
    if isinstance(value, str):
        return value.strip()
    return str(value)


def validate_target_value(target: MappingTarget, value: Any) -> Any:
    """Check a converted value against the constraints of its target model.

    Raises ValueError when the model rejects it (bad email, out-of-range
    year, too long for the column).
    """
    model = _TARGET_MODELS[target.entity]
    try:
        validated = model.model_validate({target.attribute: value})
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid value for {target.path}") from exc
    return getattr(validated, target.attribute)


def split_mapped_fields(mapped: dict[str, Any]) -> MappedUpdates:
    """Route mapped values to contact or employment updates.

    Unknown targets and values that do not fit their target attribute are skipped
    and reported in ``skipped``.
    """
    updates = MappedUpdates()
    for path, value in mapped.items():
        try:
            target = parse_target_path(path)
        except ValueError:
            logger.warning("mapped_field_unknown_target", extra={"target": path})
            updates.skipped.append(path)
            continue
        try:
            coerced = validate_target_value(target, coerce_target_value(target, value))
        except ValueError:
            logger.warning("mapped_field_uncoercible", extra={"target": path})
            updates.skipped.append(path)
            continue
        if target.entity == TargetEntity.EMPLOYMENT:
            updates.employment[target.attribute] = coerced
        else:
            updates.contact[target.attribute] = coerced
        updates.applied.append(path)
    return updates
