"""Schema editor engine: in-memory mutations over a form's field list.

One editor instance belongs to one editing session. Field ids are stable
across edits and moves; only duplication mints a new id.
"""

import uuid
from dataclasses import dataclass

from alumni_forms.core.errors import InvariantViolation, ValidationError
from alumni_forms.db.enums import FieldType, MoveDirection
from alumni_forms.schemas.forms import EditorState, FieldDefinition, FormSchema
from alumni_forms.services import field_mapping
from alumni_forms.services.field_type_registry import new_field_defaults


def generate_field_id() -> str:
    return str(uuid.uuid4())


@dataclass
class FormEditor:
    schema: FormSchema
    active_field_index: int | None = None

    @classmethod
    def from_state(cls, state: EditorState) -> "FormEditor":
        return cls(
            schema=state.form.model_copy(deep=True),
            active_field_index=state.active_field_index,
        )

    def snapshot(self) -> EditorState:
        return EditorState(
            form=self.schema.model_copy(deep=True),
            active_field_index=self.active_field_index,
        )

    @property
    def fields(self) -> list[FieldDefinition]:
        return self.schema.fields

    @property
    def active_field(self) -> FieldDefinition | None:
        if self.active_field_index is None:
            return None
        return self.fields[self.active_field_index]

    def index_of(self, field_id: str) -> int | None:
        for index, field in enumerate(self.fields):
            if field.id == field_id:
                return index
        return None

    def _require_index(self, index: int) -> None:
        if not 0 <= index < len(self.fields):
            raise InvariantViolation(
                f"Field index {index} out of range for {len(self.fields)} fields"
            )

    def _require_id(self, field_id: str) -> int:
        index = self.index_of(field_id)
        if index is None:
            raise InvariantViolation(f"Unknown field id: {field_id}")
        return index

    def add_field(self, field_type: FieldType = FieldType.TEXT) -> FieldDefinition:
        """Append a field with registry defaults and make it active."""
        field = FieldDefinition(id=generate_field_id(), **new_field_defaults(field_type))
        self.fields.append(field)
        self.active_field_index = len(self.fields) - 1
        return field

    def update_field(self, index: int, field: FieldDefinition) -> FieldDefinition:
        """Replace the field at ``index`` wholesale, keeping its id.

        The replacement is re-validated, so options disappear when the new
        type is not a choice type.
        """
        self._require_index(index)
        data = field.model_dump()
        data["id"] = self.fields[index].id
        updated = FieldDefinition.model_validate(data)
        self.fields[index] = updated
        return updated

    def remove_field(self, index: int) -> FieldDefinition:
        self._require_index(index)
        removed = self.fields.pop(index)
        self.active_field_index = None
        return removed

    def duplicate_field(self, index: int) -> FieldDefinition:
        """Insert a verbatim copy (new id) right after ``index``."""
        self._require_index(index)
        copy = self.fields[index].model_copy(update={"id": generate_field_id()}, deep=True)
        self.fields.insert(index + 1, copy)
        # Keep the pointer on the same field when the insert shifts it
        if self.active_field_index is not None and self.active_field_index > index:
            self.active_field_index += 1
        return copy

    def move_field(self, index: int, direction: MoveDirection) -> bool:
        """Swap with the neighbor in ``direction``; False at the boundary."""
        self._require_index(index)
        target = index - 1 if MoveDirection(direction) == MoveDirection.UP else index + 1
        if not 0 <= target < len(self.fields):
            return False
        self.fields[index], self.fields[target] = self.fields[target], self.fields[index]
        if self.active_field_index == index:
            self.active_field_index = target
        return True

    def reorder(self, from_id: str, to_id: str) -> bool:
        """Move ``from_id`` into the slot ``to_id`` occupied (splice, not swap)."""
        from_index = self._require_id(from_id)
        to_index = self._require_id(to_id)
        if from_index == to_index:
            return False
        active = self.active_field
        field = self.fields.pop(from_index)
        self.fields.insert(to_index, field)
        if active is not None:
            self.active_field_index = self.index_of(active.id)
        return True

    def validate_for_save(self) -> None:
        validate_for_save(self.schema)


def validate_for_save(schema: FormSchema) -> None:
    """Raise ValidationError unless the form is usable (title, fields, mappings)."""
    errors: list[str] = []
    field_ids: list[str] = []
    if not schema.title or not schema.title.strip():
        errors.append("Form title is required")
    if not schema.fields:
        errors.append("Form must have at least one field")
    for field_id, message in field_mapping.mapping_errors(schema):
        errors.append(message)
        field_ids.append(field_id)
    if errors:
        raise ValidationError("; ".join(errors), errors=errors, field_ids=field_ids)
