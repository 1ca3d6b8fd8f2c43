"""Stateless form builder operations.

The client holds the schema being edited and its active-field pointer; each
call applies one edit and returns the new state. Nothing is persisted here.
"""

from fastapi import APIRouter, HTTPException

from alumni_forms.core.errors import ValidationError
from alumni_forms.schemas.forms import (
    EditorAddFieldRequest,
    EditorIndexRequest,
    EditorMoveFieldRequest,
    EditorReorderRequest,
    EditorState,
    EditorUpdateFieldRequest,
    SaveCheckRead,
)
from alumni_forms.services.form_editor import FormEditor

router = APIRouter(prefix="/forms/editor", tags=["forms-editor"])


def _editor_at(state: EditorState, index: int) -> FormEditor:
    if not 0 <= index < len(state.form.fields):
        raise HTTPException(status_code=400, detail="Field index out of range")
    return FormEditor.from_state(state)


@router.post("/add-field", response_model=EditorState)
def add_field(data: EditorAddFieldRequest):
    editor = FormEditor.from_state(data.state)
    editor.add_field(data.type)
    return editor.snapshot()


@router.post("/update-field", response_model=EditorState)
def update_field(data: EditorUpdateFieldRequest):
    editor = _editor_at(data.state, data.index)
    editor.update_field(data.index, data.field)
    return editor.snapshot()


@router.post("/remove-field", response_model=EditorState)
def remove_field(data: EditorIndexRequest):
    editor = _editor_at(data.state, data.index)
    editor.remove_field(data.index)
    return editor.snapshot()


@router.post("/duplicate-field", response_model=EditorState)
def duplicate_field(data: EditorIndexRequest):
    editor = _editor_at(data.state, data.index)
    editor.duplicate_field(data.index)
    return editor.snapshot()


@router.post("/move-field", response_model=EditorState)
def move_field(data: EditorMoveFieldRequest):
    editor = _editor_at(data.state, data.index)
    editor.move_field(data.index, data.direction)
    return editor.snapshot()


@router.post("/reorder", response_model=EditorState)
def reorder_fields(data: EditorReorderRequest):
    editor = FormEditor.from_state(data.state)
    if editor.index_of(data.from_id) is None or editor.index_of(data.to_id) is None:
        raise HTTPException(status_code=404, detail="Field not found")
    editor.reorder(data.from_id, data.to_id)
    return editor.snapshot()


@router.post("/check", response_model=SaveCheckRead)
def check_for_save(state: EditorState):
    """Report whether the edited form could be saved, without saving it."""
    try:
        FormEditor.from_state(state).validate_for_save()
    except ValidationError as exc:
        return SaveCheckRead(valid=False, errors=exc.errors, field_ids=exc.field_ids)
    return SaveCheckRead(valid=True, errors=[], field_ids=[])
