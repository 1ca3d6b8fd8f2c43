"""Tests for structured logging helpers."""

import uuid

from alumni_forms.core.structured_logging import build_log_context


def test_build_log_context_includes_only_provided_fields():
    form_id = uuid.uuid4()
    context = build_log_context(
        actor_id="admin-1",
        request_id="req-1",
        form_id=form_id,
        route="/forms",
        method="GET",
    )

    assert context == {
        "actor_id": "admin-1",
        "request_id": "req-1",
        "form_id": str(form_id),
        "route": "/forms",
        "method": "GET",
    }


def test_build_log_context_ignores_empty_fields():
    context = build_log_context(
        actor_id="",
        submission_id=None,
        request_id="req-1",
        stage="entity_write",
    )

    assert context == {"request_id": "req-1", "stage": "entity_write"}
