"""Structured logging helpers (PII-safe)."""

from typing import Any
from uuid import UUID


def build_log_context(
    *,
    actor_id: str | None = None,
    request_id: str | None = None,
    form_id: UUID | str | None = None,
    submission_id: UUID | str | None = None,
    stage: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict.

    Only identifiers of records are accepted. Answers, names, emails and
    external ids never belong here.
    """
    context: dict[str, Any] = {}
    if actor_id:
        context["actor_id"] = actor_id
    if request_id:
        context["request_id"] = request_id
    if form_id:
        context["form_id"] = str(form_id)
    if submission_id:
        context["submission_id"] = str(submission_id)
    if stage:
        context["stage"] = stage
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
