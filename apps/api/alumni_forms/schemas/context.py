"""Caller context passed explicitly into pipelines."""

from pydantic import BaseModel


class RequestContext(BaseModel):
    actor_id: str | None = None
    request_id: str | None = None
