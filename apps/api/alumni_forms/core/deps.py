"""FastAPI dependencies for database access and caller context."""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from alumni_forms.db.session import SessionLocal
from alumni_forms.schemas.context import RequestContext
from alumni_forms.services.collaborators import DatabaseCollaborators

ACTOR_HEADER = "X-Actor-Id"
REQUEST_ID_HEADER = "X-Request-ID"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_request_context(request: Request) -> RequestContext:
    """Caller identity as forwarded by the authenticating proxy."""
    return RequestContext(
        actor_id=request.headers.get(ACTOR_HEADER) or None,
        request_id=request.headers.get(REQUEST_ID_HEADER) or None,
    )


def get_collaborators(db: Session = Depends(get_db)) -> DatabaseCollaborators:
    return DatabaseCollaborators(db)
