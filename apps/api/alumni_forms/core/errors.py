"""Error taxonomy shared by the form engine and submission pipelines."""

from contextlib import contextmanager
from typing import Iterator

from alumni_forms.db.enums import PipelineStage


class FormsError(Exception):
    """Base error for form and submission operations.

    ``stage`` names the pipeline step the failure belongs to, so callers can
    tell a correctable input problem from a failed downstream write.
    """

    def __init__(self, message: str, *, stage: PipelineStage | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class ValidationError(FormsError):
    """User-correctable problem with submitted or saved data."""

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        field_ids: list[str] | None = None,
        stage: PipelineStage | None = PipelineStage.VALIDATION,
    ):
        super().__init__(message, stage=stage)
        self.errors = errors or [message]
        self.field_ids = field_ids or []


class NotFoundError(FormsError):
    """Referenced form, contact or submission is missing or not accessible."""

    pass


class CollaboratorError(FormsError):
    """Transient failure from a storage boundary call."""

    def __init__(
        self,
        message: str,
        *,
        stage: PipelineStage | None = None,
        retryable: bool = False,
    ):
        super().__init__(message, stage=stage)
        self.retryable = retryable


class InvariantViolation(AssertionError):
    """Programming error: the caller broke an engine precondition."""

    pass


@contextmanager
def pipeline_stage(stage: PipelineStage) -> Iterator[None]:
    """Attribute errors raised inside the block to ``stage`` unless already set."""
    try:
        yield
    except FormsError as exc:
        if exc.stage is None:
            exc.stage = stage
        raise
