"""Enum definitions for application constants."""

from alumni_forms.db.enums.forms import FieldType, FormStatus, FormType, MoveDirection
from alumni_forms.db.enums.submissions import (
    DEFAULT_SUBMISSION_STATUS,
    PipelineStage,
    ProcessOutcome,
    SubmissionStatus,
    SubmissionType,
    SubmitterKind,
)

__all__ = [
    "DEFAULT_SUBMISSION_STATUS",
    "FieldType",
    "FormStatus",
    "FormType",
    "MoveDirection",
    "PipelineStage",
    "ProcessOutcome",
    "SubmissionStatus",
    "SubmissionType",
    "SubmitterKind",
]
