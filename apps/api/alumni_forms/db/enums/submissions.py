"""Submission-related enums."""

from enum import Enum


class SubmissionType(str, Enum):
    """Discriminator for submission content."""

    FORM_RESPONSE = "form_response"
    EVENT_RSVP = "event-rsvp"
    VOLUNTEER = "volunteer"
    NEW_INFO = "new-info"
    OTHER = "other"
    UPDATE = "update"


class SubmissionStatus(str, Enum):
    """Review status of a submission."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    PROCESSED = "processed"
    ARCHIVED = "archived"


class SubmitterKind(str, Enum):
    """How the submitter identified themselves."""

    NAMED = "named"
    ANONYMOUS = "anonymous"
    EXTERNAL_ID = "external_id"


class PipelineStage(str, Enum):
    """Stage of the capture/processing pipelines a failure is attributed to."""

    VALIDATION = "validation"
    IDENTITY_RESOLUTION = "identity_resolution"
    ENTITY_WRITE = "entity_write"
    PERSISTENCE = "persistence"


class ProcessOutcome(str, Enum):
    """What processing a submission did to downstream records."""

    CONTACT_UPDATED = "contact_updated"
    CONTACT_CREATED = "contact_created"
    NOT_APPLIED = "not_applied"
    NOTHING_TO_APPLY = "nothing_to_apply"


DEFAULT_SUBMISSION_STATUS = SubmissionStatus.PENDING
