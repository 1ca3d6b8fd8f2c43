"""Form-related enums."""

from enum import Enum


class FieldType(str, Enum):
    """Kinds of field a form schema may contain."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    MONTH_YEAR = "month-year"
    HEADER = "header"
    DESCRIPTION = "description"
    DIVIDER = "divider"


class FormStatus(str, Enum):
    """Status of a form configuration."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class FormType(str, Enum):
    """Audience of a form.

    - STANDARD: every submission carries the submitter's external id (UVID)
    - ANONYMOUS: no identifying submitter information is collected
    """

    STANDARD = "standard"
    ANONYMOUS = "anonymous"


class MoveDirection(str, Enum):
    """Direction for swapping a field with its neighbor."""

    UP = "up"
    DOWN = "down"
