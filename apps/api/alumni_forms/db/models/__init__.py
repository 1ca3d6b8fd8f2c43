"""SQLAlchemy ORM models."""

from alumni_forms.db.models.contacts import Contact, EmploymentRecord
from alumni_forms.db.models.forms import Form, FormSubmission

__all__ = ["Contact", "EmploymentRecord", "Form", "FormSubmission"]
