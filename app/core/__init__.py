"""
Core infrastructure shared by every app.

Public API:
    - BaseService: service base class (logger, atomic block)
    - BaseApplicationError and subclasses: typed domain errors
    - generate_reference: human-readable unique references

Note:
    Models, model mixins and viewset mixins are not imported here because
    they need the app registry. Import them from their modules:
        from core.models import BaseModel
        from core.model_mixins import UUIDPrimaryKeyMixin
        from core.viewset_mixins import ApplicationErrorMixin, OwnerScopedMixin
"""

from .exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .helpers import generate_reference
from .services import BaseService

__all__ = [
    "BaseService",
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "generate_reference",
]
