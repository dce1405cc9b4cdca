"""
Core Application - Infrastructure & Base Classes

Generic building blocks with no billing-specific logic.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - NotFoundError: Expected record missing
    - ExternalServiceError: Third-party service failures

Note:
    Models are NOT imported here to avoid AppRegistryNotReady errors.
    Import them directly from core.models.
"""

from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    NotFoundError,
)

__all__ = [
    "BaseApplicationError",
    "ExternalServiceError",
    "NotFoundError",
]
