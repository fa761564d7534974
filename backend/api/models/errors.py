"""
Error response models.

Standardized error responses for the API.
"""

from typing import Optional

from pydantic import BaseModel

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    FilterFusionError,
    NotFoundError,
    ProviderError,
    ValidationError,
)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    code: Optional[str] = None


# Checked in order; the first matching base wins
_STATUS_BY_ERROR: list[tuple[type[FilterFusionError], int]] = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ProviderError, 502),
    (ExternalServiceError, 502),
]


def status_code_for(error: FilterFusionError) -> int:
    """HTTP status for a domain error; 500 for anything unmapped."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500
