"""
Filters module exceptions.
"""

from typing import Optional

from shared.exceptions import (
    FilterFusionError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class FilterError(FilterFusionError):
    """Base exception for filter-related errors."""

    pass


class FilterValidationError(ValidationError):
    """Raised when a create or update payload is incomplete."""

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None):
        super().__init__(
            message,
            code="FILTER_VALIDATION_ERROR",
            details={"missing_fields": missing_fields or []},
        )
        self.missing_fields = missing_fields or []

    @classmethod
    def missing(cls, fields: list[str]) -> "FilterValidationError":
        return cls(f"Missing required filter fields: {', '.join(fields)}", fields)


class FilterNotFoundError(NotFoundError):
    """Raised when a filter does not exist."""

    def __init__(self, filter_id: str):
        super().__init__(
            "The filter you are trying to modify does not exist.",
            code="FILTER_NOT_FOUND",
            details={"filter_id": filter_id},
        )
        self.filter_id = filter_id


class FilterPermissionError(PermissionDeniedError):
    """Raised when the store or the local role check refuses a mutation."""

    def __init__(self, filter_id: Optional[str] = None):
        super().__init__(details={"filter_id": filter_id} if filter_id else None)
        self.filter_id = filter_id


class MissingIndexError(FilterError):
    """Raised when the store needs a composite index to serve the listing."""

    def __init__(self, provider_message: str):
        super().__init__(
            "Failed to load filters: the database requires an index for this "
            "query. Open the link in the error details to create it in the "
            "Firebase console, then reload.",
            code="MISSING_INDEX",
            details={"provider_message": provider_message},
        )


class FilterStoreError(ExternalServiceError):
    """Any other document-store failure, with the provider message attached."""

    def __init__(self, operation: str, provider_message: str):
        super().__init__(
            f"Failed to {operation}. Details: {provider_message}",
            service="firestore",
            code="FILTER_STORE_ERROR",
            details={"operation": operation, "provider_message": provider_message},
        )
        self.operation = operation
        self.provider_message = provider_message
