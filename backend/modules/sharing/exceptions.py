"""
Sharing module exceptions.
"""

from shared.exceptions import (
    FilterFusionError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
)


SIGN_IN_REQUIRED_MESSAGE = "You must be signed in to share images."


class ShareError(FilterFusionError):
    """Raised when the upload-and-link flow fails."""

    def __init__(self, reason: str):
        super().__init__(
            f"Could not create share link: {reason}",
            code="SHARE_FAILED",
            details={"reason": reason},
        )


class ShareNotFoundError(NotFoundError):
    """Raised when a share id does not resolve."""

    def __init__(self, share_id: str):
        super().__init__(
            f"Share not found: {share_id}",
            code="SHARE_NOT_FOUND",
            details={"share_id": share_id},
        )


class ShareSignInRequiredError(PermissionDeniedError):
    """Link sharing needs a signed-in user."""

    def __init__(self) -> None:
        super().__init__(SIGN_IN_REQUIRED_MESSAGE)


class ShareCancelledError(FilterFusionError):
    """The user dismissed the native share sheet."""

    def __init__(self) -> None:
        super().__init__("Share was cancelled", code="SHARE_CANCELLED")


class StorageUploadError(ExternalServiceError):
    """Object storage answered an upload with an error."""

    def __init__(self, message: str, status_code: int):
        super().__init__(
            f"Upload failed: {message}",
            service="storage",
            code="STORAGE_UPLOAD_FAILED",
            details={"status_code": status_code},
        )
        self.status_code = status_code
