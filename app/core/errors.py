"""Error taxonomy shared by services and mapped to HTTP responses in app.main."""


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(ServiceError):
    """Missing or malformed input; correctable by the caller."""

    status_code = 400


class InvalidCategoryError(InputValidationError):
    """Category is outside the fixed set of image categories."""

    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__("Invalid category")


class EmptyBatchError(InputValidationError):
    """Upload batch has no files (or more than allowed)."""


class ConflictError(ServiceError):
    """A unique key (e.g. email) is already taken."""

    status_code = 409


class UnauthorizedError(ServiceError):
    """Token missing, invalid, expired, or bound to a user that no longer exists."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Authenticated identity lacks the required role."""

    status_code = 403


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""

    status_code = 404


class AssetNotFoundError(NotFoundError):
    """No index record for the requested asset id."""


class AssetFileMissingError(NotFoundError):
    """Storage key has no bytes in the asset store."""

    def __init__(self, storage_key: str) -> None:
        self.storage_key = storage_key
        super().__init__(f"File not found for key {storage_key!r}")


class ListingNotFoundError(NotFoundError):
    """No service listing with the requested id."""


class InternalFailureError(ServiceError):
    """Store unreachable or I/O failure; logged, not detailed to the caller."""

    status_code = 500


class BatchUploadError(InternalFailureError):
    """All-or-nothing upload failed and completed files were rolled back."""


class MailDeliveryError(InternalFailureError):
    """SMTP is not configured or the message could not be delivered."""


class AssetStoreError(ServiceError):
    """Filesystem operation failed for a reason other than a missing file; retryable."""

    status_code = 503
