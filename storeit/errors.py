"""Error types raised by file actions and backend clients."""

from __future__ import annotations


class StoreItError(Exception):
    """Base class for StoreIt errors."""


class AuthenticationError(StoreItError):
    """No authenticated user could be resolved."""


class BackendError(StoreItError):
    """Object storage or document database call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(BackendError):
    """Document or blob not found in the backend."""


class CompensationError(BackendError):
    """Rollback of an orphaned blob failed after a document write failed.

    Carries both failures: ``original_error`` is the document creation
    failure, ``compensation_error`` is the failed blob deletion.
    """

    def __init__(
        self,
        bucket_file_id: str,
        original_error: BaseException,
        compensation_error: BaseException,
    ):
        super().__init__(
            f"Failed to delete orphaned blob {bucket_file_id} "
            f"after document creation failed: {original_error}"
        )
        self.bucket_file_id = bucket_file_id
        self.original_error = original_error
        self.compensation_error = compensation_error
