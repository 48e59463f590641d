"""Error taxonomy shared by the catalog and cart services.

Services raise these; the HTTP layer maps them to
``{"status": "error", "kind": ..., "message": ...}`` responses.
"""

from fastapi import status


class StoreError(Exception):
    """Base class for failures that are reported to the caller."""

    kind = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"status": "error", "kind": self.kind, "message": self.message}


class NotFoundError(StoreError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(StoreError):
    kind = "validation"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(StoreError):
    """Duplicate business key. Reported as 400 like other client errors."""

    kind = "conflict"
    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(StoreError):
    kind = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
