"""
Domain exceptions for the check-in service.

Services raise these instead of HTTPException so they stay usable from the
seeding script and tests. The handler registered in checkin.main turns them
into JSON responses with the exception's status code and machine code.
"""
from typing import Any, Dict, List, Optional

from fastapi import status


class CheckInError(Exception):
    """Base exception for every per-request failure raised by the core.

    Attributes:
        message: User-facing description of what went wrong
        status_code: HTTP status the API layer responds with
        code: Stable machine-readable code for clients
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "CHECKIN_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Body of the error response."""
        return {"detail": self.message, "code": self.code}


class NotFoundError(CheckInError):
    """No active quiz, or a referenced quiz/question/option does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ValidationError(CheckInError):
    """
    Submission rejected before the decision engine runs.

    Carries one entry per offending field so the client can point the
    patient at the exact question that is missing or invalid.
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class ConflictError(CheckInError):
    """Duplicate daily submission, or a structural edit of a live quiz."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
