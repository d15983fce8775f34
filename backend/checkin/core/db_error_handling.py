"""
Database error handling utilities.

This module provides a reusable context manager for handling database errors
consistently across the catalog administration endpoints. It centralizes the
common pattern of:
1. Rolling back the database session on error
2. Logging the error with context
3. Raising an appropriate HTTPException

Domain exceptions (CheckInError) and HTTPExceptions raised inside the block
are re-raised untouched after the rollback, so a ConflictError from the
live-quiz guard still reaches the client as 409.

Usage:
    from checkin.core.db_error_handling import handle_db_error

    with handle_db_error(db, "create quiz"):
        quiz = create_quiz(db, ...)
        return quiz
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from checkin.core.error_responses import ErrorMessages
from checkin.core.exceptions import CheckInError

logger = logging.getLogger(__name__)


class DatabaseOperationError(Exception):
    """Exception raised when a database operation fails outside a request.

    Used by the seeding script, where HTTPException is not appropriate.

    Attributes:
        operation_name: Human-readable name of the operation that failed
        original_error: The underlying exception that caused the failure
        message: The formatted error message
    """

    def __init__(
        self,
        operation_name: str,
        original_error: Exception,
        message: Optional[str] = None,
    ):
        self.operation_name = operation_name
        self.original_error = original_error
        self.message = message or f"Failed to {operation_name}: {str(original_error)}"
        super().__init__(self.message)


@contextmanager
def handle_db_error(
    db: Session,
    operation_name: str,
    *,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    log_level: int = logging.ERROR,
) -> Generator[None, None, None]:
    """Context manager for handling database errors consistently.

    Args:
        db: The SQLAlchemy database session to rollback on error.
        operation_name: Human-readable name of the operation for error messages
            and logging (e.g., "create quiz", "update option").
        status_code: HTTP status code to use in the raised HTTPException.
            Defaults to 500 Internal Server Error.
        log_level: Logging level for error messages. Defaults to logging.ERROR.

    Yields:
        None - the context manager is used for its side effects only.

    Raises:
        CheckInError: Re-raised unchanged, with the session rolled back.
        HTTPException: Re-raised unchanged, or raised for any other exception
            with a generic user-facing message and the session rolled back.
    """
    try:
        yield
    except (CheckInError, HTTPException):
        db.rollback()
        raise
    except (SQLAlchemyError, Exception) as e:
        db.rollback()

        logger.log(
            log_level,
            f"Database error during {operation_name}: {e}",
            exc_info=True,
        )

        # Technical details stay in the log
        raise HTTPException(
            status_code=status_code,
            detail=ErrorMessages.database_operation_failed(operation_name),
        ) from e
