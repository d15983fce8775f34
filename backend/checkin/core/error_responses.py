"""
Standardized error response messages and builders.

This module provides consistent error messages and HTTPException builders
for the entire API. Using these utilities ensures:

1. Consistent message format across all endpoints
2. User-friendly error messages without leaking implementation details
3. Clear separation of user-facing messages from log messages

Error Message Format Guidelines:
- Use sentence case (capitalize first letter only)
- End with a period for complete sentences
- Include relevant IDs in parentheses when helpful for debugging: "(ID: 123)"
- Use "Please try again later." for transient server errors

Usage:
    from checkin.core.error_responses import ErrorMessages, raise_unauthorized

    raise_unauthorized(ErrorMessages.INVALID_TOKEN)

Domain failures (not found, invalid submission, duplicate check-in) are raised
as checkin.core.exceptions types and converted to responses by the handler
registered in checkin.main. They take their messages from here as well.
"""

from typing import Iterable, NoReturn, Optional

from fastapi import HTTPException, status


def _format_ids(ids: Iterable[int]) -> str:
    # Sort for consistent, readable output (avoids curly brace set notation)
    return ", ".join(str(i) for i in sorted(ids))


class ErrorMessages:
    """Centralized error message constants and templates.

    Naming Convention:
    - Constants: SCREAMING_SNAKE_CASE for static messages
    - Methods: snake_case for templates that accept parameters
    """

    # ==========================================================================
    # Authentication Errors (401)
    # ==========================================================================
    INVALID_TOKEN = "Invalid authentication token."
    INVALID_TOKEN_TYPE = "Invalid token type."
    INVALID_TOKEN_PAYLOAD = "Invalid token payload."
    USER_NOT_FOUND_AUTH = "User not found."
    ADMIN_TOKEN_INVALID = "Invalid admin token."

    # ==========================================================================
    # Not Found Errors (404)
    # ==========================================================================
    NO_ACTIVE_QUIZ = "No check-in is available right now."
    QUIZ_NOT_FOUND = "Quiz not found."
    QUESTION_NOT_FOUND = "Question not found."
    OPTION_NOT_FOUND = "Option not found."
    USER_NOT_FOUND = "User not found."

    # ==========================================================================
    # Conflict Errors (409)
    # ==========================================================================
    # Used for both the app-level lookup and the storage-level unique
    # constraint; the caller sees the same outcome either way.
    ALREADY_CHECKED_IN_TODAY = (
        "You have already checked in today. Please come back tomorrow!"
    )
    CATALOG_CONFLICT = "This change conflicts with an existing question or option."

    # ==========================================================================
    # Validation Errors (422)
    # ==========================================================================
    INCOMPLETE_SUBMISSION = "Please answer every question before submitting."
    INVALID_SUBMISSION = "Some answers are not valid for their question."
    INVALID_QUIZ_STRUCTURE = "Quiz structure is not valid for activation."

    # ==========================================================================
    # Configuration Errors (500)
    # ==========================================================================
    ADMIN_TOKEN_NOT_CONFIGURED = "Admin token not configured on server."

    # ==========================================================================
    # Template Methods for Dynamic Messages
    # ==========================================================================
    @staticmethod
    def no_active_quiz(purpose: str) -> str:
        """Message when no quiz is active for a purpose slot."""
        return f"No active quiz for {purpose.replace('_', ' ')}."

    @staticmethod
    def quiz_not_found(quiz_id: int) -> str:
        """Message when a specific quiz is not found."""
        return f"Quiz {quiz_id} not found."

    @staticmethod
    def question_not_found(question_id: int) -> str:
        """Message when a specific question is not found."""
        return f"Question {question_id} not found."

    @staticmethod
    def option_not_found(option_id: int) -> str:
        """Message when a specific option is not found."""
        return f"Option {option_id} not found."

    @staticmethod
    def missing_answer(question_id: int) -> str:
        """Message when a quiz question has no submitted answer."""
        return f"Question {question_id} has not been answered."

    @staticmethod
    def duplicate_answer(question_id: int) -> str:
        """Message when the same question is answered more than once."""
        return f"Question {question_id} was answered more than once."

    @staticmethod
    def invalid_question_ids(question_ids: set) -> str:
        """Message when submitted question IDs don't belong to the quiz."""
        return (
            f"Invalid question IDs: {_format_ids(question_ids)}. "
            "These questions do not belong to this quiz."
        )

    @staticmethod
    def invalid_answer_value(question_id: int, reason: str) -> str:
        """Message when an answer is outside its question's declared domain."""
        return f"Answer for question {question_id} is not valid: {reason}"

    @staticmethod
    def quiz_is_live(quiz_id: int, change: str) -> str:
        """Message when a structural edit targets a quiz that already has responses."""
        return (
            f"Quiz {quiz_id} already has check-ins; {change} would change the "
            "meaning of recorded answers. Create a new quiz version instead."
        )

    @staticmethod
    def question_order_taken(quiz_id: int, order: int) -> str:
        """Message when a question position is already used in the quiz."""
        return f"Quiz {quiz_id} already has a question at position {order}."

    @staticmethod
    def question_role_taken(quiz_id: int, role: str) -> str:
        """Message when a semantic role is already bound in the quiz."""
        return f"Quiz {quiz_id} already has a question with role '{role}'."

    @staticmethod
    def option_token_taken(question_id: int, token: str) -> str:
        """Message when an option token is already used by the question."""
        return f"Question {question_id} already has an option with token '{token}'."

    @staticmethod
    def orders_not_dense(orders: list) -> str:
        """Structure problem: question positions are not 1..n."""
        return (
            f"Question positions must be 1..{len(orders)} without gaps; "
            f"got {', '.join(str(o) for o in sorted(orders))}."
        )

    @staticmethod
    def choice_without_options(question_id: int) -> str:
        """Structure problem: multiple-choice question with no options."""
        return f"Multiple-choice question {question_id} has no options."

    @staticmethod
    def options_on_non_choice(question_id: int) -> str:
        """Structure problem: options attached to a yes/no or scale question."""
        return f"Question {question_id} is not multiple choice but has options."

    @staticmethod
    def missing_roles(roles: list) -> str:
        """Structure problem: daily check-in lacks role-tagged questions."""
        return f"Daily check-in is missing questions for roles: {', '.join(roles)}."

    @staticmethod
    def role_type_mismatch(question_id: int, role: str, question_type: str) -> str:
        """Structure problem: a role question the decision rules cannot read."""
        return (
            f"Question {question_id} has role '{role}' but type '{question_type}'; "
            "its answers would never match the check-in rules."
        )

    @staticmethod
    def database_operation_failed(operation: str) -> str:
        """Generic message for database operation failures."""
        return f"Failed to {operation}. Please try again later."


# ==============================================================================
# HTTPException Builder Functions
# ==============================================================================


def raise_unauthorized(
    detail: str,
    include_www_authenticate: bool = True,
) -> NoReturn:
    """Raise a 401 Unauthorized exception.

    Use for authentication failures (invalid/missing credentials).

    Args:
        detail: User-facing error message
        include_www_authenticate: Whether to include WWW-Authenticate header

    Raises:
        HTTPException: 401 Unauthorized
    """
    headers = {"WWW-Authenticate": "Bearer"} if include_www_authenticate else None
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=headers,
    )


def raise_not_found(detail: str) -> NoReturn:
    """Raise a 404 Not Found exception.

    Use when a requested resource doesn't exist.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 404 Not Found
    """
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def raise_server_error(
    detail: str,
    error_id: Optional[str] = None,
) -> NoReturn:
    """Raise a 500 Internal Server Error exception.

    Use for unexpected server errors. Always use user-friendly messages;
    log technical details separately.

    Args:
        detail: User-facing error message (should be generic and friendly)
        error_id: Optional error tracking ID to include in response

    Raises:
        HTTPException: 500 Internal Server Error
    """
    if error_id:
        detail = f"{detail} (Error ID: {error_id})"

    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


def raise_not_configured(detail: str) -> NoReturn:
    """Raise a 500 error for missing server configuration.

    Use when required server configuration (e.g., API keys) is missing.

    Args:
        detail: Error message describing what's not configured

    Raises:
        HTTPException: 500 Internal Server Error
    """
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )
