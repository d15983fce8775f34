"""
Shared dependencies for admin endpoints.
"""
import secrets

from fastapi import Header

from checkin.core.config import settings
from checkin.core.error_responses import (
    ErrorMessages,
    raise_not_configured,
    raise_unauthorized,
)


def verify_admin_token(x_admin_token: str = Header(...)) -> bool:
    """
    Verify admin token from request header.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        x_admin_token: Admin token from X-Admin-Token header

    Returns:
        bool: True if token is valid

    Raises:
        HTTPException: 500 if ADMIN_TOKEN is not configured, 401 if invalid
    """
    if not settings.ADMIN_TOKEN:
        raise_not_configured(ErrorMessages.ADMIN_TOKEN_NOT_CONFIGURED)

    # compare_digest only accepts ASCII str, so compare the UTF-8 bytes
    if not secrets.compare_digest(
        x_admin_token.encode("utf-8"), settings.ADMIN_TOKEN.encode("utf-8")
    ):
        raise_unauthorized(
            ErrorMessages.ADMIN_TOKEN_INVALID, include_www_authenticate=False
        )

    return True
