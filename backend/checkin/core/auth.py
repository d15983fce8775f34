"""
FastAPI authentication dependencies.
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from checkin.models import get_db, User
from .security import decode_token, verify_token_type
from .error_responses import ErrorMessages, raise_unauthorized

# HTTP Bearer token scheme
security = HTTPBearer()


def _decode_and_validate_token(token: str) -> int:
    """
    Decode and validate an access token, returning the user_id.

    Raises:
        HTTPException: 401 if token is invalid, wrong type, or missing user_id
    """
    payload = decode_token(token)
    if payload is None:
        raise_unauthorized(ErrorMessages.INVALID_TOKEN)

    if not verify_token_type(payload, "access"):
        raise_unauthorized(ErrorMessages.INVALID_TOKEN_TYPE)

    user_id = payload.get("user_id")
    if user_id is None:
        raise_unauthorized(ErrorMessages.INVALID_TOKEN_PAYLOAD)

    return user_id


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials from request header
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: 401 if token is invalid or user not found
    """
    user_id = _decode_and_validate_token(credentials.credentials)
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise_unauthorized(ErrorMessages.USER_NOT_FOUND_AUTH)
    return user
