"""
Admin endpoints for clinicians reviewing a patient's check-ins.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from checkin.core.error_responses import ErrorMessages
from checkin.core.exceptions import NotFoundError
from checkin.core.history import clamp_limit, get_history, summarize_history
from checkin.models import get_db, User
from checkin.schemas.checkins import CheckInHistoryResponse, HistorySummaryResponse

from ._dependencies import verify_admin_token

router = APIRouter()


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError(ErrorMessages.USER_NOT_FOUND)
    return user


@router.get("/users/{user_id}/checkins", response_model=CheckInHistoryResponse)
def read_user_checkins(
    user_id: int,
    limit: Optional[int] = Query(None, ge=1),
    quiz_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Get a patient's check-ins, newest first."""
    _get_user_or_404(db, user_id)
    applied = clamp_limit(limit)
    return CheckInHistoryResponse(
        results=get_history(db, user_id, applied, quiz_id=quiz_id),
        limit=applied,
    )


@router.get("/users/{user_id}/summary", response_model=HistorySummaryResponse)
def read_user_summary(
    user_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Get a patient's totals, good days and streaks."""
    _get_user_or_404(db, user_id)
    return summarize_history(db, user_id)
