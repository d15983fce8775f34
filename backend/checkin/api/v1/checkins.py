"""
Daily check-in submission and history endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from checkin.core.auth import get_current_user
from checkin.core.history import clamp_limit, get_history, summarize_history
from checkin.core.submission import get_today_response, submit_quiz_response
from checkin.models import get_db, User
from checkin.schemas.checkins import (
    CheckInHistoryResponse,
    CheckInResponse,
    CheckInSubmission,
    HistorySummaryResponse,
    SubmitCheckInResponse,
)

router = APIRouter()


@router.post(
    "",
    response_model=SubmitCheckInResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_checkin(
    submission: CheckInSubmission,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Submit today's answers for a quiz and get the exercise recommendation.

    Errors:
    - 404 if the quiz does not exist or is not active
    - 409 if the user already checked in to this quiz today
    - 422 naming each missing or invalid answer
    """
    result = submit_quiz_response(
        db,
        user_id=current_user.id,
        quiz_id=submission.quiz_id,
        answers=[(answer.question_id, answer.value) for answer in submission.answers],
        observations=submission.observations,
    )
    stored = CheckInResponse.model_validate(result.response)
    return SubmitCheckInResponse(
        **stored.model_dump(),
        exercise_description=result.decision.exercise_description,
        consultation_requested=result.decision.consultation_requested,
    )


@router.get("/today", response_model=Optional[CheckInResponse])
def read_today_checkin(
    quiz_id: int = Query(..., description="Quiz to look up"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get the user's check-in for today, or null if not submitted yet.
    """
    return get_today_response(db, current_user.id, quiz_id)


@router.get("/history", response_model=CheckInHistoryResponse)
def read_checkin_history(
    limit: Optional[int] = Query(
        None, ge=1, description="Maximum results (capped by the server)"
    ),
    quiz_id: Optional[int] = Query(None, description="Restrict to one quiz"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get the user's check-ins, newest first.
    """
    applied = clamp_limit(limit)
    return CheckInHistoryResponse(
        results=get_history(db, current_user.id, applied, quiz_id=quiz_id),
        limit=applied,
    )


@router.get("/summary", response_model=HistorySummaryResponse)
def read_checkin_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get totals, good days and streaks over the user's daily check-ins.
    """
    return summarize_history(db, current_user.id)
