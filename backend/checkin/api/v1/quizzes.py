"""
Quiz retrieval endpoints for the patient app.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from checkin.core.auth import get_current_user
from checkin.core.catalog import get_active_quiz, get_quiz_with_questions
from checkin.models import get_db, User
from checkin.models.models import QuizPurpose
from checkin.schemas.quizzes import QuizDetail

router = APIRouter()


@router.get("/active", response_model=QuizDetail)
def read_active_quiz(
    purpose: QuizPurpose = Query(
        QuizPurpose.DAILY_CHECKIN, description="Purpose slot to look up"
    ),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get the quiz currently served for a purpose, questions in order.

    Returns 404 when no quiz is active for the purpose; clients show
    "no check-in available today".
    """
    return get_active_quiz(db, purpose)


@router.get("/{quiz_id}", response_model=QuizDetail)
def read_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get a quiz by ID with its questions and options.
    """
    return get_quiz_with_questions(db, quiz_id)
