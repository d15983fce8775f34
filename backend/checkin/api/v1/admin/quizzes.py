"""
Admin endpoints for authoring the quiz catalog.

Structural edits (position, role, type, option token, deletions) are refused
with 409 once a quiz has check-ins; create a new quiz and activate it instead.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from checkin.core import catalog
from checkin.core.db_error_handling import handle_db_error
from checkin.models import get_db
from checkin.models.models import QuizPurpose
from checkin.schemas.quizzes import (
    AdminQuizDetail,
    OptionCreate,
    OptionResponse,
    OptionUpdate,
    QuestionCreate,
    QuestionResponse,
    QuestionUpdate,
    QuizCreate,
    QuizUpdate,
    ScoringConfigResponse,
    ScoringConfigUpdate,
)

from ._dependencies import verify_admin_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/quizzes", response_model=List[AdminQuizDetail])
def list_quizzes(
    purpose: Optional[QuizPurpose] = Query(None, description="Filter by purpose"),
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """List every quiz, newest first."""
    return catalog.list_quizzes(db, purpose)


@router.post(
    "/quizzes",
    response_model=AdminQuizDetail,
    status_code=status.HTTP_201_CREATED,
)
def create_quiz(
    request: QuizCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """
    Create a quiz, optionally with questions, and optionally activate it.

    Activating deactivates the other quizzes of the same purpose.
    """
    with handle_db_error(db, "create quiz"):
        return catalog.create_quiz(
            db,
            name=request.name,
            purpose=request.purpose,
            description=request.description,
            is_active=request.is_active,
            questions=[question.model_dump() for question in request.questions],
        )


@router.get("/quizzes/{quiz_id}", response_model=AdminQuizDetail)
def read_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Get a quiz with questions, options and scoring overrides."""
    return catalog.get_quiz_with_questions(db, quiz_id)


@router.patch("/quizzes/{quiz_id}", response_model=AdminQuizDetail)
def update_quiz(
    quiz_id: int,
    request: QuizUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Rename, describe, activate or deactivate a quiz."""
    changes = request.model_dump(exclude_unset=True)
    with handle_db_error(db, "update quiz"):
        return catalog.update_quiz(db, quiz_id, **changes)


@router.put("/quizzes/{quiz_id}/scoring", response_model=ScoringConfigResponse)
def set_scoring_config(
    quiz_id: int,
    request: ScoringConfigUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """
    Override the score and label shown for one tier of a quiz.

    Whether the tier counts as a good day for exercise cannot be changed.
    """
    with handle_db_error(db, "update scoring configuration"):
        return catalog.set_scoring_config(
            db,
            quiz_id,
            classification=request.classification,
            total_score=request.total_score,
            recommended_exercise_type=request.recommended_exercise_type,
            exercise_description=request.exercise_description,
        )


@router.post(
    "/quizzes/{quiz_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_question(
    quiz_id: int,
    request: QuestionCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Add a question to a quiz."""
    with handle_db_error(db, "add question"):
        return catalog.add_question(
            db,
            quiz_id,
            text=request.text,
            question_type=request.question_type,
            order=request.order,
            role=request.role,
            options=[option.model_dump() for option in request.options],
        )


@router.patch("/questions/{question_id}", response_model=QuestionResponse)
def update_question(
    question_id: int,
    request: QuestionUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Edit a question. Only fields present in the body are changed."""
    changes = request.model_dump(exclude_unset=True)
    with handle_db_error(db, "update question"):
        return catalog.update_question(db, question_id, **changes)


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Delete a question that no check-in has answered yet."""
    with handle_db_error(db, "delete question"):
        catalog.delete_question(db, question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/questions/{question_id}/options",
    response_model=OptionResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_option(
    question_id: int,
    request: OptionCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Add an answer option to a multiple-choice question."""
    with handle_db_error(db, "add option"):
        return catalog.add_option(
            db,
            question_id,
            token=request.token,
            label=request.label,
            order=request.order,
        )


@router.patch("/options/{option_id}", response_model=OptionResponse)
def update_option(
    option_id: int,
    request: OptionUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Relabel, reorder or (before go-live) re-token an option."""
    changes = request.model_dump(exclude_unset=True)
    with handle_db_error(db, "update option"):
        return catalog.update_option(db, option_id, **changes)


@router.delete("/options/{option_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_option(
    option_id: int,
    db: Session = Depends(get_db),
    _: bool = Depends(verify_admin_token),
):
    """Delete an option from a quiz that has no check-ins yet."""
    with handle_db_error(db, "delete option"):
        catalog.delete_option(db, option_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
