"""
Submission orchestrator: one check-in per user, quiz and calendar day.

One-per-day enforcement strategy:
    1. Application-level check: look up today's response before doing any
       work and answer 409 immediately in the common case.
    2. Database-level constraint: the unique index on
       (user_id, quiz_id, response_date) is the actual guarantee. Two
       concurrent submissions can both pass step 1; the loser's commit
       raises IntegrityError, which is rolled back and reported as the same
       ConflictError.

The response and its answers are added in one unit of work and committed
together, so a response without its answers is never visible.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from checkin.core.answer_values import AnswerValue, AnswerValueError, parse_answer_value
from checkin.core.catalog import get_quiz_with_questions, load_tier_outcomes, snapshot_quiz
from checkin.core.config import settings
from checkin.core.datetime_utils import local_today
from checkin.core.decision_engine import DailyDecision, decide
from checkin.core.error_responses import ErrorMessages
from checkin.core.exceptions import ConflictError, NotFoundError, ValidationError
from checkin.core.observability import capture_message
from checkin.core.validators import StringSanitizer
from checkin.models.models import (
    QuestionType,
    QuizPurpose,
    QuizResponse,
    ResponseAnswer,
)

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """The persisted response plus decision details shown right after submit."""

    response: QuizResponse
    decision: DailyDecision


def get_today_response(
    db: Session,
    user_id: int,
    quiz_id: int,
    today: Optional[date] = None,
) -> Optional[QuizResponse]:
    """
    Return the user's response to a quiz for the current calendar day.

    Pure read: calling it repeatedly returns the same stored row.

    Args:
        db: Database session
        user_id: User ID
        quiz_id: Quiz ID
        today: Calendar day; defaults to today in CHECKIN_TIMEZONE

    Returns:
        The response, or None if the user has not submitted today
    """
    if today is None:
        today = local_today(settings.CHECKIN_TIMEZONE)
    return (
        db.query(QuizResponse)
        .options(selectinload(QuizResponse.answers))
        .filter(
            QuizResponse.user_id == user_id,
            QuizResponse.quiz_id == quiz_id,
            QuizResponse.response_date == today,
        )
        .first()
    )


def validate_answers(
    questions: Sequence, answers: Sequence[Tuple[int, str]]
) -> Dict[int, AnswerValue]:
    """
    Check an answer set against the quiz and parse every value.

    All problems are collected before raising so the client can highlight
    every offending question at once.

    Args:
        questions: The quiz's questions (need `id` and `question_type`)
        answers: (question_id, raw value) pairs as submitted

    Returns:
        Parsed answers keyed by question id

    Raises:
        ValidationError: If a question is unanswered, answered twice, not part
            of the quiz, or answered outside its type's domain
    """
    by_id = {question.id: question for question in questions}
    errors: List[Dict[str, object]] = []
    parsed: Dict[int, AnswerValue] = {}
    seen = set()

    unknown_ids = {question_id for question_id, _ in answers if question_id not in by_id}
    if unknown_ids:
        errors.append(
            {
                "field": "answers",
                "question_ids": sorted(unknown_ids),
                "message": ErrorMessages.invalid_question_ids(unknown_ids),
            }
        )

    for question_id, raw in answers:
        if question_id not in by_id:
            continue
        if question_id in seen:
            errors.append(
                {
                    "field": "answers",
                    "question_id": question_id,
                    "message": ErrorMessages.duplicate_answer(question_id),
                }
            )
            continue
        seen.add(question_id)
        try:
            parsed[question_id] = parse_answer_value(
                QuestionType(by_id[question_id].question_type), raw
            )
        except AnswerValueError as e:
            errors.append(
                {
                    "field": "answers",
                    "question_id": question_id,
                    "message": ErrorMessages.invalid_answer_value(question_id, str(e)),
                }
            )

    missing = sorted(set(by_id) - seen)
    for question_id in missing:
        errors.append(
            {
                "field": "answers",
                "question_id": question_id,
                "message": ErrorMessages.missing_answer(question_id),
            }
        )

    if errors:
        message = (
            ErrorMessages.INCOMPLETE_SUBMISSION
            if missing
            else ErrorMessages.INVALID_SUBMISSION
        )
        raise ValidationError(message, errors=errors)

    return parsed


def _report_drift(quiz_id: int, user_id: int, decision: DailyDecision) -> None:
    """Flag answers the engine could not interpret for operator review."""
    logger.warning(
        f"Unrecognized answers on quiz {quiz_id}: {', '.join(decision.unrecognized)}. "
        "The catalog may contain tokens the decision engine does not know.",
        extra={"quiz_id": quiz_id, "user_id": user_id},
    )
    capture_message(
        "Decision engine received unrecognized answer tokens",
        context={"quiz_id": quiz_id, "unrecognized": decision.unrecognized},
        tags={"component": "decision_engine"},
    )


def submit_quiz_response(
    db: Session,
    user_id: int,
    quiz_id: int,
    answers: Sequence[Tuple[int, str]],
    observations: Optional[str] = None,
    today: Optional[date] = None,
) -> SubmissionResult:
    """
    Validate, classify and persist one submission.

    Args:
        db: Database session
        user_id: Submitting user
        quiz_id: Quiz being answered; must be the active quiz of its purpose
        answers: (question_id, raw value) pairs
        observations: Optional free-text note
        today: Calendar day; defaults to today in CHECKIN_TIMEZONE

    Returns:
        The persisted response and the decision that produced it

    Raises:
        NotFoundError: If the quiz does not exist or is not active
        ConflictError: If the user already submitted this quiz today
        ValidationError: If the answer set is incomplete or invalid
    """
    quiz = get_quiz_with_questions(db, quiz_id)
    if not quiz.is_active:
        raise NotFoundError(ErrorMessages.no_active_quiz(QuizPurpose(quiz.purpose).value))

    if today is None:
        today = local_today(settings.CHECKIN_TIMEZONE)

    # Fast path for the common duplicate; the unique constraint is the guarantee
    if get_today_response(db, user_id, quiz_id, today) is not None:
        raise ConflictError(ErrorMessages.ALREADY_CHECKED_IN_TODAY)

    parsed = validate_answers(quiz.questions, answers)

    decision = decide(quiz.purpose, quiz.questions, parsed, load_tier_outcomes(quiz))
    if decision.unrecognized:
        _report_drift(quiz_id, user_id, decision)

    response = QuizResponse(
        user_id=user_id,
        quiz_id=quiz_id,
        response_date=today,
        total_score=decision.total_score,
        is_good_day_for_exercise=decision.is_good_day_for_exercise,
        recommended_exercise_type=decision.recommended_exercise_type,
        classification=decision.classification,
        decision_triggers=decision.triggers,
        quiz_snapshot=snapshot_quiz(quiz),
        general_observations=(
            StringSanitizer.sanitize_observation(observations)
            if observations
            else None
        ),
        answers=[
            ResponseAnswer(question_id=question_id, answer_value=value.raw)
            for question_id, value in parsed.items()
        ],
    )
    db.add(response)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            f"Race condition detected: user {user_id} submitted quiz {quiz_id} "
            f"twice for {today.isoformat()}",
            extra={"user_id": user_id, "quiz_id": quiz_id},
        )
        raise ConflictError(ErrorMessages.ALREADY_CHECKED_IN_TODAY)

    db.refresh(response)

    logger.info(
        f"Check-in recorded: user {user_id}, quiz {quiz_id}, "
        f"classification={decision.classification.value if decision.classification else 'none'}",
        extra={
            "user_id": user_id,
            "quiz_id": quiz_id,
            "classification": (
                decision.classification.value if decision.classification else None
            ),
        },
    )
    return SubmissionResult(response=response, decision=decision)
