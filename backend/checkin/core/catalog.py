"""
Quiz catalog: read access for the check-in flow and administrative authoring.

Invariants kept here rather than in the database:
- At most one quiz per purpose is active. Activating a quiz deactivates the
  others of the same purpose in the same transaction.
- An active quiz is structurally valid (dense 1..n positions, options only
  on multiple-choice questions, every role tagged for a daily check-in on a
  question type its rules can read).
- Once a quiz has responses it is live: wording may change, but positions,
  roles, question types, option tokens and deletions are refused.
  Responses also carry a snapshot of the quiz as answered.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from checkin.core.decision_engine import YES_NO_ROLES, TierOutcome
from checkin.core.error_responses import ErrorMessages
from checkin.core.exceptions import ConflictError, NotFoundError, ValidationError
from checkin.core.validators import StringSanitizer
from checkin.models.models import (
    Classification,
    Question,
    QuestionOption,
    QuestionRole,
    QuestionType,
    Quiz,
    QuizPurpose,
    QuizResponse,
    QuizScoringConfig,
)

logger = logging.getLogger(__name__)

# Marks an argument the caller did not pass, so None can mean "clear"
UNCHANGED: Any = object()


# =============================================================================
# Reads
# =============================================================================


def _quiz_query(db: Session):
    return db.query(Quiz).options(
        selectinload(Quiz.questions).selectinload(Question.options),
        selectinload(Quiz.scoring_configs),
    )


def get_active_quiz(db: Session, purpose: QuizPurpose) -> Quiz:
    """
    Return the quiz currently active for a purpose slot, with its questions.

    Raises:
        NotFoundError: If no quiz is active for the purpose. This is an
            expected state ("no check-in available"), not a failure.
    """
    quiz = (
        _quiz_query(db)
        .filter(Quiz.purpose == purpose, Quiz.is_active.is_(True))
        .order_by(Quiz.id.desc())
        .first()
    )
    if quiz is None:
        raise NotFoundError(ErrorMessages.no_active_quiz(QuizPurpose(purpose).value))
    return quiz


def get_quiz_with_questions(db: Session, quiz_id: int) -> Quiz:
    """
    Load a quiz with questions and options in ascending position.

    Raises:
        NotFoundError: If the quiz does not exist
    """
    quiz = _quiz_query(db).filter(Quiz.id == quiz_id).first()
    if quiz is None:
        raise NotFoundError(ErrorMessages.quiz_not_found(quiz_id))
    return quiz


def list_quizzes(db: Session, purpose: Optional[QuizPurpose] = None) -> List[Quiz]:
    """All quizzes, newest first, optionally restricted to one purpose."""
    query = _quiz_query(db)
    if purpose is not None:
        query = query.filter(Quiz.purpose == purpose)
    return query.order_by(Quiz.id.desc()).all()


def quiz_has_responses(db: Session, quiz_id: int) -> bool:
    """True once any response references the quiz."""
    return (
        db.query(QuizResponse.id).filter(QuizResponse.quiz_id == quiz_id).first()
        is not None
    )


def load_tier_outcomes(quiz: Quiz) -> Dict[Classification, TierOutcome]:
    """Per-quiz overrides of the displayed outcome, keyed by classification."""
    return {
        Classification(config.classification): TierOutcome(
            total_score=config.total_score,
            recommended_exercise_type=config.recommended_exercise_type,
            exercise_description=config.exercise_description,
        )
        for config in quiz.scoring_configs
    }


def snapshot_quiz(quiz: Quiz) -> Dict[str, Any]:
    """
    JSON-ready copy of the question/option set as answered.

    Stored on every response so history keeps its meaning even if the
    catalog is edited later.
    """
    return {
        "quiz_id": quiz.id,
        "name": quiz.name,
        "purpose": QuizPurpose(quiz.purpose).value,
        "questions": [
            {
                "id": question.id,
                "order": question.order,
                "text": question.text,
                "question_type": QuestionType(question.question_type).value,
                "role": QuestionRole(question.role).value if question.role else None,
                "options": [
                    {"id": option.id, "token": option.token, "label": option.label}
                    for option in sorted(question.options, key=lambda o: o.order)
                ],
            }
            for question in sorted(quiz.questions, key=lambda q: q.order)
        ],
    }


def validate_quiz_structure(quiz: Quiz) -> List[str]:
    """
    Check that a quiz can be served.

    Returns:
        User-facing problem descriptions; empty when the quiz is valid.
    """
    problems = []
    orders = [question.order for question in quiz.questions]
    if not orders or sorted(orders) != list(range(1, len(orders) + 1)):
        problems.append(ErrorMessages.orders_not_dense(orders))

    for question in sorted(quiz.questions, key=lambda q: q.order):
        is_choice = QuestionType(question.question_type) == QuestionType.MULTIPLE_CHOICE
        if is_choice and not question.options:
            problems.append(ErrorMessages.choice_without_options(question.id))
        if not is_choice and question.options:
            problems.append(ErrorMessages.options_on_non_choice(question.id))

    if QuizPurpose(quiz.purpose) == QuizPurpose.DAILY_CHECKIN:
        tagged = {QuestionRole(q.role) for q in quiz.questions if q.role is not None}
        missing = [role.value for role in QuestionRole if role not in tagged]
        if missing:
            problems.append(ErrorMessages.missing_roles(missing))
        for question in sorted(quiz.questions, key=lambda q: q.order):
            if question.role is None:
                continue
            role = QuestionRole(question.role)
            allowed = {QuestionType.MULTIPLE_CHOICE}
            if role in YES_NO_ROLES:
                allowed.add(QuestionType.YES_NO)
            question_type = QuestionType(question.question_type)
            if question_type not in allowed:
                problems.append(
                    ErrorMessages.role_type_mismatch(
                        question.id, role.value, question_type.value
                    )
                )

    return problems


# =============================================================================
# Administrative mutations
# =============================================================================


def _get_question(db: Session, question_id: int) -> Question:
    question = db.query(Question).filter(Question.id == question_id).first()
    if question is None:
        raise NotFoundError(ErrorMessages.question_not_found(question_id))
    return question


def _get_option(db: Session, option_id: int) -> QuestionOption:
    option = db.query(QuestionOption).filter(QuestionOption.id == option_id).first()
    if option is None:
        raise NotFoundError(ErrorMessages.option_not_found(option_id))
    return option


def _ensure_not_live(db: Session, quiz_id: int, change: str) -> None:
    if quiz_has_responses(db, quiz_id):
        logger.warning(f"Refused structural edit of live quiz {quiz_id}: {change}")
        raise ConflictError(ErrorMessages.quiz_is_live(quiz_id, change))


def _ensure_valid_structure(db: Session, quiz: Quiz) -> None:
    problems = validate_quiz_structure(quiz)
    if problems:
        db.rollback()
        raise ValidationError(
            ErrorMessages.INVALID_QUIZ_STRUCTURE,
            errors=[{"field": "quiz", "message": problem} for problem in problems],
        )


def _deactivate_others(db: Session, quiz: Quiz) -> None:
    deactivated = (
        db.query(Quiz)
        .filter(
            Quiz.purpose == quiz.purpose,
            Quiz.id != quiz.id,
            Quiz.is_active.is_(True),
        )
        .update({Quiz.is_active: False}, synchronize_session="fetch")
    )
    if deactivated:
        logger.info(
            f"Activated quiz {quiz.id}; deactivated {deactivated} other "
            f"{QuizPurpose(quiz.purpose).value} quiz(zes)"
        )


def _flush(db: Session) -> None:
    """Flush pending catalog changes; storage conflicts become 409."""
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Catalog change hit a constraint: {e.orig}")
        raise ConflictError(ErrorMessages.CATALOG_CONFLICT) from e


def _commit(db: Session, quiz: Quiz) -> None:
    """Validate an active quiz, then commit."""
    _flush(db)
    if quiz.is_active:
        _ensure_valid_structure(db, quiz)
    db.commit()


def _check_question_slot(
    quiz: Quiz,
    order: int,
    role: Optional[QuestionRole],
    exclude_id: Optional[int] = None,
) -> None:
    for other in quiz.questions:
        if other.id is not None and other.id == exclude_id:
            continue
        if other.order == order:
            raise ConflictError(ErrorMessages.question_order_taken(quiz.id, order))
        if role is not None and other.role is not None and QuestionRole(other.role) == role:
            raise ConflictError(ErrorMessages.question_role_taken(quiz.id, role.value))


def _build_options(options: Optional[List[Dict[str, Any]]]) -> List[QuestionOption]:
    built = []
    for position, option in enumerate(options or [], start=1):
        built.append(
            QuestionOption(
                token=StringSanitizer.normalize_token(option["token"]),
                label=option["label"],
                order=option.get("order") or position,
            )
        )
    return built


def create_quiz(
    db: Session,
    name: str,
    purpose: QuizPurpose,
    description: Optional[str] = None,
    is_active: bool = False,
    questions: Optional[List[Dict[str, Any]]] = None,
) -> Quiz:
    """
    Create a quiz, optionally with its questions and options in one go.

    Args:
        db: Database session
        name: Display name
        purpose: Purpose slot
        description: Optional description
        is_active: Activate immediately (requires a valid structure)
        questions: Dicts with text, question_type, order, role and options
            (each option a dict with token, label and optional order)

    Returns:
        The persisted quiz

    Raises:
        ValidationError: If activating and the structure is invalid
        ConflictError: If two questions share a position or role
    """
    quiz = Quiz(name=name, description=description, purpose=purpose, is_active=is_active)
    for data in questions or []:
        role = QuestionRole(data["role"]) if data.get("role") else None
        _check_question_slot(quiz, data["order"], role)
        quiz.questions.append(
            Question(
                text=data["text"],
                question_type=QuestionType(data["question_type"]),
                order=data["order"],
                role=role,
                options=_build_options(data.get("options")),
            )
        )
    db.add(quiz)
    _flush(db)
    if is_active:
        _deactivate_others(db, quiz)
    _commit(db, quiz)
    db.refresh(quiz)

    logger.info(
        f"Created quiz {quiz.id} ({QuizPurpose(purpose).value}) with "
        f"{len(quiz.questions)} questions, active={quiz.is_active}"
    )
    return quiz


def update_quiz(
    db: Session,
    quiz_id: int,
    name: Optional[str] = None,
    description: Any = UNCHANGED,
    is_active: Optional[bool] = None,
) -> Quiz:
    """
    Rename, describe, activate or deactivate a quiz.

    Raises:
        NotFoundError: If the quiz does not exist
        ValidationError: If activating a structurally invalid quiz
    """
    quiz = get_quiz_with_questions(db, quiz_id)
    if name is not None:
        quiz.name = name
    if description is not UNCHANGED:
        quiz.description = description
    if is_active is not None:
        quiz.is_active = is_active
        if is_active:
            _deactivate_others(db, quiz)
    _commit(db, quiz)
    db.refresh(quiz)
    return quiz


def add_question(
    db: Session,
    quiz_id: int,
    text: str,
    question_type: QuestionType,
    order: int,
    role: Optional[QuestionRole] = None,
    options: Optional[List[Dict[str, Any]]] = None,
) -> Question:
    """
    Append a question to a quiz. Allowed on live quizzes.

    Raises:
        NotFoundError: If the quiz does not exist
        ConflictError: If the position or role is already used
        ValidationError: If the quiz is active and would become invalid
    """
    quiz = get_quiz_with_questions(db, quiz_id)
    role = QuestionRole(role) if role else None
    _check_question_slot(quiz, order, role)
    question = Question(
        text=text,
        question_type=QuestionType(question_type),
        order=order,
        role=role,
        options=_build_options(options),
    )
    quiz.questions.append(question)
    _commit(db, quiz)
    db.refresh(question)
    return question


def update_question(
    db: Session,
    question_id: int,
    text: Optional[str] = None,
    question_type: Optional[QuestionType] = None,
    order: Optional[int] = None,
    role: Any = UNCHANGED,
) -> Question:
    """
    Edit a question. Wording edits are always allowed; position, role and
    type changes are refused once the quiz is live.

    Raises:
        NotFoundError: If the question does not exist
        ConflictError: If the quiz is live or the new slot is taken
        ValidationError: If the quiz is active and would become invalid
    """
    question = _get_question(db, question_id)
    quiz = get_quiz_with_questions(db, question.quiz_id)

    new_role = question.role
    if role is not UNCHANGED:
        new_role = QuestionRole(role) if role else None

    structural = []
    if order is not None and order != question.order:
        structural.append("changing a question position")
    if role is not UNCHANGED and new_role != question.role:
        structural.append("changing a question role")
    if question_type is not None and QuestionType(question_type) != question.question_type:
        structural.append("changing a question type")
    if structural:
        _ensure_not_live(db, quiz.id, " and ".join(structural))
        _check_question_slot(
            quiz,
            order if order is not None else question.order,
            QuestionRole(new_role) if new_role else None,
            exclude_id=question.id,
        )

    if text is not None:
        question.text = text
    if question_type is not None:
        question.question_type = QuestionType(question_type)
    if order is not None:
        question.order = order
    question.role = new_role

    _commit(db, quiz)
    db.refresh(question)
    return question


def delete_question(db: Session, question_id: int) -> None:
    """
    Delete a question and its options. Refused once the quiz is live.

    Raises:
        NotFoundError: If the question does not exist
        ConflictError: If the quiz is live
        ValidationError: If the quiz is active and would become invalid
    """
    question = _get_question(db, question_id)
    quiz = get_quiz_with_questions(db, question.quiz_id)
    _ensure_not_live(db, quiz.id, "deleting a question")
    quiz.questions.remove(question)
    _commit(db, quiz)
    logger.info(f"Deleted question {question_id} from quiz {quiz.id}")


def add_option(
    db: Session,
    question_id: int,
    token: str,
    label: str,
    order: Optional[int] = None,
) -> QuestionOption:
    """
    Add an answer option to a multiple-choice question. Allowed on live
    quizzes: a new token the engine does not know is reported as drift.

    Raises:
        NotFoundError: If the question does not exist
        ConflictError: If the token is already used by the question
    """
    question = _get_question(db, question_id)
    token = StringSanitizer.normalize_token(token)
    if any(option.token == token for option in question.options):
        raise ConflictError(ErrorMessages.option_token_taken(question_id, token))

    option = QuestionOption(
        token=token,
        label=label,
        order=order or max((o.order for o in question.options), default=0) + 1,
    )
    question.options.append(option)
    _commit(db, question.quiz)
    db.refresh(option)
    return option


def update_option(
    db: Session,
    option_id: int,
    label: Optional[str] = None,
    token: Optional[str] = None,
    order: Optional[int] = None,
) -> QuestionOption:
    """
    Relabel or reorder an option. Changing the token is refused once the
    quiz is live, since the token is what the engine matches.

    Raises:
        NotFoundError: If the option does not exist
        ConflictError: If the quiz is live or the token is taken
    """
    option = _get_option(db, option_id)
    question = option.question

    if token is not None:
        token = StringSanitizer.normalize_token(token)
        if token != option.token:
            _ensure_not_live(db, question.quiz_id, "changing an option token")
            if any(o.token == token for o in question.options if o.id != option.id):
                raise ConflictError(
                    ErrorMessages.option_token_taken(question.id, token)
                )
            option.token = token

    if label is not None:
        option.label = label
    if order is not None:
        option.order = order

    _commit(db, question.quiz)
    db.refresh(option)
    return option


def delete_option(db: Session, option_id: int) -> None:
    """
    Delete an option. Refused once the quiz is live.

    Raises:
        NotFoundError: If the option does not exist
        ConflictError: If the quiz is live
        ValidationError: If the quiz is active and would become invalid
    """
    option = _get_option(db, option_id)
    question = option.question
    quiz = question.quiz
    _ensure_not_live(db, quiz.id, "deleting an option")
    question.options.remove(option)
    _commit(db, quiz)
    logger.info(f"Deleted option {option_id} from question {question.id}")


def set_scoring_config(
    db: Session,
    quiz_id: int,
    classification: Classification,
    total_score: int,
    recommended_exercise_type: str,
    exercise_description: Optional[str] = None,
) -> QuizScoringConfig:
    """
    Create or replace the displayed outcome of one tier for a quiz.

    Only display values are configurable; whether the tier is a good day
    for exercise is fixed by the engine.

    Raises:
        NotFoundError: If the quiz does not exist
    """
    quiz = get_quiz_with_questions(db, quiz_id)
    classification = Classification(classification)
    config = next(
        (c for c in quiz.scoring_configs if c.classification == classification),
        None,
    )
    if config is None:
        config = QuizScoringConfig(classification=classification)
        quiz.scoring_configs.append(config)

    config.total_score = total_score
    config.recommended_exercise_type = recommended_exercise_type
    config.exercise_description = exercise_description

    _commit(db, quiz)
    db.refresh(config)
    logger.info(
        f"Scoring for quiz {quiz_id} tier {classification.value} set to "
        f"{total_score} / {recommended_exercise_type!r}"
    )
    return config
