"""
Database models for the daily check-in service.

Quiz owns Questions owns Options; QuizResponse owns ResponseAnswers. Users
are owned by the external account service and only referenced here.
"""
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from .base import Base


class UserRole(str, enum.Enum):
    """Role enumeration for users referenced by check-ins."""

    PATIENT = "patient"
    ONCOLOGIST = "oncologist"


class QuizPurpose(str, enum.Enum):
    """Purpose slot a quiz fills. At most one quiz per purpose is active."""

    DAILY_CHECKIN = "daily_checkin"
    INITIAL_ASSESSMENT = "initial_assessment"


class QuestionType(str, enum.Enum):
    """Answer domain of a question."""

    YES_NO = "yes_no"
    SCALE_0_10 = "scale_0_10"
    MULTIPLE_CHOICE = "multiple_choice"


class QuestionRole(str, enum.Enum):
    """Semantic slot a daily check-in question fills for the decision engine."""

    ENERGY = "energy"
    FATIGUE = "fatigue"
    PAIN = "pain"
    SYMPTOMS = "symptoms"
    TREATMENT_DAY = "treatment_day"
    SLEEP = "sleep"
    EMOTIONAL_STATE = "emotional_state"
    SAFETY = "safety"
    DISCOMFORT = "discomfort"
    CONSULTATION_INTEREST = "consultation_interest"


class Classification(str, enum.Enum):
    """Graded exercise recommendation produced by the decision engine."""

    RECOVER = "recover"
    ADAPT = "adapt"
    TRAIN = "train"


class User(Base):
    """User reference. Accounts are created by the external account service."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(200))
    role = Column(Enum(UserRole), default=UserRole.PATIENT, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    responses = relationship("QuizResponse", back_populates="user")


class Quiz(Base):
    """Questionnaire definition for one purpose slot."""

    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    purpose = Column(Enum(QuizPurpose), nullable=False, index=True)
    # Single active quiz per purpose is enforced by the catalog, not here
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    questions = relationship(
        "Question",
        back_populates="quiz",
        order_by="Question.order",
        cascade="all, delete-orphan",
    )
    scoring_configs = relationship(
        "QuizScoringConfig", back_populates="quiz", cascade="all, delete-orphan"
    )
    responses = relationship("QuizResponse", back_populates="quiz")

    __table_args__ = (Index("ix_quizzes_purpose_active", "purpose", "is_active"),)


class Question(Base):
    """Question belonging to exactly one quiz."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(
        Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False
    )
    text = Column(Text, nullable=False)
    question_type = Column(Enum(QuestionType), nullable=False)
    order = Column(Integer, nullable=False)  # 1-based, dense within the quiz
    role = Column(Enum(QuestionRole), nullable=True)  # NULL for profiling questions
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.order",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("quiz_id", "order", name="uq_questions_quiz_order"),
        UniqueConstraint("quiz_id", "role", name="uq_questions_quiz_role"),
        Index("ix_questions_quiz_id", "quiz_id"),
        CheckConstraint('"order" >= 1', name="ck_questions_order_positive"),
    )


class QuestionOption(Base):
    """Fixed answer option of a multiple-choice question."""

    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    # Stable value token matched by the decision engine. Labels may change,
    # token meaning may not.
    token = Column(String(100), nullable=False)
    label = Column(String(500), nullable=False)
    order = Column(Integer, nullable=False)

    question = relationship("Question", back_populates="options")

    __table_args__ = (
        UniqueConstraint("question_id", "token", name="uq_question_options_token"),
        Index("ix_question_options_question_id", "question_id"),
    )


class QuizScoringConfig(Base):
    """
    Per-quiz override of the outcome shown for a classification tier.

    Only the displayed score band, label and description can be overridden;
    whether the tier counts as a good day for exercise is fixed by the engine.
    """

    __tablename__ = "quiz_scoring_configs"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(
        Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False
    )
    classification = Column(Enum(Classification), nullable=False)
    total_score = Column(Integer, nullable=False)
    recommended_exercise_type = Column(String(255), nullable=False)
    exercise_description = Column(Text)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    quiz = relationship("Quiz", back_populates="scoring_configs")

    __table_args__ = (
        UniqueConstraint(
            "quiz_id", "classification", name="uq_quiz_scoring_configs_tier"
        ),
    )


class QuizResponse(Base):
    """One submission per (user, quiz, calendar day). Immutable once committed."""

    __tablename__ = "quiz_responses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False)
    response_date = Column(Date, nullable=False)  # Calendar day in CHECKIN_TIMEZONE
    total_score = Column(Integer, nullable=False)
    # NULL for initial assessments, which carry no safety classification
    is_good_day_for_exercise = Column(Boolean, nullable=True)
    recommended_exercise_type = Column(String(255), nullable=False)
    classification = Column(Enum(Classification), nullable=True)
    decision_triggers = Column(JSON, nullable=True)  # Matched rule names, for audit
    # Question/option set as it was at submission time
    # Format: {"quiz_id": 1, "purpose": "daily_checkin", "questions": [...]}
    quiz_snapshot = Column(JSON, nullable=True)
    general_observations = Column(Text)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    user = relationship("User", back_populates="responses")
    quiz = relationship("Quiz", back_populates="responses")
    answers = relationship(
        "ResponseAnswer",
        back_populates="response",
        order_by="ResponseAnswer.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # Correctness mechanism for the one-per-day rule; the app-level
        # lookup in submission.py only gives faster feedback.
        UniqueConstraint(
            "user_id", "quiz_id", "response_date", name="uq_quiz_responses_user_day"
        ),
        Index("ix_quiz_responses_user_date", "user_id", "response_date"),
    )


class ResponseAnswer(Base):
    """Raw answer value submitted for one question of a response."""

    __tablename__ = "response_answers"

    id = Column(Integer, primary_key=True, index=True)
    response_id = Column(
        Integer,
        ForeignKey("quiz_responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    # Option token, "YES"/"NO", or a stringified 0-10 integer
    answer_value = Column(String(500), nullable=False)

    response = relationship("QuizResponse", back_populates="answers")

    __table_args__ = (
        UniqueConstraint(
            "response_id", "question_id", name="uq_response_answers_question"
        ),
    )
