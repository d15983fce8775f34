"""
Models package for the check-in backend.
"""
from .base import Base, engine, SessionLocal, get_db
from .models import (
    User,
    UserRole,
    Quiz,
    QuizPurpose,
    Question,
    QuestionType,
    QuestionRole,
    QuestionOption,
    QuizScoringConfig,
    QuizResponse,
    ResponseAnswer,
    Classification,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "User",
    "UserRole",
    "Quiz",
    "QuizPurpose",
    "Question",
    "QuestionType",
    "QuestionRole",
    "QuestionOption",
    "QuizScoringConfig",
    "QuizResponse",
    "ResponseAnswer",
    "Classification",
]
