"""
Pydantic schemas for request/response validation.
"""
from .quizzes import (
    OptionResponse,
    QuestionResponse,
    QuizDetail,
    AdminQuizDetail,
    ScoringConfigResponse,
    OptionCreate,
    OptionUpdate,
    QuestionCreate,
    QuestionUpdate,
    QuizCreate,
    QuizUpdate,
    ScoringConfigUpdate,
)
from .checkins import (
    AnswerItem,
    CheckInSubmission,
    CheckInResponse,
    SubmitCheckInResponse,
    CheckInHistoryResponse,
    HistorySummaryResponse,
)

__all__ = [
    "OptionResponse",
    "QuestionResponse",
    "QuizDetail",
    "AdminQuizDetail",
    "ScoringConfigResponse",
    "OptionCreate",
    "OptionUpdate",
    "QuestionCreate",
    "QuestionUpdate",
    "QuizCreate",
    "QuizUpdate",
    "ScoringConfigUpdate",
    "AnswerItem",
    "CheckInSubmission",
    "CheckInResponse",
    "SubmitCheckInResponse",
    "CheckInHistoryResponse",
    "HistorySummaryResponse",
]
