"""
Pydantic schemas for check-in submission and history endpoints.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from checkin.core.validators import TextValidator
from checkin.models.models import Classification


class AnswerItem(BaseModel):
    """Schema for one submitted answer."""

    question_id: int = Field(..., description="Question being answered")
    value: str = Field(
        ...,
        max_length=500,
        description='Option token, "YES"/"NO", or an integer 0-10',
    )

    @field_validator("question_id")
    @classmethod
    def validate_question_id(cls, v: int) -> int:
        return TextValidator.validate_positive_id(v, "Question ID")


class CheckInSubmission(BaseModel):
    """Schema for submitting a quiz response."""

    quiz_id: int = Field(..., description="Quiz being answered")
    answers: List[AnswerItem] = Field(..., description="One answer per question")
    observations: Optional[str] = Field(
        None, max_length=5000, description="Optional free-text note"
    )

    @field_validator("quiz_id")
    @classmethod
    def validate_quiz_id(cls, v: int) -> int:
        return TextValidator.validate_positive_id(v, "Quiz ID")


class AnswerRecord(BaseModel):
    """Schema for a stored answer."""

    question_id: int
    answer_value: str

    class Config:
        """Pydantic config."""

        from_attributes = True


class CheckInResponse(BaseModel):
    """Schema for a stored check-in."""

    id: int = Field(..., description="Response ID")
    user_id: int = Field(..., description="User ID")
    quiz_id: int = Field(..., description="Quiz ID")
    response_date: date = Field(..., description="Calendar day of the check-in")
    total_score: int = Field(..., description="Display score of the tier")
    is_good_day_for_exercise: Optional[bool] = Field(
        None, description="Null for initial assessments"
    )
    recommended_exercise_type: str = Field(..., description="Recommendation label")
    classification: Optional[Classification] = Field(
        None, description="recover, adapt or train; null for initial assessments"
    )
    decision_triggers: Optional[List[str]] = Field(
        None, description="Rules that produced the classification"
    )
    general_observations: Optional[str] = None
    created_at: datetime
    answers: List[AnswerRecord] = Field(default_factory=list)

    class Config:
        """Pydantic config."""

        from_attributes = True


class SubmitCheckInResponse(CheckInResponse):
    """Schema for the submission result shown right after submitting."""

    exercise_description: Optional[str] = Field(
        None, description="Longer guidance for the recommended exercise"
    )
    consultation_requested: bool = Field(
        False, description="Patient asked to talk to a professional"
    )


class CheckInHistoryResponse(BaseModel):
    """Schema for a page of check-in history."""

    results: List[CheckInResponse] = Field(..., description="Newest first")
    limit: int = Field(..., ge=1, description="Applied page size")


class HistorySummaryResponse(BaseModel):
    """Schema for history aggregates."""

    total_checkins: int = Field(..., ge=0)
    good_days: int = Field(..., ge=0)
    current_streak: int = Field(..., ge=0, description="Consecutive days up to today")
    longest_streak: int = Field(..., ge=0)
    last_checkin_date: Optional[date] = None

    class Config:
        """Pydantic config."""

        from_attributes = True
