"""
Pydantic schemas for the quiz catalog (patient reads and admin authoring).
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Self

from checkin.core.validators import TextValidator
from checkin.models.models import (
    Classification,
    QuestionRole,
    QuestionType,
    QuizPurpose,
)


# =============================================================================
# Read schemas
# =============================================================================


class OptionResponse(BaseModel):
    """Schema for a multiple-choice answer option."""

    id: int = Field(..., description="Option ID")
    token: str = Field(..., description="Stable value token submitted as the answer")
    label: str = Field(..., description="Text shown to the patient")
    order: int = Field(..., description="Display position within the question")

    class Config:
        """Pydantic config."""

        from_attributes = True


class QuestionResponse(BaseModel):
    """Schema for a quiz question with its options."""

    id: int = Field(..., description="Question ID")
    order: int = Field(..., description="1-based position within the quiz")
    text: str = Field(..., description="Question text")
    question_type: QuestionType = Field(..., description="Answer domain")
    role: Optional[QuestionRole] = Field(
        None, description="Semantic role read by the decision engine"
    )
    options: List[OptionResponse] = Field(
        default_factory=list, description="Options, for multiple-choice questions"
    )

    class Config:
        """Pydantic config."""

        from_attributes = True


class ScoringConfigResponse(BaseModel):
    """Schema for a per-quiz tier outcome override."""

    classification: Classification
    total_score: int
    recommended_exercise_type: str
    exercise_description: Optional[str] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class QuizDetail(BaseModel):
    """Schema for a quiz with ordered questions."""

    id: int = Field(..., description="Quiz ID")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="Description")
    purpose: QuizPurpose = Field(..., description="Purpose slot the quiz fills")
    is_active: bool = Field(..., description="Whether the quiz is currently served")
    questions: List[QuestionResponse] = Field(
        default_factory=list, description="Questions in ascending order"
    )

    class Config:
        """Pydantic config."""

        from_attributes = True


class AdminQuizDetail(QuizDetail):
    """Quiz as seen by catalog administrators."""

    created_at: datetime
    updated_at: datetime
    scoring_configs: List[ScoringConfigResponse] = Field(default_factory=list)


# =============================================================================
# Admin request schemas
# =============================================================================


class OptionCreate(BaseModel):
    """Schema for adding an answer option."""

    token: str = Field(..., max_length=100, description="Stable value token")
    label: str = Field(..., max_length=500, description="Displayed text")
    order: Optional[int] = Field(
        None, ge=1, description="Display position (defaults to last)"
    )

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        return TextValidator.validate_token(v)

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        return TextValidator.validate_non_empty_text(v, "Label")


class OptionUpdate(BaseModel):
    """Schema for editing an answer option. Omitted fields are unchanged."""

    token: Optional[str] = Field(None, max_length=100)
    label: Optional[str] = Field(None, max_length=500)
    order: Optional[int] = Field(None, ge=1)

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: Optional[str]) -> Optional[str]:
        return TextValidator.validate_token(v) if v is not None else v

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: Optional[str]) -> Optional[str]:
        return TextValidator.validate_non_empty_text(v, "Label") if v is not None else v


class QuestionCreate(BaseModel):
    """Schema for adding a question."""

    text: str = Field(..., description="Question text")
    question_type: QuestionType = Field(..., description="Answer domain")
    order: int = Field(..., ge=1, description="1-based position within the quiz")
    role: Optional[QuestionRole] = Field(None, description="Semantic role")
    options: List[OptionCreate] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return TextValidator.validate_non_empty_text(v, "Question text")

    @model_validator(mode="after")
    def validate_options_match_type(self) -> Self:
        """Options belong to multiple-choice questions only."""
        if self.question_type == QuestionType.MULTIPLE_CHOICE and not self.options:
            raise ValueError("Multiple-choice questions need at least one option")
        if self.question_type != QuestionType.MULTIPLE_CHOICE and self.options:
            raise ValueError("Only multiple-choice questions can have options")
        tokens = [option.token for option in self.options]
        if len(tokens) != len(set(tokens)):
            raise ValueError("Option tokens must be unique within a question")
        return self


class QuestionUpdate(BaseModel):
    """Schema for editing a question. Omitted fields are unchanged."""

    text: Optional[str] = None
    question_type: Optional[QuestionType] = None
    order: Optional[int] = Field(None, ge=1)
    role: Optional[QuestionRole] = Field(
        None, description="Send null explicitly to clear the role"
    )

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        return (
            TextValidator.validate_non_empty_text(v, "Question text")
            if v is not None
            else v
        )


class QuizCreate(BaseModel):
    """Schema for creating a quiz, optionally with its questions."""

    name: str = Field(..., max_length=200)
    purpose: QuizPurpose
    description: Optional[str] = None
    is_active: bool = Field(
        False, description="Activate now; deactivates other quizzes of the purpose"
    )
    questions: List[QuestionCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return TextValidator.validate_non_empty_text(v, "Name")


class QuizUpdate(BaseModel):
    """Schema for editing quiz metadata or activation."""

    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return TextValidator.validate_non_empty_text(v, "Name") if v is not None else v


class ScoringConfigUpdate(BaseModel):
    """Schema for overriding the displayed outcome of one tier."""

    classification: Classification
    total_score: int = Field(..., ge=0, le=100)
    recommended_exercise_type: str = Field(..., max_length=255)
    exercise_description: Optional[str] = None

    @field_validator("recommended_exercise_type")
    @classmethod
    def validate_label(cls, v: str) -> str:
        return TextValidator.validate_non_empty_text(v, "Recommended exercise type")
