"""
Typed answer values.

Raw answers arrive as strings ("YES", "7", "FATIGUE_INTENSE"). They are
parsed exactly once, at the submission boundary, into one of three value
types according to the question's declared type. The decision engine only
ever sees these parsed values.
"""
from dataclasses import dataclass
from typing import Union

from checkin.core.validators import StringSanitizer
from checkin.models.models import QuestionType

SCALE_MIN = 0
SCALE_MAX = 10

_YES_VALUES = {"YES", "TRUE", "SIM"}
_NO_VALUES = {"NO", "FALSE", "NAO", "NÃO"}


class AnswerValueError(ValueError):
    """Raised when a raw answer is outside its question type's domain."""


@dataclass(frozen=True)
class YesNo:
    """Answer to a YES_NO question."""

    value: bool

    @property
    def raw(self) -> str:
        return "YES" if self.value else "NO"


@dataclass(frozen=True)
class Scale:
    """Answer to a SCALE_0_10 question."""

    value: int

    @property
    def raw(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Choice:
    """Answer to a MULTIPLE_CHOICE question: the selected option's token."""

    token: str

    @property
    def raw(self) -> str:
        return self.token


AnswerValue = Union[YesNo, Scale, Choice]


def parse_answer_value(question_type: QuestionType, raw: str) -> AnswerValue:
    """
    Parse a raw submitted value for a question of the given type.

    Multiple-choice values are not checked against the question's option
    set here: unknown tokens are accepted and reported by the engine.

    Args:
        question_type: Declared type of the question
        raw: Value as submitted by the client

    Returns:
        The parsed answer value

    Raises:
        AnswerValueError: If the value is empty or outside the type's domain
    """
    if raw is None:
        raise AnswerValueError("a value is required")

    text = str(raw).strip()
    if not text:
        raise AnswerValueError("a value is required")

    if question_type == QuestionType.YES_NO:
        upper = text.upper()
        if upper in _YES_VALUES:
            return YesNo(True)
        if upper in _NO_VALUES:
            return YesNo(False)
        raise AnswerValueError("expected YES or NO")

    if question_type == QuestionType.SCALE_0_10:
        # int() would accept "+5" and "٥"; only plain ASCII digits are allowed
        if not (text.isascii() and text.isdigit()):
            raise AnswerValueError(
                f"expected an integer from {SCALE_MIN} to {SCALE_MAX}"
            )
        number = int(text)
        if not SCALE_MIN <= number <= SCALE_MAX:
            raise AnswerValueError(
                f"expected an integer from {SCALE_MIN} to {SCALE_MAX}"
            )
        return Scale(number)

    if question_type == QuestionType.MULTIPLE_CHOICE:
        return Choice(StringSanitizer.normalize_token(text))

    raise AnswerValueError(f"unsupported question type {question_type!r}")
