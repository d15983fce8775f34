"""
Tests for storage-level constraints.
"""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from checkin.models.models import (
    Question,
    QuestionOption,
    QuestionRole,
    QuestionType,
    Quiz,
    QuizPurpose,
    QuizResponse,
)


def make_response(user_id, quiz_id, day):
    return QuizResponse(
        user_id=user_id,
        quiz_id=quiz_id,
        response_date=day,
        total_score=80,
        recommended_exercise_type="Treinar",
    )


class TestQuizResponseConstraint:
    """The unique index is the actual one-per-day guarantee."""

    def test_duplicate_day_is_rejected(self, db_session, test_user, daily_quiz):
        day = date(2026, 1, 5)
        db_session.add(make_response(test_user.id, daily_quiz.id, day))
        db_session.commit()

        db_session.add(make_response(test_user.id, daily_quiz.id, day))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_same_day_other_quiz_is_allowed(
        self, db_session, test_user, daily_quiz, assessment_quiz
    ):
        day = date(2026, 1, 5)
        db_session.add(make_response(test_user.id, daily_quiz.id, day))
        db_session.add(make_response(test_user.id, assessment_quiz.id, day))
        db_session.commit()

        assert db_session.query(QuizResponse).count() == 2


class TestCatalogConstraints:
    """Positions, roles and tokens are unique within their parent."""

    @pytest.fixture
    def quiz(self, db_session):
        quiz = Quiz(name="Q", purpose=QuizPurpose.DAILY_CHECKIN)
        db_session.add(quiz)
        db_session.commit()
        return quiz

    def test_duplicate_position(self, db_session, quiz):
        db_session.add_all(
            [
                Question(quiz_id=quiz.id, text="a", question_type=QuestionType.YES_NO, order=1),
                Question(quiz_id=quiz.id, text="b", question_type=QuestionType.YES_NO, order=1),
            ]
        )
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_duplicate_role(self, db_session, quiz):
        db_session.add_all(
            [
                Question(
                    quiz_id=quiz.id,
                    text="a",
                    question_type=QuestionType.YES_NO,
                    order=1,
                    role=QuestionRole.DISCOMFORT,
                ),
                Question(
                    quiz_id=quiz.id,
                    text="b",
                    question_type=QuestionType.YES_NO,
                    order=2,
                    role=QuestionRole.DISCOMFORT,
                ),
            ]
        )
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_untagged_questions_may_share_null_role(self, db_session, quiz):
        db_session.add_all(
            [
                Question(quiz_id=quiz.id, text="a", question_type=QuestionType.YES_NO, order=1),
                Question(quiz_id=quiz.id, text="b", question_type=QuestionType.YES_NO, order=2),
            ]
        )
        db_session.commit()

        assert db_session.query(Question).count() == 2

    def test_duplicate_option_token(self, db_session, quiz):
        question = Question(
            quiz_id=quiz.id,
            text="a",
            question_type=QuestionType.MULTIPLE_CHOICE,
            order=1,
            options=[
                QuestionOption(token="A", label="a", order=1),
                QuestionOption(token="A", label="b", order=2),
            ],
        )
        db_session.add(question)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_position_must_be_positive(self, db_session, quiz):
        db_session.add(
            Question(quiz_id=quiz.id, text="a", question_type=QuestionType.YES_NO, order=0)
        )
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
