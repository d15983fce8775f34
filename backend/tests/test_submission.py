"""
Tests for the submission orchestrator.
"""
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from checkin.core import decision_engine as de
from checkin.core.catalog import set_scoring_config, update_quiz
from checkin.core.error_responses import ErrorMessages
from checkin.core.exceptions import ConflictError, NotFoundError, ValidationError
from checkin.core.submission import get_today_response, submit_quiz_response
from checkin.models.models import (
    Classification,
    QuestionRole,
    QuizResponse,
    ResponseAnswer,
)

TODAY = date(2026, 3, 10)


class TestSubmitDailyCheckin:
    """Tests for a successful daily check-in."""

    def test_benign_answers_train(self, db_session, test_user, daily_quiz, make_answers):
        result = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, make_answers(daily_quiz), today=TODAY
        )

        response = result.response
        assert response.id is not None
        assert response.response_date == TODAY
        assert response.classification == Classification.TRAIN
        assert response.is_good_day_for_exercise is True
        assert response.total_score == 80
        assert response.decision_triggers == []
        assert len(response.answers) == 10
        assert result.decision.consultation_requested is False

    def test_red_flag_recovers(self, db_session, test_user, daily_quiz, make_answers):
        answers = make_answers(
            daily_quiz,
            {
                QuestionRole.FATIGUE: de.FATIGUE_MODERATE,
                QuestionRole.SAFETY: de.SAFETY_NAO,
            },
        )

        result = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, answers, today=TODAY
        )

        assert result.response.classification == Classification.RECOVER
        assert result.response.is_good_day_for_exercise is False
        assert result.response.decision_triggers == ["safety_not_confident"]

    def test_answers_are_stored_canonically(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        answers = [(qid, value.lower()) for qid, value in make_answers(daily_quiz)]

        result = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, answers, today=TODAY
        )

        stored = {a.answer_value for a in result.response.answers}
        assert stored == set(de.BENIGN_TOKENS.values())

    def test_snapshot_is_stored(self, db_session, test_user, daily_quiz, make_answers):
        result = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, make_answers(daily_quiz), today=TODAY
        )

        snapshot = result.response.quiz_snapshot
        assert snapshot["quiz_id"] == daily_quiz.id
        assert [q["order"] for q in snapshot["questions"]] == list(range(1, 11))

    def test_observations_are_sanitized(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        result = submit_quiz_response(
            db_session,
            test_user.id,
            daily_quiz.id,
            make_answers(daily_quiz),
            observations="  <b>cansada</b>\x00  ",
            today=TODAY,
        )

        assert result.response.general_observations == "&lt;b&gt;cansada&lt;/b&gt;"

    def test_scoring_override_is_applied(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        set_scoring_config(
            db_session, daily_quiz.id, Classification.TRAIN, 95, "Treino liberado"
        )

        result = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, make_answers(daily_quiz), today=TODAY
        )

        assert result.response.total_score == 95
        assert result.response.recommended_exercise_type == "Treino liberado"
        assert result.response.is_good_day_for_exercise is True

    def test_consultation_request_is_reported(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        answers = make_answers(
            daily_quiz, {QuestionRole.CONSULTATION_INTEREST: de.CONSULT_YES}
        )

        result = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, answers, today=TODAY
        )

        assert result.decision.consultation_requested is True


class TestSubmitInitialAssessment:
    """The initial assessment is stored without a safety classification."""

    def test_assessment_has_no_classification(
        self, db_session, test_user, assessment_quiz
    ):
        values = ["YES", "NO", "7", "GOAL_FORCA", "CONSULT_YES"]
        answers = [
            (question.id, value)
            for question, value in zip(assessment_quiz.questions, values)
        ]

        result = submit_quiz_response(
            db_session, test_user.id, assessment_quiz.id, answers, today=TODAY
        )

        assert result.response.classification is None
        assert result.response.is_good_day_for_exercise is None
        assert result.response.recommended_exercise_type == (
            de.ASSESSMENT_OUTCOME.recommended_exercise_type
        )
        assert sorted(a.answer_value for a in result.response.answers) == sorted(
            ["YES", "NO", "7", "GOAL_FORCA", "CONSULT_YES"]
        )


class TestOnePerDay:
    """Tests for the one check-in per user, quiz and day rule."""

    def test_second_submission_same_day_conflicts(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        answers = make_answers(daily_quiz)
        first = submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, answers, today=TODAY
        )

        with pytest.raises(ConflictError) as exc_info:
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, answers, today=TODAY
            )

        assert exc_info.value.message == ErrorMessages.ALREADY_CHECKED_IN_TODAY
        assert db_session.query(QuizResponse).count() == 1
        stored = get_today_response(db_session, test_user.id, daily_quiz.id, TODAY)
        assert stored.id == first.response.id

    def test_next_day_is_allowed(self, db_session, test_user, daily_quiz, make_answers):
        answers = make_answers(daily_quiz)
        submit_quiz_response(db_session, test_user.id, daily_quiz.id, answers, today=TODAY)

        submit_quiz_response(
            db_session,
            test_user.id,
            daily_quiz.id,
            answers,
            today=TODAY + timedelta(days=1),
        )

        assert db_session.query(QuizResponse).count() == 2

    def test_other_users_are_independent(
        self, db_session, test_user, other_user, daily_quiz, make_answers
    ):
        answers = make_answers(daily_quiz)
        submit_quiz_response(db_session, test_user.id, daily_quiz.id, answers, today=TODAY)
        submit_quiz_response(db_session, other_user.id, daily_quiz.id, answers, today=TODAY)

        assert db_session.query(QuizResponse).count() == 2

    def test_race_is_caught_by_unique_constraint(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        """If the pre-check misses a concurrent insert, the constraint still wins."""
        answers = make_answers(daily_quiz)
        submit_quiz_response(db_session, test_user.id, daily_quiz.id, answers, today=TODAY)

        with patch("checkin.core.submission.get_today_response", return_value=None):
            with pytest.raises(ConflictError):
                submit_quiz_response(
                    db_session, test_user.id, daily_quiz.id, answers, today=TODAY
                )

        assert db_session.query(QuizResponse).count() == 1
        assert db_session.query(ResponseAnswer).count() == 10

    def test_get_today_response_is_a_pure_read(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        assert get_today_response(db_session, test_user.id, daily_quiz.id, TODAY) is None
        submit_quiz_response(
            db_session, test_user.id, daily_quiz.id, make_answers(daily_quiz), today=TODAY
        )

        first = get_today_response(db_session, test_user.id, daily_quiz.id, TODAY)
        second = get_today_response(db_session, test_user.id, daily_quiz.id, TODAY)

        assert first.id == second.id
        assert db_session.query(QuizResponse).count() == 1


class TestRejectedSubmissions:
    """Submissions rejected before anything is stored."""

    def test_unknown_quiz(self, db_session, test_user):
        with pytest.raises(NotFoundError):
            submit_quiz_response(db_session, test_user.id, 999, [], today=TODAY)

    def test_inactive_quiz(self, db_session, test_user, daily_quiz, make_answers):
        update_quiz(db_session, daily_quiz.id, is_active=False)

        with pytest.raises(NotFoundError):
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, make_answers(daily_quiz), today=TODAY
            )

    def test_missing_answer_names_the_question(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        answers = make_answers(daily_quiz)
        dropped_id = answers.pop()[0]

        with pytest.raises(ValidationError) as exc_info:
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, answers, today=TODAY
            )

        assert exc_info.value.message == ErrorMessages.INCOMPLETE_SUBMISSION
        assert exc_info.value.errors == [
            {
                "field": "answers",
                "question_id": dropped_id,
                "message": ErrorMessages.missing_answer(dropped_id),
            }
        ]
        assert db_session.query(QuizResponse).count() == 0

    def test_question_from_another_quiz(
        self, db_session, test_user, daily_quiz, assessment_quiz, make_answers
    ):
        foreign_id = assessment_quiz.questions[0].id
        answers = make_answers(daily_quiz) + [(foreign_id, "YES")]

        with pytest.raises(ValidationError) as exc_info:
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, answers, today=TODAY
            )

        assert exc_info.value.message == ErrorMessages.INVALID_SUBMISSION
        assert exc_info.value.errors[0]["question_ids"] == [foreign_id]

    def test_duplicate_answer(self, db_session, test_user, daily_quiz, make_answers):
        answers = make_answers(daily_quiz)
        answers.append(answers[0])

        with pytest.raises(ValidationError) as exc_info:
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, answers, today=TODAY
            )

        assert exc_info.value.errors[0]["question_id"] == answers[0][0]

    def test_value_outside_type_domain(self, db_session, test_user, assessment_quiz):
        values = ["YES", "NO", "11", "GOAL_FORCA", "CONSULT_NO"]
        answers = [
            (question.id, value)
            for question, value in zip(assessment_quiz.questions, values)
        ]
        scale_id = assessment_quiz.questions[2].id

        with pytest.raises(ValidationError) as exc_info:
            submit_quiz_response(
                db_session, test_user.id, assessment_quiz.id, answers, today=TODAY
            )

        assert [e["question_id"] for e in exc_info.value.errors] == [scale_id]

    def test_all_problems_reported_together(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        answers = make_answers(daily_quiz)
        answers = answers[2:] + [(answers[0][0], "   ")]

        with pytest.raises(ValidationError) as exc_info:
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, answers, today=TODAY
            )

        assert len(exc_info.value.errors) == 2


class TestDriftReporting:
    """Unrecognized tokens are stored but flagged for operators."""

    def test_unknown_token_is_flagged(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        answers = make_answers(daily_quiz, {QuestionRole.SYMPTOMS: "SYM_NOVO"})

        with patch("checkin.core.submission.capture_message") as capture, patch(
            "checkin.core.submission.logger"
        ) as logger:
            result = submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, answers, today=TODAY
            )

        assert result.response.classification == Classification.TRAIN
        assert result.decision.unrecognized == ["symptoms=SYM_NOVO"]
        capture.assert_called_once()
        assert capture.call_args.kwargs["context"]["unrecognized"] == ["symptoms=SYM_NOVO"]
        logger.warning.assert_called_once()

    def test_known_tokens_are_not_flagged(
        self, db_session, test_user, daily_quiz, make_answers
    ):
        with patch("checkin.core.submission.capture_message") as capture:
            submit_quiz_response(
                db_session, test_user.id, daily_quiz.id, make_answers(daily_quiz), today=TODAY
            )

        capture.assert_not_called()
