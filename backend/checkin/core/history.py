"""
Read-only history of a user's check-ins.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from checkin.core.config import settings
from checkin.core.datetime_utils import local_today
from checkin.models.models import Quiz, QuizPurpose, QuizResponse


@dataclass
class HistorySummary:
    """Aggregates shown on the patient's history page."""

    total_checkins: int
    good_days: int
    current_streak: int
    longest_streak: int
    last_checkin_date: Optional[date]


def clamp_limit(limit: Optional[int]) -> int:
    """Apply the configured default and maximum page size."""
    if limit is None:
        return settings.HISTORY_DEFAULT_LIMIT
    return max(1, min(limit, settings.HISTORY_MAX_LIMIT))


def get_history(
    db: Session,
    user_id: int,
    limit: Optional[int] = None,
    quiz_id: Optional[int] = None,
) -> List[QuizResponse]:
    """
    Return a user's responses, newest calendar day first.

    Args:
        db: Database session
        user_id: User ID
        limit: Maximum rows; clamped to HISTORY_MAX_LIMIT
        quiz_id: Optional filter on one quiz

    Returns:
        Responses ordered by response_date desc, then id desc
    """
    query = (
        db.query(QuizResponse)
        .options(selectinload(QuizResponse.answers))
        .filter(QuizResponse.user_id == user_id)
    )
    if quiz_id is not None:
        query = query.filter(QuizResponse.quiz_id == quiz_id)
    return (
        query.order_by(QuizResponse.response_date.desc(), QuizResponse.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def _streaks(days: List[date], today: date) -> tuple[int, int]:
    """Current and longest runs of consecutive days in an ascending list."""
    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day

    # A streak is still alive if the latest check-in was today or yesterday
    if previous is None or (today - previous).days > 1:
        return 0, longest
    return run, longest


def summarize_history(
    db: Session, user_id: int, today: Optional[date] = None
) -> HistorySummary:
    """
    Count daily check-ins, good days and day streaks for a user.

    Only daily check-in responses count; initial assessments are ignored.

    Args:
        db: Database session
        user_id: User ID
        today: Calendar day; defaults to today in CHECKIN_TIMEZONE

    Returns:
        The summary
    """
    if today is None:
        today = local_today(settings.CHECKIN_TIMEZONE)

    rows = (
        db.query(QuizResponse.response_date, QuizResponse.is_good_day_for_exercise)
        .join(Quiz, Quiz.id == QuizResponse.quiz_id)
        .filter(
            QuizResponse.user_id == user_id,
            Quiz.purpose == QuizPurpose.DAILY_CHECKIN,
        )
        .order_by(QuizResponse.response_date.asc())
        .all()
    )

    # Several daily quizzes may be answered on one day; streaks count days
    days = sorted({row.response_date for row in rows})
    current, longest = _streaks(days, today)

    return HistorySummary(
        total_checkins=len(rows),
        good_days=sum(1 for row in rows if row.is_good_day_for_exercise),
        current_streak=current,
        longest_streak=longest,
        last_checkin_date=days[-1] if days else None,
    )
