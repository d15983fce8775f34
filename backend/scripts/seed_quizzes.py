#!/usr/bin/env python3
"""
Seed the baseline quizzes.

Creates and activates the default daily check-in and initial assessment for
every purpose that has no quiz yet. Existing quizzes, active or not, are
never touched, so the script can run on every deploy.

Usage:
    DATABASE_URL="postgresql://..." python scripts/seed_quizzes.py

    # Show what would be created without writing
    DATABASE_URL="postgresql://..." python scripts/seed_quizzes.py --dry-run
"""

import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from checkin.core.baseline_quizzes import (  # noqa: E402
    BASELINE_QUIZZES,
    ensure_baseline_quizzes,
)
from checkin.core.db_error_handling import DatabaseOperationError  # noqa: E402
from checkin.core.logging_config import setup_logging  # noqa: E402
from checkin.models import Quiz, SessionLocal  # noqa: E402

logger = logging.getLogger("checkin.scripts.seed_quizzes")


def missing_purposes(db) -> list:
    """Return the purposes that have no quiz at all."""
    return [
        purpose
        for purpose in BASELINE_QUIZZES
        if db.query(Quiz.id).filter(Quiz.purpose == purpose).first() is None
    ]


def seed(dry_run: bool = False) -> int:
    """Seed missing baseline quizzes and return how many were (or would be) created."""
    db = SessionLocal()
    try:
        if dry_run:
            purposes = missing_purposes(db)
            for purpose in purposes:
                name, _, questions = BASELINE_QUIZZES[purpose]
                logger.info(
                    f"[DRY RUN] Would create '{name}' ({purpose.value}) "
                    f"with {len(questions)} questions"
                )
            return len(purposes)

        try:
            created = ensure_baseline_quizzes(db)
        except SQLAlchemyError as e:
            db.rollback()
            raise DatabaseOperationError("seed baseline quizzes", e) from e

        for quiz in created:
            logger.info(f"Created quiz {quiz.id}: {quiz.name} ({quiz.purpose.value})")
        return len(created)
    finally:
        db.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the baseline quizzes")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created without writing to the database",
    )
    args = parser.parse_args()

    setup_logging()

    try:
        count = seed(dry_run=args.dry_run)
    except DatabaseOperationError as e:
        logger.error(e.message)
        return 1

    if count == 0:
        logger.info("Every purpose already has a quiz; nothing to seed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
