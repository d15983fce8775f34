"""
Pytest configuration and shared fixtures for testing.
"""
import os
from pathlib import Path

# Settings are read at import time, so the environment must be in place
# before anything from checkin is imported.
_TEST_DB = Path(__file__).parent / "test.db"
SQLALCHEMY_DATABASE_URL = f"sqlite:///{_TEST_DB}"

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["SENTRY_DSN"] = ""
os.environ["SEED_BASELINE_QUIZZES"] = "false"

from contextlib import asynccontextmanager  # noqa: E402
from typing import Callable, Dict, List, Tuple  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from checkin.core.baseline_quizzes import ensure_baseline_quizzes  # noqa: E402
from checkin.core.config import settings  # noqa: E402
from checkin.core.decision_engine import BENIGN_TOKENS  # noqa: E402
from checkin.core.security import create_access_token  # noqa: E402
from checkin.main import app  # noqa: E402
from checkin.models import Base, User, get_db  # noqa: E402
from checkin.models.models import QuestionRole, Quiz, QuizPurpose, UserRole  # noqa: E402


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests.

    Skips Sentry initialization and baseline seeding; tests seed explicitly.
    """
    yield


# Neutralize the production lifespan on the singleton app.
app.router.lifespan_context = _test_lifespan


engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    """
    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency override.
    """

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session):
    """
    Create a patient in the database.
    """
    user = User(email="paciente@example.com", name="Test Patient", role=UserRole.PATIENT)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    """
    Create a second patient, for isolation checks.
    """
    user = User(email="outra@example.com", name="Other Patient", role=UserRole.PATIENT)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    """
    Create authentication headers for test user.
    """
    access_token = create_access_token({"user_id": test_user.id})
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def admin_headers():
    """
    Headers accepted by the admin endpoints.
    """
    return {"X-Admin-Token": settings.ADMIN_TOKEN}


@pytest.fixture
def baseline_quizzes(db_session) -> Dict[QuizPurpose, Quiz]:
    """
    Seed the baseline daily check-in and initial assessment.
    """
    created = ensure_baseline_quizzes(db_session)
    return {QuizPurpose(quiz.purpose): quiz for quiz in created}


@pytest.fixture
def daily_quiz(baseline_quizzes) -> Quiz:
    """The active baseline daily check-in."""
    return baseline_quizzes[QuizPurpose.DAILY_CHECKIN]


@pytest.fixture
def assessment_quiz(baseline_quizzes) -> Quiz:
    """The active baseline initial assessment."""
    return baseline_quizzes[QuizPurpose.INITIAL_ASSESSMENT]


@pytest.fixture
def make_answers() -> Callable[..., List[Tuple[int, str]]]:
    """
    Build a complete daily check-in answer set.

    Every role gets its most benign token unless overridden, e.g.
    make_answers(quiz, {QuestionRole.PAIN: "PAIN_STRONG"}).
    """

    def _make(quiz: Quiz, overrides: Dict[QuestionRole, str] = None):
        overrides = overrides or {}
        answers = []
        for question in quiz.questions:
            role = QuestionRole(question.role)
            answers.append((question.id, overrides.get(role, BENIGN_TOKENS[role])))
        return answers

    return _make


@pytest.fixture
def make_payload(make_answers):
    """
    Build a JSON submission body for the check-ins endpoint.
    """

    def _make(quiz: Quiz, overrides: Dict[QuestionRole, str] = None, **extra):
        payload = {
            "quiz_id": quiz.id,
            "answers": [
                {"question_id": question_id, "value": value}
                for question_id, value in make_answers(quiz, overrides)
            ],
        }
        payload.update(extra)
        return payload

    return _make
