"""create check-in schema

Revision ID: 3c9f1a2b7d40
Revises:
Create Date: 2026-10-19 09:12:44.218305

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c9f1a2b7d40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy stores Enum members by name
user_role = sa.Enum("PATIENT", "ONCOLOGIST", name="userrole")
quiz_purpose = sa.Enum("DAILY_CHECKIN", "INITIAL_ASSESSMENT", name="quizpurpose")
question_type = sa.Enum("YES_NO", "SCALE_0_10", "MULTIPLE_CHOICE", name="questiontype")
question_role = sa.Enum(
    "ENERGY",
    "FATIGUE",
    "PAIN",
    "SYMPTOMS",
    "TREATMENT_DAY",
    "SLEEP",
    "EMOTIONAL_STATE",
    "SAFETY",
    "DISCOMFORT",
    "CONSULTATION_INTEREST",
    name="questionrole",
)
classification = sa.Enum("RECOVER", "ADAPT", "TRAIN", name="classification")


def upgrade() -> None:
    """Create users, quiz catalog, scoring overrides and response tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "quizzes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("purpose", quiz_purpose, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_quizzes_id", "quizzes", ["id"])
    op.create_index("ix_quizzes_purpose", "quizzes", ["purpose"])
    op.create_index("ix_quizzes_is_active", "quizzes", ["is_active"])
    op.create_index("ix_quizzes_purpose_active", "quizzes", ["purpose", "is_active"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("quiz_id", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("question_type", question_type, nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("role", question_role, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("quiz_id", "order", name="uq_questions_quiz_order"),
        sa.UniqueConstraint("quiz_id", "role", name="uq_questions_quiz_role"),
        sa.CheckConstraint('"order" >= 1', name="ck_questions_order_positive"),
    )
    op.create_index("ix_questions_id", "questions", ["id"])
    op.create_index("ix_questions_quiz_id", "questions", ["quiz_id"])

    op.create_table(
        "question_options",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("token", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=500), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("question_id", "token", name="uq_question_options_token"),
    )
    op.create_index("ix_question_options_id", "question_options", ["id"])
    op.create_index(
        "ix_question_options_question_id", "question_options", ["question_id"]
    )

    op.create_table(
        "quiz_scoring_configs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("quiz_id", sa.Integer(), nullable=False),
        sa.Column("classification", classification, nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("recommended_exercise_type", sa.String(length=255), nullable=False),
        sa.Column("exercise_description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "quiz_id", "classification", name="uq_quiz_scoring_configs_tier"
        ),
    )
    op.create_index("ix_quiz_scoring_configs_id", "quiz_scoring_configs", ["id"])

    op.create_table(
        "quiz_responses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("quiz_id", sa.Integer(), nullable=False),
        sa.Column("response_date", sa.Date(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("is_good_day_for_exercise", sa.Boolean(), nullable=True),
        sa.Column("recommended_exercise_type", sa.String(length=255), nullable=False),
        sa.Column("classification", classification, nullable=True),
        sa.Column("decision_triggers", sa.JSON(), nullable=True),
        sa.Column("quiz_snapshot", sa.JSON(), nullable=True),
        sa.Column("general_observations", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"]),
        sa.PrimaryKeyConstraint("id"),
        # Storage-level guarantee of one check-in per user, quiz and day
        sa.UniqueConstraint(
            "user_id", "quiz_id", "response_date", name="uq_quiz_responses_user_day"
        ),
    )
    op.create_index("ix_quiz_responses_id", "quiz_responses", ["id"])
    op.create_index(
        "ix_quiz_responses_user_date", "quiz_responses", ["user_id", "response_date"]
    )

    op.create_table(
        "response_answers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("response_id", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("answer_value", sa.String(length=500), nullable=False),
        sa.ForeignKeyConstraint(
            ["response_id"], ["quiz_responses.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "response_id", "question_id", name="uq_response_answers_question"
        ),
    )
    op.create_index("ix_response_answers_id", "response_answers", ["id"])
    op.create_index(
        "ix_response_answers_response_id", "response_answers", ["response_id"]
    )


def downgrade() -> None:
    """Drop every check-in table and enum type."""
    op.drop_table("response_answers")
    op.drop_table("quiz_responses")
    op.drop_table("quiz_scoring_configs")
    op.drop_table("question_options")
    op.drop_table("questions")
    op.drop_table("quizzes")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (classification, question_role, question_type, quiz_purpose, user_role):
        enum_type.drop(bind, checkfirst=True)
