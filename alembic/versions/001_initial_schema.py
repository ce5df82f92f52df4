"""Initial schema: workout_plans, exercises, workout_sessions, exercise_sets, check_ins.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

muscle_group = sa.Enum(
    "CHEST", "BACK", "LEGS", "SHOULDERS", "ARMS", "ABS", "CARDIO", name="musclegroup"
)


def upgrade() -> None:
    op.create_table(
        "workout_plans",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_workout_plans")),
    )
    op.create_index(op.f("ix_workout_plans_name"), "workout_plans", ["name"], unique=False)

    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("muscle_group", muscle_group, nullable=False),
        sa.Column("default_sets", sa.Integer(), nullable=False),
        sa.Column("default_reps", sa.Integer(), nullable=False),
        sa.Column("default_rest_seconds", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("load", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(
            ["plan_id"],
            ["workout_plans.id"],
            name=op.f("fk_exercises_plan_id_workout_plans"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercises")),
        sa.UniqueConstraint("plan_id", "order", name="uq_exercises_plan_order"),
    )
    op.create_index(op.f("ix_exercises_plan_id"), "exercises", ["plan_id"], unique=False)

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["plan_id"],
            ["workout_plans.id"],
            name=op.f("fk_workout_sessions_plan_id_workout_plans"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_workout_sessions")),
    )
    op.create_index(op.f("ix_workout_sessions_plan_id"), "workout_sessions", ["plan_id"], unique=False)
    op.create_index("ix_workout_sessions_start_date", "workout_sessions", ["start_date"], unique=False)
    op.create_index(
        "uq_workout_sessions_active_plan",
        "workout_sessions",
        ["plan_id"],
        unique=True,
        sqlite_where=sa.text("is_completed = 0"),
        postgresql_where=sa.text("NOT is_completed"),
    )

    op.create_table(
        "exercise_sets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("set_number", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=False),
        sa.ForeignKeyConstraint(
            ["exercise_id"],
            ["exercises.id"],
            name=op.f("fk_exercise_sets_exercise_id_exercises"),
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["workout_sessions.id"],
            name=op.f("fk_exercise_sets_session_id_workout_sessions"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercise_sets")),
        sa.UniqueConstraint(
            "session_id", "exercise_id", "set_number", name="uq_exercise_sets_session_exercise_number"
        ),
    )
    op.create_index("ix_exercise_sets_session_id", "exercise_sets", ["session_id"], unique=False)
    op.create_index(
        "ix_exercise_sets_exercise_id_completed_date",
        "exercise_sets",
        ["exercise_id", "completed_date"],
        unique=False,
    )

    op.create_table(
        "check_ins",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["workout_sessions.id"],
            name=op.f("fk_check_ins_session_id_workout_sessions"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_check_ins")),
    )
    op.create_index(op.f("ix_check_ins_timestamp"), "check_ins", ["timestamp"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_check_ins_timestamp"), table_name="check_ins")
    op.drop_table("check_ins")
    op.drop_index("ix_exercise_sets_exercise_id_completed_date", table_name="exercise_sets")
    op.drop_index("ix_exercise_sets_session_id", table_name="exercise_sets")
    op.drop_table("exercise_sets")
    op.drop_index("uq_workout_sessions_active_plan", table_name="workout_sessions")
    op.drop_index("ix_workout_sessions_start_date", table_name="workout_sessions")
    op.drop_index(op.f("ix_workout_sessions_plan_id"), table_name="workout_sessions")
    op.drop_table("workout_sessions")
    op.drop_index(op.f("ix_exercises_plan_id"), table_name="exercises")
    op.drop_table("exercises")
    op.drop_index(op.f("ix_workout_plans_name"), table_name="workout_plans")
    op.drop_table("workout_plans")
    muscle_group.drop(op.get_bind(), checkfirst=True)
