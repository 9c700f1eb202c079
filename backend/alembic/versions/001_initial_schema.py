# backend/alembic/versions/001_initial_schema.py
"""Initial schema - Users, reservations and slot claims

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 00:00:00.000000

Creates the three tables in their final form. Roles, plans and statuses are
VARCHAR columns guarded by check constraints instead of database ENUM types.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, reservations and reservation_slot_claims."""
    print("Creating initial schema for users and reservations...")

    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False, server_default=""),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("selected_course", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "role IN ('student', 'parent', 'teacher', 'admin')",
            name="ck_users_role",
        ),
        sa.CheckConstraint(
            "selected_course IS NULL OR selected_course IN ('light', 'half', 'free')",
            name="ck_users_selected_course",
        ),
        comment="Accounts for students, parents, teachers and administrators",
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "reservations",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("course_id", sa.String(64), nullable=False),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_by_id", sa.String(26), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["cancelled_by_id"], ["users.id"]),
        sa.CheckConstraint("start_time < end_time", name="ck_reservations_time_order"),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')",
            name="ck_reservations_status",
        ),
        comment="Lesson reservations; rows are never deleted",
    )
    op.create_index("ix_reservations_id", "reservations", ["id"], unique=False)
    op.create_index("ix_reservations_student_id", "reservations", ["student_id"], unique=False)
    op.create_index("ix_reservations_teacher_id", "reservations", ["teacher_id"], unique=False)
    op.create_index(
        "ix_reservations_reservation_date", "reservations", ["reservation_date"], unique=False
    )
    op.create_index(
        "ix_reservations_teacher_date_status",
        "reservations",
        ["teacher_id", "reservation_date", "status"],
        unique=False,
    )
    op.create_index(
        "ix_reservations_student_date",
        "reservations",
        ["student_id", "reservation_date"],
        unique=False,
    )

    op.create_table(
        "reservation_slot_claims",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reservation_id", sa.String(26), nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("slot_start", sa.Time(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["reservation_id"], ["reservations.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "teacher_id",
            "reservation_date",
            "slot_start",
            name="uq_reservation_slot_claims_teacher_slot",
        ),
        comment="One row per grid slot held by a confirmed reservation",
    )
    op.create_index(
        "ix_reservation_slot_claims_reservation_id",
        "reservation_slot_claims",
        ["reservation_id"],
        unique=False,
    )

    print("Initial schema created")


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    print("Dropping initial schema...")

    op.drop_index(
        "ix_reservation_slot_claims_reservation_id", table_name="reservation_slot_claims"
    )
    op.drop_table("reservation_slot_claims")

    op.drop_index("ix_reservations_student_date", table_name="reservations")
    op.drop_index("ix_reservations_teacher_date_status", table_name="reservations")
    op.drop_index("ix_reservations_reservation_date", table_name="reservations")
    op.drop_index("ix_reservations_teacher_id", table_name="reservations")
    op.drop_index("ix_reservations_student_id", table_name="reservations")
    op.drop_index("ix_reservations_id", table_name="reservations")
    op.drop_table("reservations")

    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    print("Initial schema dropped")
