"""attendance core: sessões, matrículas e registros de presença

Revision ID: 20250301_attendance_core
Revises:
Create Date: 2025-03-01 12:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "20250301_attendance_core"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "attendance_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(36), nullable=False),
        sa.Column("section_id", sa.String(36), nullable=False),
        sa.Column("session_name", sa.String(100), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("location", sa.String(100), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_attendance_sessions"),
    )
    op.create_index("ix_attendance_sessions_section_id", "attendance_sessions", ["section_id"])

    op.create_table(
        "section_enrollments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("student_id", sa.String(36), nullable=False),
        # anulável de propósito: a auditoria reporta matrícula sem turma
        sa.Column("section_id", sa.String(36), nullable=True),
        sa.Column("enrollment_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_section_enrollments"),
    )
    op.create_index("ix_section_enrollments_student_id", "section_enrollments", ["student_id"])
    op.create_index("ix_section_enrollments_section_id", "section_enrollments", ["section_id"])

    op.create_table(
        "attendance_records",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("session_id", sa.String(36), nullable=False),
        sa.Column("student_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("method_used", sa.String(20), nullable=False),
        sa.Column("marked_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_attendance_records"),
        sa.ForeignKeyConstraint(["session_id"], ["attendance_sessions.id"],
                                name="fk_attendance_records_session_id_attendance_sessions"),
        sa.UniqueConstraint("session_id", "student_id", name="uq_attendance_unique"),
    )


def downgrade() -> None:
    op.drop_table("attendance_records")
    op.drop_index("ix_section_enrollments_section_id", table_name="section_enrollments")
    op.drop_index("ix_section_enrollments_student_id", table_name="section_enrollments")
    op.drop_table("section_enrollments")
    op.drop_index("ix_attendance_sessions_section_id", table_name="attendance_sessions")
    op.drop_table("attendance_sessions")
