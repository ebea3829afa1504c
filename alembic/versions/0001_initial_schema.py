"""initial schema: job seekers, jobs, questions, applications, responses, id sequences

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-09-19 14:11:02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

QUESTION_TYPES = ("TEXT", "MULTIPLE_CHOICE", "CHECKBOX", "DROPDOWN", "TEXT_AREA", "FILE_UPLOAD", "DATE")
APPLICATION_STATUSES = ("PENDING", "SHORTLISTED", "INTERVIEW_SCHEDULED", "OFFER_SENT", "HIRED", "REJECTED")


def _owned_by_job_seeker(table_name: str, *columns: sa.Column) -> None:
    op.create_table(
        table_name,
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("job_seeker_id", sa.String(length=10), sa.ForeignKey("job_seekers.id"), nullable=False),
        *columns,
    )
    op.create_index(f"ix_{table_name}_job_seeker_id", table_name, ["job_seeker_id"])


def upgrade() -> None:
    op.create_table(
        "job_seekers",
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("full_name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=200), nullable=True),
        sa.Column("experience_level", sa.String(length=50), nullable=True),
        sa.Column("profile_photo_file_name", sa.String(), nullable=True),
        sa.Column("resume_file_name", sa.String(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_job_seekers_id", "job_seekers", ["id"])
    op.create_index("ix_job_seekers_email", "job_seekers", ["email"], unique=True)

    _owned_by_job_seeker("job_seeker_skills", sa.Column("skill_name", sa.String(length=100)))
    _owned_by_job_seeker(
        "work_experiences",
        sa.Column("company", sa.String(length=100)),
        sa.Column("title", sa.String(length=100)),
    )
    _owned_by_job_seeker(
        "educations",
        sa.Column("institution", sa.String(length=100)),
        sa.Column("qualification", sa.String(length=100)),
    )
    _owned_by_job_seeker(
        "languages",
        sa.Column("name", sa.String(length=50)),
        sa.Column("proficiency", sa.String(length=50), nullable=True),
    )
    _owned_by_job_seeker(
        "licenses",
        sa.Column("name", sa.String(length=100)),
        sa.Column("issuer", sa.String(length=100), nullable=True),
    )

    op.create_table(
        "question_sets",
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("question_set_id", sa.String(length=10), sa.ForeignKey("question_sets.id"), nullable=True),
        sa.Column("posted_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_jobs_id", "jobs", ["id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("text", sa.String(length=500), nullable=False),
        sa.Column("type", sa.Enum(*QUESTION_TYPES, name="questiontype"), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("options", sa.Text(), nullable=True),
        sa.Column("max_length", sa.Integer(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("question_set_id", sa.String(length=10), sa.ForeignKey("question_sets.id"), nullable=True),
        sa.Column("job_id", sa.String(length=10), sa.ForeignKey("jobs.id"), nullable=True),
    )
    op.create_index("ix_questions_question_set_id", "questions", ["question_set_id"])
    op.create_index("ix_questions_job_id", "questions", ["job_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("job_id", sa.String(length=10), sa.ForeignKey("jobs.id"), nullable=False),
        sa.Column("job_seeker_id", sa.String(length=10), sa.ForeignKey("job_seekers.id"), nullable=False),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column("status", sa.Enum(*APPLICATION_STATUSES, name="applicationstatus"), nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("job_id", "job_seeker_id", name="uq_applications_job_seeker"),
    )
    op.create_index("ix_applications_id", "applications", ["id"])
    op.create_index("ix_applications_job_id", "applications", ["job_id"])
    op.create_index("ix_applications_job_seeker_id", "applications", ["job_seeker_id"])

    op.create_table(
        "question_responses",
        sa.Column("id", sa.String(length=10), primary_key=True),
        sa.Column("answer", sa.Text(), nullable=False, server_default=""),
        sa.Column("responded_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("question_id", sa.String(length=10), sa.ForeignKey("questions.id"), nullable=False),
        sa.Column("application_id", sa.String(length=10), sa.ForeignKey("applications.id"), nullable=False),
        sa.Column("job_seeker_id", sa.String(length=10), sa.ForeignKey("job_seekers.id"), nullable=False),
        sa.UniqueConstraint(
            "application_id", "question_id", name="uq_question_responses_application_question"
        ),
    )
    op.create_index("ix_question_responses_application_id", "question_responses", ["application_id"])

    op.create_table(
        "id_sequences",
        sa.Column("prefix", sa.String(length=10), primary_key=True),
        sa.Column("last_value", sa.Integer(), nullable=False, server_default="0"),
    )


def downgrade() -> None:
    op.drop_table("id_sequences")
    op.drop_index("ix_question_responses_application_id", table_name="question_responses")
    op.drop_table("question_responses")
    op.drop_index("ix_applications_job_seeker_id", table_name="applications")
    op.drop_index("ix_applications_job_id", table_name="applications")
    op.drop_index("ix_applications_id", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_questions_job_id", table_name="questions")
    op.drop_index("ix_questions_question_set_id", table_name="questions")
    op.drop_table("questions")
    op.drop_index("ix_jobs_id", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("question_sets")
    for table_name in ("licenses", "languages", "educations", "work_experiences", "job_seeker_skills"):
        op.drop_index(f"ix_{table_name}_job_seeker_id", table_name=table_name)
        op.drop_table(table_name)
    op.drop_index("ix_job_seekers_email", table_name="job_seekers")
    op.drop_index("ix_job_seekers_id", table_name="job_seekers")
    op.drop_table("job_seekers")
    sa.Enum(name="applicationstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="questiontype").drop(op.get_bind(), checkfirst=True)
