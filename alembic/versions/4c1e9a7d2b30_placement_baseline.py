"""placement_baseline

Revision ID: 4c1e9a7d2b30
Revises:
Create Date: 2026-10-18 09:12:44.518203

Creates the placement portal schema. Tables that already exist are left alone,
so the revision can be stamped onto databases created by init_db().
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7d2b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text('(CURRENT_TIMESTAMP)')


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('role', sa.String(), nullable=False),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('is_approved', sa.Boolean(), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('student_profile', sa.JSON(), nullable=True),
            sa.Column('recruiter_profile', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('recruiter_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('company', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('requirements', sa.JSON(), nullable=False),
            sa.Column('skills', sa.JSON(), nullable=False),
            sa.Column('location', sa.String(), nullable=False),
            sa.Column('job_type', sa.String(), nullable=False),
            sa.Column('salary_min', sa.Float(), nullable=True),
            sa.Column('salary_max', sa.Float(), nullable=True),
            sa.Column('salary_currency', sa.String(), nullable=False),
            sa.Column('min_cgpa', sa.Float(), nullable=True),
            sa.Column('eligible_departments', sa.JSON(), nullable=False),
            sa.Column('eligible_years', sa.JSON(), nullable=False),
            sa.Column('application_deadline', sa.DateTime(timezone=True), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('applications_count', sa.Integer(), nullable=False),
            sa.Column('is_approved', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['recruiter_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_jobs_status_approved', 'jobs', ['status', 'is_approved'], unique=False)
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_recruiter_id'), 'jobs', ['recruiter_id'], unique=False)
        op.create_index(op.f('ix_jobs_title'), 'jobs', ['title'], unique=False)
        op.create_index(op.f('ix_jobs_company'), 'jobs', ['company'], unique=False)
        op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'], unique=False)
        op.create_index(op.f('ix_jobs_is_approved'), 'jobs', ['is_approved'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)

    if not table_exists('applications'):
        op.create_table('applications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('job_id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('cover_letter', sa.Text(), nullable=True),
            sa.Column('resume_url', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('applied_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('interview_details', sa.JSON(), nullable=True),
            sa.Column('feedback', sa.Text(), nullable=True),
            sa.Column('documents', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('job_id', 'student_id', name='uq_application_job_student')
        )
        op.create_index(op.f('ix_applications_id'), 'applications', ['id'], unique=False)
        op.create_index(op.f('ix_applications_job_id'), 'applications', ['job_id'], unique=False)
        op.create_index(op.f('ix_applications_student_id'), 'applications', ['student_id'], unique=False)
        op.create_index(op.f('ix_applications_status'), 'applications', ['status'], unique=False)
        op.create_index(op.f('ix_applications_created_at'), 'applications', ['created_at'], unique=False)

    if not table_exists('interviews'):
        op.create_table('interviews',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('application_id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('recruiter_id', sa.Integer(), nullable=False),
            sa.Column('job_id', sa.Integer(), nullable=False),
            sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=False),
            sa.Column('scheduled_time', sa.String(), nullable=False),
            sa.Column('duration', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('mode', sa.String(), nullable=False),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('meeting_link', sa.String(), nullable=True),
            sa.Column('room_id', sa.String(), nullable=True),
            sa.Column('cancellation_reason', sa.Text(), nullable=True),
            sa.Column('recording', sa.JSON(), nullable=False),
            sa.Column('analysis', sa.JSON(), nullable=True),
            sa.Column('questions', sa.JSON(), nullable=False),
            sa.Column('responses', sa.JSON(), nullable=False),
            sa.Column('participants', sa.JSON(), nullable=False),
            sa.Column('recruiter_notes', sa.Text(), nullable=True),
            sa.Column('result', sa.String(), nullable=False),
            sa.Column('final_feedback', sa.Text(), nullable=True),
            sa.Column('rating', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['recruiter_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('room_id')
        )
        op.create_index('idx_interviews_student_date', 'interviews', ['student_id', 'scheduled_date'], unique=False)
        op.create_index('idx_interviews_recruiter_date', 'interviews', ['recruiter_id', 'scheduled_date'], unique=False)
        op.create_index(op.f('ix_interviews_id'), 'interviews', ['id'], unique=False)
        op.create_index(op.f('ix_interviews_application_id'), 'interviews', ['application_id'], unique=False)
        op.create_index(op.f('ix_interviews_student_id'), 'interviews', ['student_id'], unique=False)
        op.create_index(op.f('ix_interviews_recruiter_id'), 'interviews', ['recruiter_id'], unique=False)
        op.create_index(op.f('ix_interviews_job_id'), 'interviews', ['job_id'], unique=False)
        op.create_index(op.f('ix_interviews_status'), 'interviews', ['status'], unique=False)

    if not table_exists('resumes'):
        op.create_table('resumes',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('personal_info', sa.JSON(), nullable=False),
            sa.Column('education', sa.JSON(), nullable=False),
            sa.Column('experience', sa.JSON(), nullable=False),
            sa.Column('projects', sa.JSON(), nullable=False),
            sa.Column('skills', sa.JSON(), nullable=False),
            sa.Column('certifications', sa.JSON(), nullable=False),
            sa.Column('achievements', sa.JSON(), nullable=False),
            sa.Column('publications', sa.JSON(), nullable=False),
            sa.Column('volunteer', sa.JSON(), nullable=False),
            sa.Column('template', sa.String(), nullable=False),
            sa.Column('theme', sa.JSON(), nullable=False),
            sa.Column('ai_analysis', sa.JSON(), nullable=True),
            sa.Column('source_document', sa.JSON(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('version', sa.Integer(), nullable=False),
            sa.Column('previous_versions', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_resumes_user_active', 'resumes', ['user_id', 'is_active'], unique=False)
        op.create_index(op.f('ix_resumes_id'), 'resumes', ['id'], unique=False)
        op.create_index(op.f('ix_resumes_user_id'), 'resumes', ['user_id'], unique=False)

    if not table_exists('resume_analyses'):
        op.create_table('resume_analyses',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('file_name', sa.String(), nullable=False),
            sa.Column('content_type', sa.String(), nullable=False),
            sa.Column('resume_text', sa.Text(), nullable=False),
            sa.Column('parsed_data', sa.JSON(), nullable=False),
            sa.Column('recommendations', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_resume_analyses_id'), 'resume_analyses', ['id'], unique=False)
        op.create_index(op.f('ix_resume_analyses_student_id'), 'resume_analyses', ['student_id'], unique=False)
        op.create_index(op.f('ix_resume_analyses_created_at'), 'resume_analyses', ['created_at'], unique=False)

    if not table_exists('chats'):
        op.create_table('chats',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('conversation_id', sa.String(), nullable=False),
            sa.Column('topic', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('messages', sa.JSON(), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['student_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_chats_student_created', 'chats', ['student_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_chats_id'), 'chats', ['id'], unique=False)
        op.create_index(op.f('ix_chats_student_id'), 'chats', ['student_id'], unique=False)
        op.create_index(op.f('ix_chats_conversation_id'), 'chats', ['conversation_id'], unique=True)


def downgrade() -> None:
    for table in ('chats', 'resume_analyses', 'resumes', 'interviews', 'applications', 'jobs', 'users'):
        if table_exists(table):
            op.drop_table(table)
