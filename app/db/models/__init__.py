"""
Database models module.

Imports every model so it is registered with SQLAlchemy's Base.metadata before
table creation and alembic autogenerate.
"""
from app.db.models.user import User, UserRole
from app.db.models.job import Job, JobStatus, JobType
from app.db.models.application import Application, ApplicationStatus
from app.db.models.interview import Interview, InterviewStatus, InterviewMode, InterviewResult
from app.db.models.resume import Resume
from app.db.models.resume_analysis import ResumeAnalysis
from app.db.models.chat import Chat, ChatSender, ChatMessageType

__all__ = [
    "User",
    "UserRole",
    "Job",
    "JobStatus",
    "JobType",
    "Application",
    "ApplicationStatus",
    "Interview",
    "InterviewStatus",
    "InterviewMode",
    "InterviewResult",
    "Resume",
    "ResumeAnalysis",
    "Chat",
    "ChatSender",
    "ChatMessageType",
]
