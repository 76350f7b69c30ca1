"""
Job posting model.

A recruiter-authored posting students browse and apply to. Only postings that
are both active and admin-approved are visible to students.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class JobType(str, enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    INTERNSHIP = "internship"
    CONTRACT = "contract"


class JobStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    recruiter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Posting details
    title = Column(String, nullable=False, index=True)
    company = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    requirements = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    location = Column(String, nullable=False)
    job_type = Column(String, nullable=False, default=JobType.FULL_TIME.value)

    # Salary range
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    salary_currency = Column(String, nullable=False, default="INR")

    # Eligibility filter
    min_cgpa = Column(Float, nullable=True)
    eligible_departments = Column(JSON, nullable=False, default=list)
    eligible_years = Column(JSON, nullable=False, default=list)

    application_deadline = Column(DateTime(timezone=True), nullable=False)

    # Lifecycle
    status = Column(String, nullable=False, default=JobStatus.ACTIVE.value, index=True)
    applications_count = Column(Integer, nullable=False, default=0)
    is_approved = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    recruiter = relationship("User", backref="jobs")

    __table_args__ = (
        Index("idx_jobs_status_approved", "status", "is_approved"),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, company='{self.company}', title='{self.title}', status='{self.status}')>"
