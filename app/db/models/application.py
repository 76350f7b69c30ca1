"""
Application model: a student's bid for a job.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    SELECTED = "selected"
    REJECTED = "rejected"
    ON_HOLD = "on-hold"


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    cover_letter = Column(Text, nullable=True)
    resume_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    applied_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Snapshot of the scheduled interview: date, time, mode, location, meeting_link, notes
    interview_details = Column(JSON, nullable=True)
    feedback = Column(Text, nullable=True)
    documents = Column(JSON, nullable=False, default=list)  # [{name, url}]

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    job = relationship("Job", backref="applications")
    student = relationship("User", backref="applications")

    __table_args__ = (
        UniqueConstraint("job_id", "student_id", name="uq_application_job_student"),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, job_id={self.job_id}, student_id={self.student_id}, status='{self.status}')>"
