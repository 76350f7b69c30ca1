"""
Interview model: one scheduled or held session for an application.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class InterviewStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    MISSED = "missed"


class InterviewMode(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class InterviewResult(str, enum.Enum):
    PENDING = "pending"
    SELECTED = "selected"
    REJECTED = "rejected"
    ON_HOLD = "on-hold"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recruiter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    # Scheduling
    scheduled_date = Column(DateTime(timezone=True), nullable=False)
    scheduled_time = Column(String, nullable=False)
    duration = Column(Integer, nullable=False, default=30)  # minutes
    status = Column(String, nullable=False, default=InterviewStatus.SCHEDULED.value, index=True)
    mode = Column(String, nullable=False)
    location = Column(String, nullable=True)  # offline only
    meeting_link = Column(String, nullable=True)  # online only
    room_id = Column(String, unique=True, nullable=True)  # online only
    cancellation_reason = Column(Text, nullable=True)

    # {start_time, end_time} as ISO strings
    recording = Column(JSON, nullable=False, default=dict)
    analysis = Column(JSON, nullable=True)

    # Append-only logs
    questions = Column(JSON, nullable=False, default=list)  # [{question, asked_at, category}]
    responses = Column(JSON, nullable=False, default=list)  # [{question_index, response, duration, timestamp, sentiment, score}]
    participants = Column(JSON, nullable=False, default=list)  # [{user_id, joined_at, left_at, role}]
    recruiter_notes = Column(Text, nullable=True)

    # Final decision
    result = Column(String, nullable=False, default=InterviewResult.PENDING.value)
    final_feedback = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    application = relationship("Application", backref="interviews")
    job = relationship("Job")
    student = relationship("User", foreign_keys=[student_id])
    recruiter = relationship("User", foreign_keys=[recruiter_id])

    __table_args__ = (
        Index("idx_interviews_student_date", "student_id", "scheduled_date"),
        Index("idx_interviews_recruiter_date", "recruiter_id", "scheduled_date"),
    )

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.student_id, self.recruiter_id)

    def __repr__(self):
        return f"<Interview(id={self.id}, application_id={self.application_id}, status='{self.status}')>"
