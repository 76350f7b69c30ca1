"""
ResumeAnalysis model: one AI parse of an uploaded resume file.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class ResumeAnalysis(Base):
    __tablename__ = "resume_analyses"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    file_name = Column(String, nullable=False)
    content_type = Column(String, nullable=False)
    resume_text = Column(Text, nullable=False)

    parsed_data = Column(JSON, nullable=False)
    recommendations = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    student = relationship("User", backref="resume_analyses")

    def __repr__(self):
        return f"<ResumeAnalysis(id={self.id}, student_id={self.student_id}, file='{self.file_name}')>"
