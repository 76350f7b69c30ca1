"""
Resume model: a student's structured, versioned resume.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base

# Section columns captured in every version snapshot
RESUME_SECTIONS = (
    "personal_info",
    "education",
    "experience",
    "projects",
    "skills",
    "certifications",
    "achievements",
    "publications",
    "volunteer",
    "template",
    "theme",
)


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False, default="My Resume")

    # Structured content
    personal_info = Column(JSON, nullable=False, default=dict)
    education = Column(JSON, nullable=False, default=list)
    experience = Column(JSON, nullable=False, default=list)
    projects = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=dict)  # technical, soft, languages, tools, frameworks
    certifications = Column(JSON, nullable=False, default=list)
    achievements = Column(JSON, nullable=False, default=list)
    publications = Column(JSON, nullable=False, default=list)
    volunteer = Column(JSON, nullable=False, default=list)
    template = Column(String, nullable=False, default="professional")
    theme = Column(JSON, nullable=False, default=dict)

    # ATS score, strengths, weaknesses, suggestions, keyword matches, rating, last_analyzed
    ai_analysis = Column(JSON, nullable=True)

    # {file_name, uploaded_at, parsed_successfully} when built from an uploaded file
    source_document = Column(JSON, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    # Version control
    version = Column(Integer, nullable=False, default=1)
    previous_versions = Column(JSON, nullable=False, default=list)  # [{version_number, saved_at, data}]

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", backref="resumes")

    __table_args__ = (
        Index("idx_resumes_user_active", "user_id", "is_active"),
    )

    def snapshot(self) -> dict:
        """Section data as stored, for the version history."""
        data = {section: getattr(self, section) for section in RESUME_SECTIONS}
        data["title"] = self.title
        data["version"] = self.version
        return data

    def __repr__(self):
        return f"<Resume(id={self.id}, user_id={self.user_id}, version={self.version})>"
