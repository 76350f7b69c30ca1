"""
Pydantic schemas for application endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from app.db.models.application import ApplicationStatus
from app.db.models.interview import InterviewMode


class ApplicationDocument(BaseModel):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class ApplicationCreate(BaseModel):
    """Student's application to a job."""
    cover_letter: Optional[str] = Field(None, description="Cover letter text")
    resume_url: Optional[str] = Field(None, description="Link to the resume used")
    documents: List[ApplicationDocument] = Field(default_factory=list)


class InterviewDetails(BaseModel):
    """Snapshot of interview scheduling embedded on an application."""
    date: datetime
    time: str = Field(..., min_length=1)
    mode: InterviewMode
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    """Recruiter status change. Allowed targets depend on the current status."""
    status: ApplicationStatus
    feedback: Optional[str] = None


class BulkShortlistRequest(BaseModel):
    application_ids: List[int] = Field(..., min_length=1)


class BulkShortlistResponse(BaseModel):
    shortlisted: List[int]
    skipped: List[int]


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    student_id: int
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    status: str
    applied_at: Optional[datetime] = None
    interview_details: Optional[dict] = None
    feedback: Optional[str] = None
    documents: List[dict] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationJobSummary(BaseModel):
    id: int
    title: str
    company: str
    location: str

    class Config:
        from_attributes = True


class ApplicationStudentSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    student_profile: Optional[dict] = None

    class Config:
        from_attributes = True


class ApplicationDetailResponse(ApplicationResponse):
    """Application with the job and applicant it links."""
    job: Optional[ApplicationJobSummary] = None
    student: Optional[ApplicationStudentSummary] = None
