"""
Pydantic schemas for interview endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from app.db.models.interview import InterviewMode, InterviewResult
from app.schemas.analysis import Analysis


class InterviewSchedule(BaseModel):
    """Recruiter request to schedule an interview for an application."""
    application_id: int
    scheduled_date: datetime
    scheduled_time: str = Field(..., min_length=1, description="e.g. 10:30")
    duration: int = Field(default=30, ge=5, le=480, description="Minutes")
    mode: InterviewMode
    location: Optional[str] = Field(None, description="Required for offline interviews")
    notes: Optional[str] = None


class QuestionCreate(BaseModel):
    question: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, description="technical / behavioral / situational")


class ResponseCreate(BaseModel):
    response: str = Field(..., min_length=1)
    question_index: Optional[int] = Field(None, ge=0, description="Index into the questions list")
    duration: Optional[float] = Field(None, ge=0, description="Seconds")
    sentiment: Optional[str] = None
    score: Optional[float] = Field(None, ge=0, le=100)


class NotesUpdate(BaseModel):
    notes: str


class DecisionSubmit(BaseModel):
    result: InterviewResult
    final_feedback: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class AnalysisSubmit(BaseModel):
    analysis: Analysis


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class InterviewResponse(BaseModel):
    id: int
    application_id: int
    student_id: int
    recruiter_id: int
    job_id: int
    scheduled_date: datetime
    scheduled_time: str
    duration: int
    status: str
    mode: str
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    room_id: Optional[str] = None
    cancellation_reason: Optional[str] = None
    recording: dict = Field(default_factory=dict)
    analysis: Optional[Analysis] = None
    questions: List[dict] = Field(default_factory=list)
    responses: List[dict] = Field(default_factory=list)
    participants: List[dict] = Field(default_factory=list)
    recruiter_notes: Optional[str] = None
    result: str
    final_feedback: Optional[str] = None
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
