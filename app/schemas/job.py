"""
Pydantic schemas for job endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from app.db.models.job import JobType, JobStatus


class JobBase(BaseModel):
    """Base job schema with common fields."""
    title: str = Field(..., min_length=1, max_length=255, description="Job title")
    company: str = Field(..., min_length=1, max_length=255, description="Company name")
    description: str = Field(..., min_length=1, description="Job description")
    requirements: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    location: str = Field(..., min_length=1, description="Job location")
    job_type: JobType = Field(default=JobType.FULL_TIME)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    salary_currency: str = Field(default="INR", max_length=8)
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    eligible_departments: List[str] = Field(default_factory=list)
    eligible_years: List[int] = Field(default_factory=list)
    application_deadline: datetime = Field(..., description="Last date to apply")


class JobCreate(JobBase):
    """Schema for creating a new job."""

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min cannot exceed salary_max")
        return self


class JobUpdate(BaseModel):
    """Fields a recruiter may patch. Any edit clears admin approval."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    location: Optional[str] = Field(None, min_length=1)
    job_type: Optional[JobType] = None
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    salary_currency: Optional[str] = Field(None, max_length=8)
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    eligible_departments: Optional[List[str]] = None
    eligible_years: Optional[List[int]] = None
    application_deadline: Optional[datetime] = None
    status: Optional[JobStatus] = None


class JobResponse(BaseModel):
    """Schema for job response."""
    id: int
    recruiter_id: int
    title: str
    company: str
    description: str
    requirements: List[str]
    skills: List[str]
    location: str
    job_type: str
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: str
    min_cgpa: Optional[float] = None
    eligible_departments: List[str]
    eligible_years: List[int]
    application_deadline: datetime
    status: str
    applications_count: int
    is_approved: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobDetailResponse(BaseModel):
    """Job as seen by a student, with whether they already applied."""
    job: JobResponse
    has_applied: bool = False


class JobApprovalUpdate(BaseModel):
    is_approved: bool
