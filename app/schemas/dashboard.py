"""
Pydantic schemas for dashboard statistics and reports.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel


class StudentStats(BaseModel):
    total_applications: int
    pending_applications: int
    shortlisted_applications: int
    selected_applications: int
    available_jobs: int


class RecruiterStats(BaseModel):
    total_jobs: int
    active_jobs: int
    pending_approval_jobs: int
    total_applications: int
    pending_applications: int
    shortlisted_applications: int
    selected_applications: int


class AdminStats(BaseModel):
    total_students: int
    total_recruiters: int
    total_jobs: int
    active_jobs: int
    total_applications: int
    pending_recruiters: int
    pending_jobs: int


class PlacementRecord(BaseModel):
    application_id: int
    student_id: int
    student_name: str
    student_email: str
    department: Optional[str] = None
    job_id: int
    job_title: str
    company: str
    salary_max: Optional[float] = None
    selected_at: Optional[datetime] = None


class PlacementReport(BaseModel):
    total_placements: int
    placements: List[PlacementRecord]
