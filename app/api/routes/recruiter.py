"""
Recruiter endpoints: manage job postings and the applications they receive.

Every route requires an approved recruiter account; jobs and applications are
scoped to the calling recruiter.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_approved_role
from app.db.models.application import ApplicationStatus
from app.db.models.job import JobStatus
from app.db.models.user import User
from app.schemas.application import (
    ApplicationResponse,
    ApplicationDetailResponse,
    ApplicationStatusUpdate,
    BulkShortlistRequest,
    BulkShortlistResponse,
    InterviewDetails,
)
from app.schemas.dashboard import RecruiterStats
from app.schemas.job import JobCreate, JobUpdate, JobResponse
from app.services import application_service, dashboard_service, job_service

router = APIRouter(prefix="/recruiter", tags=["Recruiter"])

current_recruiter = require_approved_role("recruiter")


@router.get("/dashboard/stats", response_model=RecruiterStats)
def stats(recruiter: User = Depends(current_recruiter), db: Session = Depends(get_db)):
    return dashboard_service.recruiter_stats(db, recruiter)


# ============================================
# Jobs
# ============================================

@router.post("/jobs", status_code=status.HTTP_201_CREATED, response_model=JobResponse)
def create_job(data: JobCreate, recruiter: User = Depends(current_recruiter), db: Session = Depends(get_db)):
    return job_service.create_job(db, recruiter, data)


@router.get("/jobs", response_model=List[JobResponse])
def list_jobs(
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    return job_service.list_own(db, recruiter, status_filter.value if status_filter else None, search)


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(job_id: int, recruiter: User = Depends(current_recruiter), db: Session = Depends(get_db)):
    return job_service.get_own(db, recruiter, job_id)


@router.put("/jobs/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    patch: JobUpdate,
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    return job_service.update_own(db, recruiter, job_id, patch)


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, recruiter: User = Depends(current_recruiter), db: Session = Depends(get_db)):
    job_service.delete_own(db, recruiter, job_id)
    return {"message": "Job deleted successfully"}


@router.put("/jobs/{job_id}/close", response_model=JobResponse)
def close_job(job_id: int, recruiter: User = Depends(current_recruiter), db: Session = Depends(get_db)):
    return job_service.close_own(db, recruiter, job_id)


@router.get("/jobs/{job_id}/applications", response_model=List[ApplicationDetailResponse])
def list_job_applications(
    job_id: int,
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    return application_service.list_for_job(db, recruiter, job_id, status_filter.value if status_filter else None)


# ============================================
# Applications
# ============================================

@router.get("/applications", response_model=List[ApplicationDetailResponse])
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    return application_service.list_for_recruiter(db, recruiter, status_filter.value if status_filter else None)


@router.post("/applications/bulk-shortlist", response_model=BulkShortlistResponse)
def bulk_shortlist(
    data: BulkShortlistRequest,
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    shortlisted, skipped = application_service.bulk_shortlist(db, recruiter, data.application_ids)
    return BulkShortlistResponse(shortlisted=shortlisted, skipped=skipped)


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
def get_application(application_id: int, recruiter: User = Depends(current_recruiter), db: Session = Depends(get_db)):
    return application_service.get_for_recruiter(db, recruiter, application_id)


@router.put("/applications/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    return application_service.update_status(db, recruiter, application_id, update)


@router.put("/applications/{application_id}/interview", response_model=ApplicationResponse)
def set_interview_details(
    application_id: int,
    details: InterviewDetails,
    recruiter: User = Depends(current_recruiter),
    db: Session = Depends(get_db)
):
    return application_service.set_interview_details(db, recruiter, application_id, details)
