"""
Student endpoints: browse and apply to jobs, track applications.

Every route requires an approved student account.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_approved_role
from app.db.models.application import ApplicationStatus
from app.db.models.job import JobType
from app.db.models.user import User
from app.schemas.application import ApplicationCreate, ApplicationResponse, ApplicationDetailResponse
from app.schemas.dashboard import StudentStats
from app.schemas.job import JobResponse, JobDetailResponse
from app.services import application_service, dashboard_service, job_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student", tags=["Student"])

current_student = require_approved_role("student")


@router.get("/dashboard/stats", response_model=StudentStats)
def stats(student: User = Depends(current_student), db: Session = Depends(get_db)):
    return dashboard_service.student_stats(db, student)


@router.get("/jobs", response_model=List[JobResponse])
def list_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[JobType] = None,
    min_salary: Optional[float] = Query(None, ge=0),
    student: User = Depends(current_student),
    db: Session = Depends(get_db)
):
    return job_service.list_visible(
        db,
        search=search,
        location=location,
        job_type=job_type.value if job_type else None,
        min_salary=min_salary,
    )


@router.get("/jobs/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    job = job_service.get_visible(db, job_id)
    return JobDetailResponse(
        job=JobResponse.model_validate(job),
        has_applied=job_service.has_applied(db, job.id, student.id),
    )


@router.post("/jobs/{job_id}/apply", status_code=status.HTTP_201_CREATED, response_model=ApplicationResponse)
def apply(
    job_id: int,
    data: ApplicationCreate,
    student: User = Depends(current_student),
    db: Session = Depends(get_db)
):
    return application_service.apply(db, job_id, student, data)


@router.get("/applications", response_model=List[ApplicationDetailResponse])
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    student: User = Depends(current_student),
    db: Session = Depends(get_db)
):
    return application_service.list_mine(db, student, status_filter.value if status_filter else None)


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
def get_application(application_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    return application_service.get_mine(db, student, application_id)


@router.delete("/applications/{application_id}")
def withdraw(application_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    application_service.withdraw(db, student, application_id)
    return {"message": "Application withdrawn successfully"}
