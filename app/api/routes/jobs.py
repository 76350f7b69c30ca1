"""
Public job board: active, approved postings only. No authentication required.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db
from app.db.models.job import JobType
from app.schemas.job import JobResponse
from app.services import job_service

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=List[JobResponse])
def list_jobs(
    search: Optional[str] = Query(None, description="Matches title, company or description"),
    location: Optional[str] = None,
    job_type: Optional[JobType] = None,
    company: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return job_service.list_visible(
        db,
        search=search,
        location=location,
        job_type=job_type.value if job_type else None,
        company=company,
    )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    return job_service.get_visible(db, job_id)
