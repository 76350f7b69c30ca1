"""
Admin endpoints: user and job moderation, platform stats, placement report.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_roles
from app.db.models.application import ApplicationStatus
from app.db.models.job import JobStatus
from app.db.models.user import User
from app.schemas.application import ApplicationDetailResponse
from app.schemas.auth import UserResponse, UserApprovalUpdate, UserStatusUpdate
from app.schemas.dashboard import AdminStats, PlacementReport
from app.schemas.job import JobResponse, JobApprovalUpdate
from app.services import application_service, dashboard_service, job_service, user_service

current_admin = require_roles("admin")

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(current_admin)])


@router.get("/dashboard/stats", response_model=AdminStats)
def stats(db: Session = Depends(get_db)):
    return dashboard_service.admin_stats(db)


# ============================================
# Users
# ============================================

@router.get("/users", response_model=List[UserResponse])
def list_users(
    role: Optional[str] = Query(None, pattern="^(student|recruiter|admin)$"),
    is_approved: Optional[bool] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return user_service.list_users(db, role=role, is_approved=is_approved, search=search)


@router.put("/users/{user_id}/approval", response_model=UserResponse)
def set_user_approval(user_id: int, data: UserApprovalUpdate, db: Session = Depends(get_db)):
    return user_service.set_approval(db, user_id, data.is_approved)


@router.put("/users/{user_id}/status", response_model=UserResponse)
def set_user_status(user_id: int, data: UserStatusUpdate, db: Session = Depends(get_db)):
    return user_service.set_active(db, user_id, data.is_active)


@router.delete("/users/{user_id}")
def delete_user(user_id: int, admin: User = Depends(current_admin), db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id, admin)
    return {"message": "User deleted successfully"}


# ============================================
# Jobs
# ============================================

@router.get("/jobs", response_model=List[JobResponse])
def list_jobs(
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    is_approved: Optional[bool] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return job_service.list_all(
        db,
        status=status_filter.value if status_filter else None,
        is_approved=is_approved,
        search=search,
    )


@router.put("/jobs/{job_id}/approval", response_model=JobResponse)
def set_job_approval(job_id: int, data: JobApprovalUpdate, db: Session = Depends(get_db)):
    return job_service.set_approval(db, job_id, data.is_approved)


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, db: Session = Depends(get_db)):
    job_service.delete_job(db, job_id)
    return {"message": "Job deleted successfully"}


# ============================================
# Applications & reports
# ============================================

@router.get("/applications", response_model=List[ApplicationDetailResponse])
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    return application_service.list_all(db, status_filter.value if status_filter else None)


@router.get("/reports/placements", response_model=PlacementReport)
def placements(db: Session = Depends(get_db)):
    return dashboard_service.placement_report(db)
