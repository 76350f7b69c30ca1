"""
Dashboard counters and the placement report.
"""
import logging

from sqlalchemy.orm import Session

from app.db.models.application import Application, ApplicationStatus
from app.db.models.job import Job, JobStatus
from app.db.models.user import User, UserRole
from app.schemas.dashboard import (
    StudentStats,
    RecruiterStats,
    AdminStats,
    PlacementRecord,
    PlacementReport,
)

logger = logging.getLogger(__name__)


def _count(query) -> int:
    return query.count()


def student_stats(db: Session, student: User) -> StudentStats:
    mine = db.query(Application).filter(Application.student_id == student.id)
    return StudentStats(
        total_applications=_count(mine),
        pending_applications=_count(mine.filter(Application.status == ApplicationStatus.PENDING.value)),
        shortlisted_applications=_count(mine.filter(Application.status == ApplicationStatus.SHORTLISTED.value)),
        selected_applications=_count(mine.filter(Application.status == ApplicationStatus.SELECTED.value)),
        available_jobs=_count(db.query(Job).filter(
            Job.status == JobStatus.ACTIVE.value,
            Job.is_approved.is_(True),
        )),
    )


def recruiter_stats(db: Session, recruiter: User) -> RecruiterStats:
    jobs = db.query(Job).filter(Job.recruiter_id == recruiter.id)
    applications = (
        db.query(Application)
        .join(Job, Application.job_id == Job.id)
        .filter(Job.recruiter_id == recruiter.id)
    )
    return RecruiterStats(
        total_jobs=_count(jobs),
        active_jobs=_count(jobs.filter(Job.status == JobStatus.ACTIVE.value, Job.is_approved.is_(True))),
        pending_approval_jobs=_count(jobs.filter(Job.is_approved.is_(False))),
        total_applications=_count(applications),
        pending_applications=_count(applications.filter(Application.status == ApplicationStatus.PENDING.value)),
        shortlisted_applications=_count(applications.filter(Application.status == ApplicationStatus.SHORTLISTED.value)),
        selected_applications=_count(applications.filter(Application.status == ApplicationStatus.SELECTED.value)),
    )


def admin_stats(db: Session) -> AdminStats:
    return AdminStats(
        total_students=_count(db.query(User).filter(User.role == UserRole.STUDENT.value)),
        total_recruiters=_count(db.query(User).filter(User.role == UserRole.RECRUITER.value)),
        total_jobs=_count(db.query(Job)),
        active_jobs=_count(db.query(Job).filter(Job.status == JobStatus.ACTIVE.value)),
        total_applications=_count(db.query(Application)),
        pending_recruiters=_count(db.query(User).filter(
            User.role == UserRole.RECRUITER.value,
            User.is_approved.is_(False),
        )),
        pending_jobs=_count(db.query(Job).filter(Job.is_approved.is_(False))),
    )


def placement_report(db: Session) -> PlacementReport:
    rows = (
        db.query(Application, User, Job)
        .join(User, Application.student_id == User.id)
        .join(Job, Application.job_id == Job.id)
        .filter(Application.status == ApplicationStatus.SELECTED.value)
        .order_by(Application.updated_at.desc(), Application.id.desc())
        .all()
    )
    placements = [
        PlacementRecord(
            application_id=application.id,
            student_id=student.id,
            student_name=student.name,
            student_email=student.email,
            department=(student.student_profile or {}).get("department"),
            job_id=job.id,
            job_title=job.title,
            company=job.company,
            salary_max=job.salary_max,
            selected_at=application.updated_at,
        )
        for application, student, job in rows
    ]
    logger.info(f"Placement report generated: placements={len(placements)}")
    return PlacementReport(total_placements=len(placements), placements=placements)
