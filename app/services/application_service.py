"""
Application lifecycle.

States: pending, shortlisted, interview, selected, rejected, on-hold.

Recruiter status updates go through ``STATUS_TRANSITIONS``. ``interview`` is
entered only through interview details or scheduling, and ``selected`` only
through an interview decision (see interview_service). Bulk shortlist is an
administrative override that skips the table.
"""
import logging
from typing import Optional, List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    InvalidStateError,
)
from app.db.models.application import Application, ApplicationStatus
from app.db.models.interview import InterviewMode
from app.db.models.job import Job, JobStatus
from app.db.models.user import User, UserRole
from app.schemas.application import ApplicationCreate, ApplicationStatusUpdate, InterviewDetails
from app.services.common import utcnow, to_naive_utc
from app.services.job_service import adjust_applications_count

logger = logging.getLogger(__name__)

# target status -> statuses it may be reached from via update_status
STATUS_TRANSITIONS = {
    ApplicationStatus.SHORTLISTED.value: {
        ApplicationStatus.PENDING.value,
        ApplicationStatus.SHORTLISTED.value,
    },
    ApplicationStatus.REJECTED.value: {
        ApplicationStatus.PENDING.value,
        ApplicationStatus.SHORTLISTED.value,
        ApplicationStatus.INTERVIEW.value,
    },
}

# statuses from which interview details can be set or an interview scheduled
INTERVIEW_READY_STATUSES = {
    ApplicationStatus.SHORTLISTED.value,
    ApplicationStatus.INTERVIEW.value,
}


def can_transition(current: str, target: str) -> bool:
    return current in STATUS_TRANSITIONS.get(target, set())


def require_offline_location(mode: InterviewMode, location: Optional[str]) -> None:
    if mode == InterviewMode.OFFLINE and not (location and location.strip()):
        raise ValidationError("Location is required for offline interviews")


def interview_snapshot(details: InterviewDetails) -> dict:
    """JSON-safe snapshot stored on Application.interview_details."""
    return {
        "date": to_naive_utc(details.date).isoformat(),
        "time": details.time,
        "mode": details.mode.value,
        "location": details.location,
        "meeting_link": details.meeting_link,
        "notes": details.notes,
    }


# ============================================
# Student
# ============================================

def apply(db: Session, job_id: int, student: User, data: ApplicationCreate) -> Application:
    """
    Apply to a job.

    Raises:
        NotFoundError: job does not exist or is not approved
        InvalidStateError: job not active or deadline passed
        ValidationError: the student already applied
    """
    job = db.get(Job, job_id)
    if not job or not job.is_approved:
        raise NotFoundError("Job not found")
    if job.status != JobStatus.ACTIVE.value:
        raise InvalidStateError("Job is not accepting applications")
    if to_naive_utc(job.application_deadline) < utcnow():
        raise InvalidStateError("Application deadline has passed")

    existing = db.query(Application.id).filter(
        Application.job_id == job_id,
        Application.student_id == student.id,
    ).first()
    if existing:
        raise ValidationError("Already applied to this job")

    application = Application(
        job_id=job_id,
        student_id=student.id,
        cover_letter=data.cover_letter,
        resume_url=data.resume_url,
        documents=[doc.model_dump() for doc in data.documents],
        status=ApplicationStatus.PENDING.value,
        applied_at=utcnow(),
    )
    db.add(application)
    try:
        db.flush()
    except IntegrityError as e:
        # Concurrent duplicate caught by uq_application_job_student
        db.rollback()
        raise ValidationError("Already applied to this job") from e

    adjust_applications_count(db, job_id, 1)
    db.commit()
    db.refresh(application)

    logger.info(f"Application created: application_id={application.id}, job_id={job_id}, student_id={student.id}")
    return application


def list_mine(db: Session, student: User, status: Optional[str] = None) -> List[Application]:
    query = db.query(Application).filter(Application.student_id == student.id)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.applied_at.desc(), Application.id.desc()).all()


def get_mine(db: Session, student: User, application_id: int) -> Application:
    application = db.query(Application).filter(
        Application.id == application_id,
        Application.student_id == student.id,
    ).first()
    if not application:
        raise NotFoundError("Application not found")
    return application


def withdraw(db: Session, student: User, application_id: int) -> None:
    """
    Withdraw a pending application.

    Raises:
        NotFoundError: no such application for this student
        InvalidStateError: application is no longer pending
    """
    application = get_mine(db, student, application_id)
    if application.status != ApplicationStatus.PENDING.value:
        raise InvalidStateError(f"Cannot withdraw an application that is {application.status}")

    job_id = application.job_id
    db.delete(application)
    adjust_applications_count(db, job_id, -1)
    db.commit()
    logger.info(f"Application withdrawn: application_id={application_id}, job_id={job_id}")


# ============================================
# Recruiter
# ============================================

def get_for_recruiter(db: Session, recruiter: User, application_id: int) -> Application:
    """
    Raises:
        NotFoundError: no such application
        PermissionDeniedError: application is for another recruiter's job
    """
    application = db.get(Application, application_id)
    if not application:
        raise NotFoundError("Application not found")
    if application.job.recruiter_id != recruiter.id:
        raise PermissionDeniedError("Not authorized to manage this application")
    return application


def list_for_job(db: Session, recruiter: User, job_id: int, status: Optional[str] = None) -> List[Application]:
    from app.services.job_service import get_own

    get_own(db, recruiter, job_id)
    query = db.query(Application).filter(Application.job_id == job_id)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.applied_at.desc(), Application.id.desc()).all()


def list_for_recruiter(db: Session, recruiter: User, status: Optional[str] = None) -> List[Application]:
    query = db.query(Application).join(Job, Application.job_id == Job.id).filter(Job.recruiter_id == recruiter.id)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.applied_at.desc(), Application.id.desc()).all()


def update_status(
    db: Session,
    recruiter: User,
    application_id: int,
    update: ApplicationStatusUpdate,
) -> Application:
    """
    Move an application along STATUS_TRANSITIONS.

    Raises:
        InvalidStateError: target not reachable from the current status
    """
    application = get_for_recruiter(db, recruiter, application_id)
    target = update.status.value
    if not can_transition(application.status, target):
        raise InvalidStateError(f"Cannot change application status from {application.status} to {target}")

    previous = application.status
    application.status = target
    if update.feedback is not None:
        application.feedback = update.feedback
    db.commit()
    db.refresh(application)

    logger.info(f"Application status changed: application_id={application.id}, {previous} -> {target}")
    return application


def set_interview_details(
    db: Session,
    recruiter: User,
    application_id: int,
    details: InterviewDetails,
) -> Application:
    require_offline_location(details.mode, details.location)
    application = get_for_recruiter(db, recruiter, application_id)
    if application.status not in INTERVIEW_READY_STATUSES:
        raise InvalidStateError(f"Cannot set interview details for an application that is {application.status}")

    application.status = ApplicationStatus.INTERVIEW.value
    application.interview_details = interview_snapshot(details)
    db.commit()
    db.refresh(application)

    logger.info(f"Interview details set: application_id={application.id}, mode={details.mode.value}")
    return application


def bulk_shortlist(db: Session, recruiter: User, application_ids: List[int]) -> Tuple[List[int], List[int]]:
    """
    Shortlist every listed application on the recruiter's jobs regardless of status.

    Returns:
        (shortlisted ids, skipped ids)
    """
    requested = list(dict.fromkeys(application_ids))
    owned = (
        db.query(Application)
        .join(Job, Application.job_id == Job.id)
        .filter(Application.id.in_(requested), Job.recruiter_id == recruiter.id)
        .all()
    )
    for application in owned:
        application.status = ApplicationStatus.SHORTLISTED.value
    db.commit()

    shortlisted = sorted(application.id for application in owned)
    skipped = [application_id for application_id in requested if application_id not in set(shortlisted)]
    logger.info(f"Bulk shortlist: recruiter_id={recruiter.id}, shortlisted={len(shortlisted)}, skipped={len(skipped)}")
    return shortlisted, skipped


# ============================================
# Admin / shared
# ============================================

def list_all(db: Session, status: Optional[str] = None) -> List[Application]:
    query = db.query(Application)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.applied_at.desc(), Application.id.desc()).all()


def get_visible_to(db: Session, user: User, application_id: int) -> Application:
    """Students see their own applications, recruiters those on their jobs, admins all."""
    application = db.get(Application, application_id)
    if not application:
        raise NotFoundError("Application not found")
    if user.role == UserRole.ADMIN.value:
        return application
    if user.role == UserRole.STUDENT.value and application.student_id == user.id:
        return application
    if user.role == UserRole.RECRUITER.value and application.job.recruiter_id == user.id:
        return application
    raise PermissionDeniedError("Not authorized to view this application")
