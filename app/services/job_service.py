"""
Job catalog: student-visible browsing, recruiter CRUD and admin moderation.

A job is visible to students only while it is both ``active`` and approved.
``applications_count`` is only ever changed through ``adjust_applications_count``,
inside the transaction that inserts or deletes the application.
"""
import logging
from typing import Optional, List

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.core.config import AUTO_APPROVE_JOBS
from app.core.errors import NotFoundError, PermissionDeniedError
from app.db.models.application import Application
from app.db.models.interview import Interview
from app.db.models.job import Job, JobStatus
from app.db.models.user import User
from app.schemas.job import JobCreate, JobUpdate
from app.services.common import like_pattern, to_naive_utc

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50

# Fields a recruiter may patch; anything else in a request is ignored by the schema
PATCHABLE_FIELDS = (
    "title",
    "company",
    "description",
    "requirements",
    "skills",
    "location",
    "job_type",
    "salary_min",
    "salary_max",
    "salary_currency",
    "min_cgpa",
    "eligible_departments",
    "eligible_years",
    "application_deadline",
    "status",
)


def _visible(query):
    return query.filter(Job.status == JobStatus.ACTIVE.value, Job.is_approved.is_(True))


def _search(query, search: Optional[str]):
    if search:
        pattern = like_pattern(search)
        query = query.filter(or_(
            Job.title.ilike(pattern),
            Job.company.ilike(pattern),
            Job.description.ilike(pattern),
        ))
    return query


def adjust_applications_count(db: Session, job_id: int, delta: int) -> None:
    """Atomic ``count = count + delta`` in the caller's transaction."""
    db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values(applications_count=Job.applications_count + delta)
        .execution_options(synchronize_session=False)
    )


# ============================================
# Student / public browsing
# ============================================

def list_visible(
    db: Session,
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[str] = None,
    company: Optional[str] = None,
    min_salary: Optional[float] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> List[Job]:
    query = _search(_visible(db.query(Job)), search)
    if location:
        query = query.filter(Job.location.ilike(like_pattern(location)))
    if job_type:
        query = query.filter(Job.job_type == job_type)
    if company:
        query = query.filter(Job.company.ilike(like_pattern(company)))
    if min_salary is not None:
        query = query.filter(Job.salary_min >= min_salary)
    return query.order_by(Job.created_at.desc(), Job.id.desc()).limit(limit).all()


def get_visible(db: Session, job_id: int) -> Job:
    job = _visible(db.query(Job)).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def has_applied(db: Session, job_id: int, student_id: int) -> bool:
    return db.query(Application.id).filter(
        Application.job_id == job_id,
        Application.student_id == student_id,
    ).first() is not None


# ============================================
# Recruiter
# ============================================

def create_job(db: Session, recruiter: User, data: JobCreate) -> Job:
    payload = data.model_dump()
    payload["job_type"] = data.job_type.value
    payload["application_deadline"] = to_naive_utc(data.application_deadline)

    job = Job(
        recruiter_id=recruiter.id,
        status=JobStatus.ACTIVE.value,
        is_approved=AUTO_APPROVE_JOBS,
        applications_count=0,
        **payload,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info(f"Job created: job_id={job.id}, recruiter_id={recruiter.id}, approved={job.is_approved}")
    return job


def list_own(
    db: Session,
    recruiter: User,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Job]:
    query = _search(db.query(Job).filter(Job.recruiter_id == recruiter.id), search)
    if status:
        query = query.filter(Job.status == status)
    return query.order_by(Job.created_at.desc(), Job.id.desc()).all()


def get_own(db: Session, recruiter: User, job_id: int) -> Job:
    """
    Raises:
        NotFoundError: no such job
        PermissionDeniedError: job belongs to another recruiter
    """
    job = db.get(Job, job_id)
    if not job:
        raise NotFoundError("Job not found")
    if job.recruiter_id != recruiter.id:
        raise PermissionDeniedError("Not authorized to access this job")
    return job


def update_own(db: Session, recruiter: User, job_id: int, patch: JobUpdate) -> Job:
    """Apply allow-listed fields. Every edit sends the job back for admin approval."""
    job = get_own(db, recruiter, job_id)
    changes = patch.model_dump(exclude_unset=True)

    for field in PATCHABLE_FIELDS:
        if field not in changes or changes[field] is None:
            continue
        value = changes[field]
        if field in ("job_type", "status"):
            value = value.value
        elif field == "application_deadline":
            value = to_naive_utc(value)
        setattr(job, field, value)

    job.is_approved = False
    db.commit()
    db.refresh(job)
    logger.info(f"Job updated: job_id={job.id}, fields={sorted(changes)}")
    return job


def close_own(db: Session, recruiter: User, job_id: int) -> Job:
    job = get_own(db, recruiter, job_id)
    job.status = JobStatus.CLOSED.value
    db.commit()
    db.refresh(job)
    logger.info(f"Job closed: job_id={job.id}")
    return job


def delete_job_cascade(db: Session, job: Job) -> None:
    """Delete a job with its applications and their interviews. Does not commit."""
    application_ids = [row.id for row in db.query(Application.id).filter(Application.job_id == job.id)]
    db.query(Interview).filter(Interview.job_id == job.id).delete(synchronize_session=False)
    if application_ids:
        db.query(Interview).filter(Interview.application_id.in_(application_ids)).delete(synchronize_session=False)
    db.query(Application).filter(Application.job_id == job.id).delete(synchronize_session=False)
    db.delete(job)


def delete_own(db: Session, recruiter: User, job_id: int) -> None:
    job = get_own(db, recruiter, job_id)
    delete_job_cascade(db, job)
    db.commit()
    logger.info(f"Job deleted: job_id={job_id}, recruiter_id={recruiter.id}")


# ============================================
# Admin
# ============================================

def list_all(
    db: Session,
    status: Optional[str] = None,
    is_approved: Optional[bool] = None,
    search: Optional[str] = None,
) -> List[Job]:
    query = _search(db.query(Job), search)
    if status:
        query = query.filter(Job.status == status)
    if is_approved is not None:
        query = query.filter(Job.is_approved.is_(is_approved))
    return query.order_by(Job.created_at.desc(), Job.id.desc()).all()


def set_approval(db: Session, job_id: int, is_approved: bool) -> Job:
    """Approving publishes the job; revoking approval returns it to draft."""
    job = db.get(Job, job_id)
    if not job:
        raise NotFoundError("Job not found")
    job.is_approved = is_approved
    job.status = JobStatus.ACTIVE.value if is_approved else JobStatus.DRAFT.value
    db.commit()
    db.refresh(job)
    logger.info(f"Job approval set: job_id={job.id}, approved={is_approved}, status={job.status}")
    return job


def delete_job(db: Session, job_id: int) -> None:
    job = db.get(Job, job_id)
    if not job:
        raise NotFoundError("Job not found")
    delete_job_cascade(db, job)
    db.commit()
    logger.info(f"Job deleted by admin: job_id={job_id}")
