"""
Account registration, authentication, profile edits and admin moderation.
"""
import logging
from typing import Optional, List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import AUTO_APPROVE_USERS
from app.core.errors import NotFoundError, ValidationError
from app.core.security import hash_password, verify_password
from app.db.models.user import User, UserRole
from app.db.models.application import Application
from app.db.models.interview import Interview
from app.db.models.job import Job
from app.db.models.resume import Resume
from app.db.models.resume_analysis import ResumeAnalysis
from app.db.models.chat import Chat
from app.schemas.auth import RegisterRequest, ProfileUpdate
from app.services.common import like_pattern

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def register_user(db: Session, data: RegisterRequest) -> User:
    """
    Create a student or recruiter account.

    Raises:
        ValidationError: email already registered
    """
    email = data.email.strip().lower()
    if get_user_by_email(db, email):
        raise ValidationError("Email already registered")

    user = User(
        name=data.name.strip(),
        email=email,
        password_hash=hash_password(data.password),
        role=data.role,
        phone=data.phone,
        is_approved=AUTO_APPROVE_USERS,
        is_active=True,
        student_profile={} if data.role == UserRole.STUDENT.value else None,
        recruiter_profile={} if data.role == UserRole.RECRUITER.value else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User registered: user_id={user.id}, role={user.role}, approved={user.is_approved}")
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, else None."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Login rejected: bad credentials")
        return None
    return user


def update_profile(db: Session, user: User, patch: ProfileUpdate) -> User:
    """Apply allow-listed profile fields; only the block for the user's role is used."""
    if patch.name is not None:
        user.name = patch.name.strip()
    if patch.phone is not None:
        user.phone = patch.phone

    if user.role == UserRole.STUDENT.value and patch.student_profile is not None:
        merged = dict(user.student_profile or {})
        merged.update(patch.student_profile.model_dump(exclude_unset=True))
        user.student_profile = merged
    elif user.role == UserRole.RECRUITER.value and patch.recruiter_profile is not None:
        merged = dict(user.recruiter_profile or {})
        merged.update(patch.recruiter_profile.model_dump(exclude_unset=True))
        user.recruiter_profile = merged

    db.commit()
    db.refresh(user)
    logger.info(f"Profile updated: user_id={user.id}")
    return user


# ============================================
# Admin moderation
# ============================================

def list_users(
    db: Session,
    role: Optional[str] = None,
    is_approved: Optional[bool] = None,
    search: Optional[str] = None,
) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if is_approved is not None:
        query = query.filter(User.is_approved.is_(is_approved))
    if search:
        pattern = like_pattern(search)
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def set_approval(db: Session, user_id: int, is_approved: bool) -> User:
    user = _get_user(db, user_id)
    user.is_approved = is_approved
    db.commit()
    db.refresh(user)
    logger.info(f"User approval set: user_id={user.id}, approved={is_approved}")
    return user


def set_active(db: Session, user_id: int, is_active: bool) -> User:
    user = _get_user(db, user_id)
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    logger.info(f"User active flag set: user_id={user.id}, active={is_active}")
    return user


def delete_user(db: Session, user_id: int, acting_admin: User) -> None:
    """Delete an account together with everything that references it."""
    from app.services import job_service

    if user_id == acting_admin.id:
        raise ValidationError("Admins cannot delete their own account")
    user = _get_user(db, user_id)

    for job in db.query(Job).filter(Job.recruiter_id == user.id).all():
        job_service.delete_job_cascade(db, job)

    own_applications = db.query(Application).filter(Application.student_id == user.id).all()
    for application in own_applications:
        db.query(Interview).filter(Interview.application_id == application.id).delete(synchronize_session=False)
        job_service.adjust_applications_count(db, application.job_id, -1)
        db.delete(application)

    db.query(Resume).filter(Resume.user_id == user.id).delete(synchronize_session=False)
    db.query(ResumeAnalysis).filter(ResumeAnalysis.student_id == user.id).delete(synchronize_session=False)
    db.query(Chat).filter(Chat.student_id == user.id).delete(synchronize_session=False)
    db.flush()

    db.delete(user)
    db.commit()
    logger.info(f"User deleted: user_id={user_id}, by admin_id={acting_admin.id}")
