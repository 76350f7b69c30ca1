"""
Interview sessions.

States: scheduled -> in-progress -> completed, with cancelled and missed
reachable only from scheduled. Question, response and notes logging carries no
state guard. A decision can be recorded in any state and is written back to the
application in the same transaction.
"""
import logging
import time
from typing import Optional, List

from sqlalchemy.orm import Session

from app.core.config import FRONTEND_URL
from app.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    InvalidStateError,
)
from app.db.models.application import Application, ApplicationStatus
from app.db.models.interview import Interview, InterviewStatus, InterviewMode, InterviewResult
from app.db.models.user import User, UserRole
from app.schemas.analysis import Analysis
from app.schemas.application import InterviewDetails
from app.schemas.interview import (
    InterviewSchedule,
    QuestionCreate,
    ResponseCreate,
    DecisionSubmit,
)
from app.services.analysis_service import AnalysisStrategy, AnalysisContext, SynthesizedAnalysis
from app.services.application_service import (
    INTERVIEW_READY_STATUSES,
    interview_snapshot,
    require_offline_location,
)
from app.services.common import utcnow, to_naive_utc

logger = logging.getLogger(__name__)

STARTABLE_STATUSES = {InterviewStatus.SCHEDULED.value, InterviewStatus.IN_PROGRESS.value}

# interview result -> application status written back on decision
DECISION_TO_APPLICATION_STATUS = {
    InterviewResult.SELECTED.value: ApplicationStatus.SELECTED.value,
    InterviewResult.REJECTED.value: ApplicationStatus.REJECTED.value,
}


def build_room_id(interview_id: int, epoch_ms: Optional[int] = None) -> str:
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f"interview-{interview_id}-{epoch_ms}"


def build_meeting_link(room_id: str) -> str:
    return f"{FRONTEND_URL.rstrip('/')}/interview/room/{room_id}"


def _get(db: Session, interview_id: int) -> Interview:
    interview = db.get(Interview, interview_id)
    if not interview:
        raise NotFoundError("Interview not found")
    return interview


def _get_as_participant(db: Session, user: User, interview_id: int) -> Interview:
    interview = _get(db, interview_id)
    if not interview.is_participant(user.id):
        raise PermissionDeniedError("Not a participant of this interview")
    return interview


def _get_as_owner(db: Session, recruiter: User, interview_id: int) -> Interview:
    interview = _get(db, interview_id)
    if interview.recruiter_id != recruiter.id:
        raise PermissionDeniedError("Not authorized to manage this interview")
    return interview


def schedule(db: Session, recruiter: User, data: InterviewSchedule) -> Interview:
    """
    Create an interview for a shortlisted application and move it to ``interview``.

    Raises:
        ValidationError: offline interview without a location
        NotFoundError: application does not exist
        PermissionDeniedError: application is for another recruiter's job
        InvalidStateError: application is not shortlisted or in interview,
            or already has an open interview
    """
    require_offline_location(data.mode, data.location)

    application = db.get(Application, data.application_id)
    if not application:
        raise NotFoundError("Application not found")
    if application.job.recruiter_id != recruiter.id:
        raise PermissionDeniedError("Not authorized to schedule for this application")
    if application.status not in INTERVIEW_READY_STATUSES:
        raise InvalidStateError(f"Cannot schedule an interview for an application that is {application.status}")
    open_interview = db.query(Interview.id).filter(
        Interview.application_id == application.id,
        Interview.status.in_(STARTABLE_STATUSES),
    ).first()
    if open_interview:
        raise InvalidStateError(f"Application already has an open interview (interview_id={open_interview.id})")

    scheduled_date = to_naive_utc(data.scheduled_date)
    interview = Interview(
        application_id=application.id,
        student_id=application.student_id,
        recruiter_id=recruiter.id,
        job_id=application.job_id,
        scheduled_date=scheduled_date,
        scheduled_time=data.scheduled_time,
        duration=data.duration,
        mode=data.mode.value,
        location=data.location if data.mode == InterviewMode.OFFLINE else None,
        status=InterviewStatus.SCHEDULED.value,
        result=InterviewResult.PENDING.value,
        recruiter_notes=data.notes,
        recording={},
        questions=[],
        responses=[],
        participants=[],
    )
    db.add(interview)
    db.flush()  # room id is derived from the new primary key

    if data.mode == InterviewMode.ONLINE:
        interview.room_id = build_room_id(interview.id)
        interview.meeting_link = build_meeting_link(interview.room_id)

    application.status = ApplicationStatus.INTERVIEW.value
    application.interview_details = interview_snapshot(InterviewDetails(
        date=scheduled_date,
        time=data.scheduled_time,
        mode=data.mode,
        location=interview.location,
        meeting_link=interview.meeting_link,
        notes=data.notes,
    ))
    db.commit()
    db.refresh(interview)

    logger.info(
        f"Interview scheduled: interview_id={interview.id}, application_id={application.id}, "
        f"mode={interview.mode}, room_id={interview.room_id}"
    )
    return interview


def get_for_user(db: Session, user: User, interview_id: int) -> Interview:
    interview = _get(db, interview_id)
    if user.role != UserRole.ADMIN.value and not interview.is_participant(user.id):
        raise PermissionDeniedError("Not authorized to view this interview")
    return interview


def get_by_room(db: Session, room_id: str) -> Interview:
    interview = db.query(Interview).filter(Interview.room_id == room_id).first()
    if not interview:
        raise NotFoundError("Interview room not found")
    return interview


def list_mine(db: Session, user: User) -> List[Interview]:
    query = db.query(Interview)
    if user.role == UserRole.STUDENT.value:
        query = query.filter(Interview.student_id == user.id)
    elif user.role == UserRole.RECRUITER.value:
        query = query.filter(Interview.recruiter_id == user.id)
    return query.order_by(Interview.scheduled_date.desc(), Interview.id.desc()).all()


def start(db: Session, user: User, interview_id: int) -> Interview:
    """
    Join the session. Calling again while in progress appends another roster entry.
    """
    interview = _get_as_participant(db, user, interview_id)
    if interview.status not in STARTABLE_STATUSES:
        raise InvalidStateError(f"Cannot start an interview that is {interview.status}")

    now = utcnow().isoformat()
    recording = dict(interview.recording or {})
    recording.setdefault("start_time", now)
    interview.recording = recording

    interview.participants = list(interview.participants or []) + [{
        "user_id": user.id,
        "joined_at": now,
        "left_at": None,
        "role": user.role,
    }]
    interview.status = InterviewStatus.IN_PROGRESS.value
    db.commit()
    db.refresh(interview)

    logger.info(f"Interview started: interview_id={interview.id}, user_id={user.id}")
    return interview


def end(
    db: Session,
    user: User,
    interview_id: int,
    strategy: Optional[AnalysisStrategy] = None,
) -> Interview:
    """Finish the session and synthesize an analysis if none exists yet."""
    interview = _get_as_participant(db, user, interview_id)
    if interview.status != InterviewStatus.IN_PROGRESS.value:
        raise InvalidStateError(f"Cannot end an interview that is {interview.status}")

    now = utcnow().isoformat()
    recording = dict(interview.recording or {})
    recording["end_time"] = now
    interview.recording = recording

    participants = [dict(entry) for entry in (interview.participants or [])]
    if participants:
        participants[-1]["left_at"] = now
    interview.participants = participants

    interview.status = InterviewStatus.COMPLETED.value

    if not interview.analysis:
        strategy = strategy or SynthesizedAnalysis()
        analysis = strategy.generate(AnalysisContext.from_interview(interview))
        interview.analysis = analysis.model_dump()
        logger.info(f"Analysis generated on end: interview_id={interview.id}, strategy={strategy.name}")

    db.commit()
    db.refresh(interview)

    logger.info(f"Interview completed: interview_id={interview.id}, user_id={user.id}")
    return interview


def add_question(db: Session, interview_id: int, data: QuestionCreate) -> Interview:
    interview = _get(db, interview_id)
    interview.questions = list(interview.questions or []) + [{
        "question": data.question,
        "asked_at": utcnow().isoformat(),
        "category": data.category,
    }]
    db.commit()
    db.refresh(interview)
    return interview


def add_response(db: Session, interview_id: int, data: ResponseCreate) -> Interview:
    interview = _get(db, interview_id)
    interview.responses = list(interview.responses or []) + [{
        "question_index": data.question_index,
        "response": data.response,
        "duration": data.duration,
        "timestamp": utcnow().isoformat(),
        "sentiment": data.sentiment,
        "score": data.score,
    }]
    db.commit()
    db.refresh(interview)
    return interview


def set_notes(db: Session, interview_id: int, notes: str) -> Interview:
    interview = _get(db, interview_id)
    interview.recruiter_notes = notes
    db.commit()
    db.refresh(interview)
    return interview


def submit_decision(db: Session, recruiter: User, interview_id: int, decision: DecisionSubmit) -> Interview:
    """
    Record the final result and write it back to the application.

    selected and rejected carry over; any other result keeps the application in ``interview``.
    """
    interview = _get_as_owner(db, recruiter, interview_id)

    interview.result = decision.result.value
    interview.final_feedback = decision.final_feedback
    interview.rating = decision.rating

    application = interview.application
    if application is None:
        raise NotFoundError("Application not found")
    application.status = DECISION_TO_APPLICATION_STATUS.get(
        decision.result.value, ApplicationStatus.INTERVIEW.value
    )
    application.feedback = decision.final_feedback

    db.commit()
    db.refresh(interview)

    logger.info(
        f"Interview decision: interview_id={interview.id}, result={interview.result}, "
        f"application_id={application.id}, application_status={application.status}"
    )
    return interview


def save_analysis(db: Session, interview_id: int, analysis: Analysis) -> Interview:
    """Overwrite the analysis block wholesale."""
    interview = _get(db, interview_id)
    interview.analysis = analysis.model_dump()
    db.commit()
    db.refresh(interview)
    logger.info(f"Analysis saved: interview_id={interview.id}")
    return interview


def generate_analysis(db: Session, interview_id: int, strategy: AnalysisStrategy) -> Interview:
    interview = _get(db, interview_id)
    analysis = strategy.generate(AnalysisContext.from_interview(interview))
    interview.analysis = analysis.model_dump()
    db.commit()
    db.refresh(interview)
    logger.info(f"Analysis generated: interview_id={interview.id}, strategy={strategy.name}")
    return interview


def _close_scheduled(db: Session, recruiter: User, interview_id: int, target: InterviewStatus) -> Interview:
    interview = _get_as_owner(db, recruiter, interview_id)
    if interview.status != InterviewStatus.SCHEDULED.value:
        raise InvalidStateError(f"Cannot mark an interview {target.value} once it is {interview.status}")
    interview.status = target.value
    return interview


def cancel(db: Session, recruiter: User, interview_id: int, reason: Optional[str] = None) -> Interview:
    interview = _close_scheduled(db, recruiter, interview_id, InterviewStatus.CANCELLED)
    interview.cancellation_reason = reason
    db.commit()
    db.refresh(interview)
    logger.info(f"Interview cancelled: interview_id={interview.id}")
    return interview


def mark_missed(db: Session, recruiter: User, interview_id: int) -> Interview:
    interview = _close_scheduled(db, recruiter, interview_id, InterviewStatus.MISSED)
    db.commit()
    db.refresh(interview)
    logger.info(f"Interview marked missed: interview_id={interview.id}")
    return interview
