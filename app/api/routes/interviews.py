"""
Interview endpoints: scheduling, the live session, logging and the final decision.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status

from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, get_current_user_obj, require_roles
from app.db.models.user import User
from app.llm.provider import LLMProvider
from app.llm.router import get_llm_provider
from app.schemas.interview import (
    InterviewSchedule,
    InterviewResponse,
    QuestionCreate,
    ResponseCreate,
    NotesUpdate,
    DecisionSubmit,
    AnalysisSubmit,
    CancelRequest,
)
from app.services import interview_service
from app.services.analysis_service import get_analysis_strategy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interviews", tags=["Interviews"])

recruiter_only = require_roles("recruiter")
recruiter_or_admin = require_roles("recruiter", "admin")


@router.post("/schedule", status_code=status.HTTP_201_CREATED, response_model=InterviewResponse)
def schedule(data: InterviewSchedule, recruiter: User = Depends(recruiter_only), db: Session = Depends(get_db)):
    return interview_service.schedule(db, recruiter, data)


@router.get("/my/interviews", response_model=List[InterviewResponse])
def my_interviews(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return interview_service.list_mine(db, user)


@router.get("/room/{room_id}", response_model=InterviewResponse)
def get_by_room(room_id: str, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return interview_service.get_by_room(db, room_id)


@router.get("/{interview_id}", response_model=InterviewResponse)
def get_interview(interview_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return interview_service.get_for_user(db, user, interview_id)


# ============================================
# Live session
# ============================================

@router.put("/{interview_id}/start", response_model=InterviewResponse)
def start(interview_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return interview_service.start(db, user, interview_id)


@router.put("/{interview_id}/end", response_model=InterviewResponse)
def end(interview_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return interview_service.end(db, user, interview_id)


@router.post("/{interview_id}/questions", response_model=InterviewResponse)
def add_question(
    interview_id: int,
    data: QuestionCreate,
    recruiter: User = Depends(recruiter_only),
    db: Session = Depends(get_db)
):
    return interview_service.add_question(db, interview_id, data)


@router.post("/{interview_id}/responses", response_model=InterviewResponse)
def add_response(
    interview_id: int,
    data: ResponseCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return interview_service.add_response(db, interview_id, data)


@router.put("/{interview_id}/notes", response_model=InterviewResponse)
def set_notes(
    interview_id: int,
    data: NotesUpdate,
    recruiter: User = Depends(recruiter_only),
    db: Session = Depends(get_db)
):
    return interview_service.set_notes(db, interview_id, data.notes)


# ============================================
# Outcome
# ============================================

@router.put("/{interview_id}/decision", response_model=InterviewResponse)
def submit_decision(
    interview_id: int,
    decision: DecisionSubmit,
    recruiter: User = Depends(recruiter_only),
    db: Session = Depends(get_db)
):
    return interview_service.submit_decision(db, recruiter, interview_id, decision)


@router.post("/{interview_id}/analysis", response_model=InterviewResponse)
def save_analysis(
    interview_id: int,
    data: AnalysisSubmit,
    user: User = Depends(recruiter_or_admin),
    db: Session = Depends(get_db)
):
    return interview_service.save_analysis(db, interview_id, data.analysis)


@router.post("/{interview_id}/generate-analysis", response_model=InterviewResponse)
def generate_analysis(
    interview_id: int,
    user: User = Depends(recruiter_or_admin),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    return interview_service.generate_analysis(db, interview_id, get_analysis_strategy(provider))


@router.put("/{interview_id}/cancel", response_model=InterviewResponse)
def cancel(
    interview_id: int,
    data: Optional[CancelRequest] = None,
    recruiter: User = Depends(recruiter_only),
    db: Session = Depends(get_db)
):
    return interview_service.cancel(db, recruiter, interview_id, data.reason if data else None)


@router.put("/{interview_id}/missed", response_model=InterviewResponse)
def mark_missed(interview_id: int, recruiter: User = Depends(recruiter_only), db: Session = Depends(get_db)):
    return interview_service.mark_missed(db, recruiter, interview_id)
