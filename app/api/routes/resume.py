"""
Resume builder endpoints. Students only; every resume is scoped to its owner.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_roles
from app.core.config import MAX_UPLOAD_BYTES
from app.db.models.user import User
from app.llm.provider import LLMProvider
from app.llm.router import get_llm_provider
from app.schemas.resume import (
    ResumeCreate,
    ResumeUpdate,
    ResumeResponse,
    CompletenessResponse,
    ResumeSuggestion,
    ResumeAnalyzeRequest,
    ResumeAnalyzeResponse,
    ATSScoreResponse,
    ResumeUploadResponse,
)
from app.services import resume_service

router = APIRouter(prefix="/resumes", tags=["Resume"])

current_student = require_roles("student")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ResumeResponse)
def create_resume(data: ResumeCreate, student: User = Depends(current_student), db: Session = Depends(get_db)):
    return resume_service.create_resume(db, student, data)


@router.post("/upload-parse", status_code=status.HTTP_201_CREATED, response_model=ResumeUploadResponse)
def upload_and_parse(
    resume: UploadFile = File(...),
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    content = resume.file.read(MAX_UPLOAD_BYTES + 1)
    created = resume_service.create_from_upload(
        db,
        student,
        provider,
        file_name=resume.filename or "resume",
        content_type=resume.content_type,
        content=content,
    )
    return ResumeUploadResponse(
        resume=ResumeResponse.model_validate(created),
        completeness=resume_service.calculate_completeness(created).completeness,
    )


@router.get("/my-resumes", response_model=List[ResumeResponse])
def list_resumes(student: User = Depends(current_student), db: Session = Depends(get_db)):
    return resume_service.list_resumes(db, student)


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume(resume_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    return resume_service.get_resume(db, student, resume_id)


@router.put("/{resume_id}", response_model=ResumeResponse)
def update_resume(
    resume_id: int,
    patch: ResumeUpdate,
    student: User = Depends(current_student),
    db: Session = Depends(get_db)
):
    return resume_service.update_resume(db, student, resume_id, patch)


@router.delete("/{resume_id}")
def delete_resume(resume_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    resume_service.delete_resume(db, student, resume_id)
    return {"message": "Resume deleted successfully"}


@router.get("/{resume_id}/completeness", response_model=CompletenessResponse)
def completeness(resume_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    resume = resume_service.get_resume(db, student, resume_id)
    return resume_service.calculate_completeness(resume)


@router.post("/{resume_id}/suggestions", response_model=List[ResumeSuggestion])
def suggestions(resume_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    resume = resume_service.get_resume(db, student, resume_id)
    return resume_service.generate_suggestions(resume)


@router.post("/{resume_id}/analyze", response_model=ResumeAnalyzeResponse)
def analyze(
    resume_id: int,
    data: Optional[ResumeAnalyzeRequest] = None,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    analysis, completeness_report = resume_service.analyze_resume(
        db, student, resume_id, provider,
        job_description=data.job_description if data else None,
    )
    return ResumeAnalyzeResponse(analysis=analysis, completeness=completeness_report.completeness)


@router.post("/{resume_id}/ats-score", response_model=ATSScoreResponse)
def ats_score(
    resume_id: int,
    data: Optional[ResumeAnalyzeRequest] = None,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    return resume_service.ats_score(
        db, student, resume_id, provider,
        job_description=data.job_description if data else None,
    )
