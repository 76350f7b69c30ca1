"""
AI resume parser endpoints: upload a resume file, keep the structured parse,
and compare it with a job description.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_roles
from app.core.config import MAX_UPLOAD_BYTES
from app.db.models.user import User
from app.llm.provider import LLMProvider
from app.llm.router import get_llm_provider
from app.schemas.resume_parser import (
    ResumeAnalysisResponse,
    ResumeAnalysisSummary,
    JobComparisonRequest,
    JobComparison,
)
from app.services import resume_parser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resume-parser", tags=["Resume Parser"])

current_student = require_roles("student")


@router.post("/parse", status_code=status.HTTP_201_CREATED, response_model=ResumeAnalysisResponse)
def parse_resume(
    resume: UploadFile = File(...),
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    # One byte past the limit is enough to reject oversized uploads
    content = resume.file.read(MAX_UPLOAD_BYTES + 1)
    return resume_parser.parse_and_store(
        db,
        student,
        provider,
        file_name=resume.filename or "resume",
        content_type=resume.content_type,
        content=content,
    )


@router.get("/history", response_model=List[ResumeAnalysisSummary])
def history(student: User = Depends(current_student), db: Session = Depends(get_db)):
    return resume_parser.list_history(db, student)


@router.get("/{analysis_id}", response_model=ResumeAnalysisResponse)
def get_analysis(analysis_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    return resume_parser.get_analysis(db, student, analysis_id)


@router.post("/compare/{analysis_id}", response_model=JobComparison)
def compare(
    analysis_id: int,
    data: JobComparisonRequest,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    return resume_parser.compare_analysis(db, student, analysis_id, provider, data.job_description)


@router.delete("/{analysis_id}")
def delete_analysis(analysis_id: int, student: User = Depends(current_student), db: Session = Depends(get_db)):
    resume_parser.delete_analysis(db, student, analysis_id)
    return {"message": "Resume analysis deleted successfully"}
