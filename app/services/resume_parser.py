"""
Resume file parsing.

Extracts text from an uploaded PDF, DOCX or plain-text resume, has the AI
collaborator structure it and suggest improvements, and keeps the result as a
ResumeAnalysis record. Unlike interview analysis there is no synthetic
fallback: provider and parse failures reach the caller.
"""
import io
import json
import logging
from typing import Optional, List

import docx
import fitz  # pymupdf
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import MAX_UPLOAD_BYTES
from app.core.errors import (
    NotFoundError,
    ValidationError,
    UnsupportedFormatError,
    EmptyDocumentError,
    ProviderError,
    PayloadParseError,
)
from app.db.models.resume_analysis import ResumeAnalysis
from app.db.models.user import User
from app.llm.json_payload import parse_json_payload
from app.llm.provider import LLMProvider
from app.llm.router import get_model_for_feature
from app.schemas.resume_parser import ParsedResume, Recommendations, JobComparison

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT = "text/plain"
SUPPORTED_CONTENT_TYPES = (PDF, DOCX, TEXT)

PARSER_SYSTEM_PROMPT = "You are an expert HR professional and resume analyst. Reply with JSON only."

PARSE_PROMPT = """Analyze the following resume/CV and provide a comprehensive parsing report.

Resume Content:
{resume_text}

Provide a JSON report with this structure:
{{
  "personal_info": {{"name": "", "email": "", "phone": "", "location": "", "summary": ""}},
  "skills": {{"technical": [], "soft": [], "languages": [], "tools": []}},
  "experience": [{{"job_title": "", "company": "", "duration": "", "description": "", "skills_used": []}}],
  "education": [{{"degree": "", "institution": "", "field": "", "graduation_year": "", "grade": ""}}],
  "certifications": [{{"name": "", "issuer": "", "date": "", "credential_id": ""}}],
  "projects": [{{"title": "", "description": "", "technologies": [], "link": ""}}],
  "analysis": {{
    "strengths": [], "weaknesses": [], "suggestions": [],
    "career_path": "", "industry_fit": "", "experience_level": "junior/mid-level/senior",
    "overall_score": 85
  }},
  "keywords": {{"ats_friendly_keywords": [], "missing_keywords": [], "ats_score": 78}}
}}

Provide ONLY valid JSON, no markdown or extra text."""

RECOMMENDATIONS_PROMPT = """Based on this parsed resume data, provide personalized recommendations for improving the resume and career development:

{parsed_data}

Provide recommendations in this JSON format:
{{
  "resume_improvements": [{{"section": "", "current_issue": "", "recommendation": "", "priority": "high/medium/low", "example": ""}}],
  "skill_gaps": [{{"skill": "", "importance": "high/medium/low", "learning_path": "", "estimated_time": ""}}],
  "certifications": [{{"name": "", "provider": "", "benefit": "", "link": ""}}],
  "job_targets": [{{"job_title": "", "match_score": 85, "why": "", "preparation": ""}}]
}}

Provide ONLY valid JSON."""

COMPARISON_PROMPT = """Compare this resume profile with the job description and provide a match analysis:

Resume Profile:
{parsed_data}

Job Description:
{job_description}

Provide analysis in this JSON format:
{{
  "overall_match_score": 85,
  "match_breakdown": {{
    "skills_match": {{"score": 80, "matched_skills": [], "missing_skills": []}},
    "experience_match": {{"score": 85, "analysis": ""}},
    "education_match": {{"score": 90, "analysis": ""}}
  }},
  "readiness": "ready/good_fit/needs_preparation",
  "recommendations": []
}}

Provide ONLY valid JSON."""


# ============================================
# Text extraction
# ============================================

def normalize_content_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";")[0].strip().lower()


def _pdf_text(content: bytes) -> str:
    text = ""
    with fitz.open(stream=content, filetype="pdf") as doc:
        for page in doc:
            text += page.get_text()
    return text


def _docx_text(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _plain_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


_EXTRACTORS = {
    PDF: _pdf_text,
    DOCX: _docx_text,
    TEXT: _plain_text,
}


def extract_text(content: bytes, content_type: Optional[str]) -> str:
    """
    Extract plain text from an uploaded resume.

    Raises:
        ValidationError: file larger than MAX_UPLOAD_BYTES or unreadable
        UnsupportedFormatError: not PDF, DOCX or plain text
        EmptyDocumentError: no readable text (e.g. a scanned image)
    """
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationError(f"File too large (limit {MAX_UPLOAD_BYTES // (1024 * 1024)}MB)")

    kind = normalize_content_type(content_type)
    extractor = _EXTRACTORS.get(kind)
    if extractor is None:
        raise UnsupportedFormatError(f"Unsupported file type: {kind or 'unknown'}. Upload a PDF, DOCX or TXT file.")

    try:
        text = extractor(content)
    except Exception as e:
        logger.warning(f"Text extraction failed: content_type={kind}, error={type(e).__name__}: {e}")
        raise ValidationError("Failed to extract text from file. Make sure the file is not corrupted.") from e

    text = text.strip()
    if not text:
        raise EmptyDocumentError(
            "No readable text found in the uploaded file. "
            "Please upload a text-based PDF or Word document."
        )
    return text


# ============================================
# AI collaborator calls
# ============================================

def _require_provider(provider: Optional[LLMProvider]) -> LLMProvider:
    if provider is None:
        raise ProviderError("AI resume parsing is not configured")
    return provider


def _ask(provider: LLMProvider, prompt: str, feature: str) -> dict:
    reply = provider.generate(
        prompt,
        model=get_model_for_feature(feature),
        system=PARSER_SYSTEM_PROMPT,
        temperature=0.3,
        max_tokens=3000,
    )
    payload = parse_json_payload(reply)
    if payload.recovered:
        logger.info(f"AI reply for {feature} needed the cleanup pass")
    return payload.data


def parse_resume_text(provider: Optional[LLMProvider], resume_text: str) -> ParsedResume:
    """
    Structure raw resume text.

    Raises:
        ProviderError / ProviderTimeoutError: AI collaborator failed
        PayloadParseError: reply had no usable JSON object
    """
    data = _ask(_require_provider(provider), PARSE_PROMPT.format(resume_text=resume_text), "resume_parse")
    try:
        return ParsedResume.model_validate(data)
    except PydanticValidationError as e:
        raise PayloadParseError(f"AI resume parse did not match the expected shape ({e.error_count()} errors)") from e


def generate_recommendations(provider: Optional[LLMProvider], parsed: ParsedResume) -> Recommendations:
    prompt = RECOMMENDATIONS_PROMPT.format(parsed_data=json.dumps(parsed.model_dump(), indent=2))
    data = _ask(_require_provider(provider), prompt, "resume_recommendations")
    try:
        return Recommendations.model_validate(data)
    except PydanticValidationError as e:
        raise PayloadParseError("AI recommendations did not match the expected shape") from e


def compare_with_job(provider: Optional[LLMProvider], parsed_data: dict, job_description: str) -> JobComparison:
    prompt = COMPARISON_PROMPT.format(
        parsed_data=json.dumps(parsed_data, indent=2),
        job_description=job_description,
    )
    data = _ask(_require_provider(provider), prompt, "job_comparison")
    try:
        return JobComparison.model_validate(data)
    except PydanticValidationError as e:
        raise PayloadParseError("AI job comparison did not match the expected shape") from e


# ============================================
# Stored analyses
# ============================================

def parse_and_store(
    db: Session,
    student: User,
    provider: Optional[LLMProvider],
    file_name: str,
    content_type: Optional[str],
    content: bytes,
) -> ResumeAnalysis:
    """Extract, parse, recommend and persist. Nothing is stored if any step fails."""
    logger.info(f"Resume parse requested: user_id={student.id}, file={file_name}, size={len(content)}")
    resume_text = extract_text(content, content_type)

    parsed = parse_resume_text(provider, resume_text)
    recommendations = generate_recommendations(provider, parsed)

    record = ResumeAnalysis(
        student_id=student.id,
        file_name=file_name,
        content_type=normalize_content_type(content_type),
        resume_text=resume_text,
        parsed_data=parsed.model_dump(),
        recommendations=recommendations.model_dump(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Resume parsed: analysis_id={record.id}, user_id={student.id}, chars={len(resume_text)}")
    return record


def list_history(db: Session, student: User) -> List[ResumeAnalysis]:
    return (
        db.query(ResumeAnalysis)
        .filter(ResumeAnalysis.student_id == student.id)
        .order_by(ResumeAnalysis.created_at.desc(), ResumeAnalysis.id.desc())
        .all()
    )


def get_analysis(db: Session, student: User, analysis_id: int) -> ResumeAnalysis:
    record = db.query(ResumeAnalysis).filter(
        ResumeAnalysis.id == analysis_id,
        ResumeAnalysis.student_id == student.id,
    ).first()
    if not record:
        raise NotFoundError("Resume analysis not found")
    return record


def delete_analysis(db: Session, student: User, analysis_id: int) -> None:
    record = get_analysis(db, student, analysis_id)
    db.delete(record)
    db.commit()
    logger.info(f"Resume analysis deleted: analysis_id={analysis_id}, user_id={student.id}")


def compare_analysis(
    db: Session,
    student: User,
    analysis_id: int,
    provider: Optional[LLMProvider],
    job_description: str,
) -> JobComparison:
    record = get_analysis(db, student, analysis_id)
    return compare_with_job(provider, record.parsed_data, job_description)
