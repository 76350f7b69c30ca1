"""
Structured resume builder: CRUD with version history, import from an uploaded
file, completeness scoring, rule-based suggestions and ATS review.
"""
import copy
import logging
from typing import Optional, List, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ProviderError, PayloadParseError
from app.db.models.resume import Resume, RESUME_SECTIONS
from app.db.models.user import User
from app.llm.json_payload import parse_json_payload
from app.llm.provider import LLMProvider
from app.llm.router import get_model_for_feature
from app.schemas.resume import (
    ResumeCreate,
    ResumeUpdate,
    ResumeSuggestion,
    ResumeATSAnalysis,
    KeywordMatch,
    CompletenessResponse,
    ATSBreakdown,
    ATSScoreResponse,
)
from app.schemas.resume_parser import ParsedPersonalInfo
from app.services import resume_parser
from app.services.common import utcnow

logger = logging.getLogger(__name__)

# section -> (weight, label shown when missing)
COMPLETENESS_WEIGHTS = {
    "personal_info": (15, "Personal Information"),
    "education": (20, "Education"),
    "experience": (25, "Work Experience"),
    "skills": (15, "Skills"),
    "projects": (15, "Projects"),
    "certifications": (5, "Certifications"),
    "achievements": (5, "Achievements"),
}

ATS_KEYWORDS = ["javascript", "python", "react", "node", "sql", "aws", "git"]

# share of the ATS score attributed to each component
ATS_BREAKDOWN_WEIGHTS = {"keyword_match": 0.6, "title_relevance": 0.2, "formatting": 0.2}

ATS_SYSTEM_PROMPT = (
    "You are an expert ATS (Applicant Tracking System) and resume analyzer. "
    "Provide detailed, actionable feedback in JSON format."
)


# ============================================
# CRUD
# ============================================

def create_resume(db: Session, student: User, data: ResumeCreate) -> Resume:
    resume = Resume(user_id=student.id, version=1, previous_versions=[], is_active=True, **data.model_dump())
    db.add(resume)
    db.commit()
    db.refresh(resume)
    logger.info(f"Resume created: resume_id={resume.id}, user_id={student.id}")
    return resume


def _personal_info_from_parse(info: ParsedPersonalInfo) -> dict:
    data = info.model_dump(exclude_none=True)
    name = (data.get("name") or "").strip()
    if name:
        first, _, last = name.partition(" ")
        data.update(name=name, first_name=first, last_name=last.strip())
    summary = data.pop("summary", None)
    if summary:
        data["professional_summary"] = summary
    return data


def create_from_upload(
    db: Session,
    student: User,
    provider: Optional[LLMProvider],
    file_name: str,
    content_type: Optional[str],
    content: bytes,
) -> Resume:
    """
    Build a new resume from an uploaded file via the AI parse.

    Extraction and provider failures propagate and nothing is stored.
    """
    resume_text = resume_parser.extract_text(content, content_type)
    parsed = resume_parser.parse_resume_text(provider, resume_text)

    resume = Resume(
        user_id=student.id,
        title=f"Imported: {file_name}",
        personal_info=_personal_info_from_parse(parsed.personal_info),
        education=parsed.education,
        experience=parsed.experience,
        projects=parsed.projects,
        skills=parsed.skills.model_dump(),
        certifications=parsed.certifications,
        source_document={
            "file_name": file_name,
            "uploaded_at": utcnow().isoformat(),
            "parsed_successfully": True,
        },
        version=1,
        previous_versions=[],
        is_active=True,
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    logger.info(f"Resume imported: resume_id={resume.id}, user_id={student.id}, file={file_name}")
    return resume


def list_resumes(db: Session, student: User) -> List[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == student.id, Resume.is_active.is_(True))
        .order_by(Resume.updated_at.desc(), Resume.id.desc())
        .all()
    )


def get_resume(db: Session, student: User, resume_id: int) -> Resume:
    resume = db.query(Resume).filter(
        Resume.id == resume_id,
        Resume.user_id == student.id,
        Resume.is_active.is_(True),
    ).first()
    if not resume:
        raise NotFoundError("Resume not found")
    return resume


def update_resume(db: Session, student: User, resume_id: int, patch: ResumeUpdate) -> Resume:
    """Replace the given sections, keeping the pre-update document in previous_versions."""
    resume = get_resume(db, student, resume_id)
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)

    history = list(resume.previous_versions or [])
    history.append({
        "version_number": resume.version,
        "saved_at": utcnow().isoformat(),
        "data": copy.deepcopy(resume.snapshot()),
    })
    resume.previous_versions = history

    for section in ("title",) + RESUME_SECTIONS:
        if section in changes:
            setattr(resume, section, changes[section])
    resume.version = resume.version + 1

    db.commit()
    db.refresh(resume)
    logger.info(f"Resume updated: resume_id={resume.id}, version={resume.version}, fields={sorted(changes)}")
    return resume


def delete_resume(db: Session, student: User, resume_id: int) -> None:
    resume = get_resume(db, student, resume_id)
    resume.is_active = False
    db.commit()
    logger.info(f"Resume deleted: resume_id={resume_id}, user_id={student.id}")


# ============================================
# Completeness & suggestions
# ============================================

def _section_present(resume: Resume, section: str) -> bool:
    if section == "personal_info":
        info = resume.personal_info or {}
        return bool((info.get("first_name") or info.get("name")) and info.get("email"))
    if section == "skills":
        return bool((resume.skills or {}).get("technical"))
    return bool(getattr(resume, section))


def calculate_completeness(resume: Resume) -> CompletenessResponse:
    sections = {section: _section_present(resume, section) for section in COMPLETENESS_WEIGHTS}
    score = sum(weight for section, (weight, _) in COMPLETENESS_WEIGHTS.items() if sections[section])
    missing = [label for section, (_, label) in COMPLETENESS_WEIGHTS.items() if not sections[section]]
    return CompletenessResponse(completeness=score, missing=missing, sections=sections)


def generate_suggestions(resume: Resume) -> List[ResumeSuggestion]:
    suggestions = []
    info = resume.personal_info or {}

    if not (info.get("professional_summary") or info.get("summary")):
        suggestions.append(ResumeSuggestion(
            section="Professional Summary",
            type="missing",
            suggestion="Add a compelling professional summary highlighting your key skills and achievements",
            priority="high",
            example="Results-driven software engineer with 3+ years of experience in full-stack development...",
        ))

    if len(resume.projects or []) < 2:
        suggestions.append(ResumeSuggestion(
            section="Projects",
            type="incomplete",
            suggestion="Add at least 2-3 significant projects to showcase your practical skills",
            priority="high",
        ))

    if not resume.certifications:
        suggestions.append(ResumeSuggestion(
            section="Certifications",
            type="missing",
            suggestion="Add relevant certifications to boost credibility",
            priority="medium",
        ))

    if not resume.experience:
        suggestions.append(ResumeSuggestion(
            section="Experience",
            type="missing",
            suggestion="Add internships, part-time work, or volunteer experience",
            priority="high",
        ))

    suggestions.append(ResumeSuggestion(
        section="General",
        type="improvement",
        suggestion='Use action verbs like "developed", "implemented", "led" to start bullet points',
        priority="medium",
    ))
    suggestions.append(ResumeSuggestion(
        section="General",
        type="improvement",
        suggestion='Quantify achievements with numbers and metrics (e.g., "Improved performance by 40%")',
        priority="high",
    ))
    return suggestions


# ============================================
# ATS review
# ============================================

def _rating(score: float) -> str:
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "average"
    return "needs-improvement"


def rule_based_analysis(resume: Resume) -> ResumeATSAnalysis:
    """Keyword coverage review used when the AI collaborator is unavailable."""
    text = str(resume.snapshot()).lower()
    matches = [keyword for keyword in ATS_KEYWORDS if keyword in text]
    score = round(len(matches) / len(ATS_KEYWORDS) * 100)

    return ResumeATSAnalysis(
        ats_score=score,
        strengths=[
            "Clear structure and formatting",
            "Relevant technical skills listed",
            "Quantifiable achievements mentioned",
        ],
        weaknesses=[
            "Could add more project details",
            "Missing some industry keywords",
            "Summary could be more impactful",
        ],
        suggestions=[
            "Add metrics to quantify your achievements",
            "Include relevant certifications",
            "Optimize for ATS with industry keywords",
            "Add a professional summary at the top",
        ],
        keyword_matches=[
            KeywordMatch(keyword=keyword, present=keyword in matches, importance="high")
            for keyword in ATS_KEYWORDS
        ],
        overall_rating=_rating(score),
        detailed_feedback=(
            "Your resume shows good potential. Focus on adding more quantifiable achievements "
            "and optimizing keywords for ATS systems."
        ),
        source="rules",
    )


def _build_ats_prompt(resume: Resume, job_description: Optional[str]) -> str:
    info = resume.personal_info or {}
    name = info.get("name") or " ".join(filter(None, [info.get("first_name"), info.get("last_name")]))
    return f"""Analyze this resume against the following job description and provide an ATS score and feedback.

JOB DESCRIPTION:
{job_description or "General software engineering position"}

RESUME DATA:
Name: {name or "Not provided"}
Summary: {info.get("professional_summary") or info.get("summary") or "Not provided"}
Education: {resume.education or []}
Experience: {resume.experience or []}
Skills: {resume.skills or {}}
Projects: {resume.projects or []}

Provide ONLY a JSON object with:
{{
  "ats_score": <number 0-100>,
  "strengths": [<3-5 strengths>],
  "weaknesses": [<2-4 weaknesses>],
  "suggestions": [<3-5 specific improvement suggestions>],
  "keyword_matches": [{{"keyword": "skill name", "present": true, "importance": "high/medium/low"}}],
  "overall_rating": "excellent/good/average/needs-improvement",
  "detailed_feedback": "<detailed paragraph>"
}}"""


def analyze_resume(
    db: Session,
    student: User,
    resume_id: int,
    provider: Optional[LLMProvider],
    job_description: Optional[str] = None,
) -> Tuple[ResumeATSAnalysis, CompletenessResponse]:
    """ATS review via the AI collaborator, falling back to keyword rules on any failure."""
    resume = get_resume(db, student, resume_id)

    analysis = None
    if provider is not None:
        try:
            reply = provider.generate(
                _build_ats_prompt(resume, job_description),
                model=get_model_for_feature("resume_ats"),
                system=ATS_SYSTEM_PROMPT,
                max_tokens=1500,
            )
            data = parse_json_payload(reply).data
            data["source"] = "ai"
            analysis = ResumeATSAnalysis.model_validate(data)
        except (ProviderError, PayloadParseError) as e:
            logger.warning(f"AI resume analysis failed ({e.kind}), using rule-based analysis")
        except PydanticValidationError as e:
            logger.warning(f"AI resume analysis had unusable shape ({e.error_count()} errors), using rule-based analysis")

    if analysis is None:
        analysis = rule_based_analysis(resume)

    analysis.last_analyzed = utcnow()
    resume.ai_analysis = analysis.model_dump(mode="json")
    db.commit()
    db.refresh(resume)

    logger.info(f"Resume analyzed: resume_id={resume.id}, source={analysis.source}, ats_score={analysis.ats_score}")
    return analysis, calculate_completeness(resume)


def ats_score(
    db: Session,
    student: User,
    resume_id: int,
    provider: Optional[LLMProvider],
    job_description: Optional[str] = None,
) -> ATSScoreResponse:
    analysis, _ = analyze_resume(db, student, resume_id, provider, job_description=job_description)
    score = analysis.ats_score
    breakdown = {part: int(score * weight + 0.5) for part, weight in ATS_BREAKDOWN_WEIGHTS.items()}
    return ATSScoreResponse(
        score=score,
        matched_keywords=[match.keyword for match in analysis.keyword_matches if match.present],
        missed_keywords=[match.keyword for match in analysis.keyword_matches if not match.present],
        recommendations=analysis.suggestions,
        breakdown=ATSBreakdown(**breakdown),
        source=analysis.source,
    )
