"""
Pydantic schemas for AI resume parsing.

The AI collaborator is prompted with these snake_case keys; unknown keys are
kept so richer replies survive the round trip.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


class ParsedPersonalInfo(_Lenient):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None


class ParsedSkills(_Lenient):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)


class ParsedProfileAnalysis(_Lenient):
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    career_path: Optional[str] = None
    industry_fit: Optional[str] = None
    experience_level: Optional[str] = None
    overall_score: Optional[float] = Field(None, ge=0, le=100)


class ParsedKeywords(_Lenient):
    ats_friendly_keywords: List[str] = Field(default_factory=list)
    missing_keywords: List[str] = Field(default_factory=list)
    ats_score: Optional[float] = Field(None, ge=0, le=100)


class ParsedResume(_Lenient):
    personal_info: ParsedPersonalInfo = Field(default_factory=ParsedPersonalInfo)
    skills: ParsedSkills = Field(default_factory=ParsedSkills)
    experience: List[Dict[str, Any]] = Field(default_factory=list)
    education: List[Dict[str, Any]] = Field(default_factory=list)
    certifications: List[Dict[str, Any]] = Field(default_factory=list)
    projects: List[Dict[str, Any]] = Field(default_factory=list)
    analysis: ParsedProfileAnalysis = Field(default_factory=ParsedProfileAnalysis)
    keywords: ParsedKeywords = Field(default_factory=ParsedKeywords)


class Recommendations(_Lenient):
    resume_improvements: List[Dict[str, Any]] = Field(default_factory=list)
    skill_gaps: List[Dict[str, Any]] = Field(default_factory=list)
    certifications: List[Dict[str, Any]] = Field(default_factory=list)
    job_targets: List[Dict[str, Any]] = Field(default_factory=list)


class JobComparisonRequest(BaseModel):
    job_description: str = Field(..., min_length=1)


class JobComparison(_Lenient):
    overall_match_score: float = Field(..., ge=0, le=100)
    match_breakdown: Dict[str, Any] = Field(default_factory=dict)
    readiness: Optional[str] = None  # ready / good_fit / needs_preparation
    recommendations: List[str] = Field(default_factory=list)


class ResumeAnalysisResponse(BaseModel):
    id: int
    student_id: int
    file_name: str
    content_type: str
    parsed_data: Dict[str, Any]
    recommendations: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResumeAnalysisSummary(BaseModel):
    """History row; omits the raw text and full parse."""
    id: int
    file_name: str
    content_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
