"""
Pydantic schemas for the structured resume builder.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field


class ResumeCreate(BaseModel):
    title: str = Field(default="My Resume", min_length=1, max_length=255)
    personal_info: Dict[str, Any] = Field(default_factory=dict)
    education: List[Dict[str, Any]] = Field(default_factory=list)
    experience: List[Dict[str, Any]] = Field(default_factory=list)
    projects: List[Dict[str, Any]] = Field(default_factory=list)
    skills: Dict[str, List[str]] = Field(default_factory=dict, description="technical, soft, languages, tools, frameworks")
    certifications: List[Dict[str, Any]] = Field(default_factory=list)
    achievements: List[Dict[str, Any]] = Field(default_factory=list)
    publications: List[Dict[str, Any]] = Field(default_factory=list)
    volunteer: List[Dict[str, Any]] = Field(default_factory=list)
    template: str = Field(default="professional")
    theme: Dict[str, Any] = Field(default_factory=dict)


class ResumeUpdate(BaseModel):
    """Sections a student may replace. Each update stores the prior version."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    personal_info: Optional[Dict[str, Any]] = None
    education: Optional[List[Dict[str, Any]]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    projects: Optional[List[Dict[str, Any]]] = None
    skills: Optional[Dict[str, List[str]]] = None
    certifications: Optional[List[Dict[str, Any]]] = None
    achievements: Optional[List[Dict[str, Any]]] = None
    publications: Optional[List[Dict[str, Any]]] = None
    volunteer: Optional[List[Dict[str, Any]]] = None
    template: Optional[str] = None
    theme: Optional[Dict[str, Any]] = None


class ResumeResponse(BaseModel):
    id: int
    user_id: int
    title: str
    personal_info: Dict[str, Any]
    education: List[Dict[str, Any]]
    experience: List[Dict[str, Any]]
    projects: List[Dict[str, Any]]
    skills: Dict[str, Any]
    certifications: List[Dict[str, Any]]
    achievements: List[Dict[str, Any]]
    publications: List[Dict[str, Any]]
    volunteer: List[Dict[str, Any]]
    template: str
    theme: Dict[str, Any]
    ai_analysis: Optional[Dict[str, Any]] = None
    source_document: Optional[Dict[str, Any]] = None
    is_active: bool
    version: int
    previous_versions: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompletenessResponse(BaseModel):
    completeness: int = Field(..., ge=0, le=100)
    missing: List[str]
    sections: Dict[str, bool]


class ResumeSuggestion(BaseModel):
    section: str
    type: str  # missing / incomplete / improvement
    suggestion: str
    priority: str  # high / medium / low
    example: Optional[str] = None


class KeywordMatch(BaseModel):
    keyword: str
    present: bool
    importance: str = "medium"


class ResumeAnalyzeRequest(BaseModel):
    job_description: Optional[str] = None
    job_title: Optional[str] = None


class ResumeATSAnalysis(BaseModel):
    """ATS review stored on the resume's ai_analysis block."""
    ats_score: float = Field(..., ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    keyword_matches: List[KeywordMatch] = Field(default_factory=list)
    overall_rating: str = "average"
    detailed_feedback: str = ""
    source: str = Field(default="rules", description="ai or rules")
    last_analyzed: Optional[datetime] = None


class ResumeAnalyzeResponse(BaseModel):
    analysis: ResumeATSAnalysis
    completeness: int


class ATSBreakdown(BaseModel):
    keyword_match: int
    title_relevance: int
    formatting: int


class ATSScoreResponse(BaseModel):
    """ATS score summary derived from a full resume analysis."""
    score: float
    matched_keywords: List[str]
    missed_keywords: List[str]
    recommendations: List[str]
    breakdown: ATSBreakdown
    source: str


class ResumeUploadResponse(BaseModel):
    resume: ResumeResponse
    completeness: int
