"""
Pydantic schema for the interview performance report.
"""
from typing import List, Literal
from pydantic import BaseModel, Field


class SentimentSplit(BaseModel):
    """Three-way sentiment shares. Values need not sum to 1."""
    positive: float = Field(..., ge=0, le=1)
    neutral: float = Field(..., ge=0, le=1)
    negative: float = Field(..., ge=0, le=1)


class SubMetric(BaseModel):
    score: float = Field(..., ge=0, le=100)
    feedback: str = ""


class Analysis(BaseModel):
    """Fixed-shape interview performance report."""
    overall_score: float = Field(..., ge=0, le=100)
    communication_score: float = Field(..., ge=0, le=100)
    technical_score: float = Field(..., ge=0, le=100)
    confidence_score: float = Field(..., ge=0, le=100)

    sentiment_analysis: SentimentSplit
    keyword_matches: List[str] = Field(default_factory=list)
    response_quality: Literal["excellent", "good", "average", "poor"]

    eye_contact: SubMetric
    body_language: SubMetric
    speaking_pace: SubMetric

    average_response_time: float = Field(..., ge=0, description="Seconds")
    total_speaking_time: float = Field(..., ge=0, description="Seconds")
    filler_words_count: int = Field(..., ge=0)

    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    ai_summary: str = ""
    detailed_feedback: str = ""
