"""
Interview performance analysis.

Two interchangeable strategies produce the same ``Analysis`` shape:

* ``SynthesizedAnalysis`` draws score-correlated values from the fixed ranges
  below. It needs no AI collaborator and is always available.
* ``DelegatedAnalysis`` asks the AI collaborator for scores and derives the
  remaining fields from them. Any provider, timeout, parse or schema failure
  falls back to synthesis; callers never see the error.

``get_analysis_strategy`` picks one according to ``ANALYSIS_STRATEGY``.
"""
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, List

from pydantic import ValidationError as PydanticValidationError

from app.core.config import ANALYSIS_STRATEGY
from app.core.errors import ProviderError, PayloadParseError
from app.llm.json_payload import parse_json_payload
from app.llm.provider import LLMProvider
from app.llm.router import get_model_for_feature
from app.schemas.analysis import Analysis, SentimentSplit, SubMetric

logger = logging.getLogger(__name__)

# ============================================
# Synthesis constants
# ============================================

OVERALL_SCORE_RANGE = (70, 95)
SUB_SCORE_JITTER = 5
SCORE_BOUNDS = (0, 100)

# Independent draws; the three shares are not renormalized
SENTIMENT_RANGES = {
    "positive": (0.6, 0.9),
    "neutral": (0.2, 0.4),
    "negative": (0.05, 0.2),
}

FILLER_WORDS_RANGE = (5, 20)
AVERAGE_RESPONSE_TIME_RANGE = (5, 15)  # seconds
SPEAKING_SHARE = 0.6  # of the scheduled duration
DEFAULT_DURATION_MINUTES = 30

EXCELLENT_THRESHOLD = 85
GOOD_THRESHOLD = 75

KEYWORDS = ["problem-solving", "communication", "teamwork"]

STRENGTHS = [
    "Good technical knowledge",
    "Clear communication",
    "Professional demeanor",
    "Problem-solving ability",
]

WEAKNESSES = [
    "Could provide more specific examples",
    "Time management in responses",
]

RECOMMENDATIONS = [
    "Practice STAR method for behavioral questions",
    "Work on providing more detailed technical explanations",
]

SUMMARY = (
    "The candidate demonstrated good understanding of the role requirements "
    "and communicated effectively throughout the interview."
)

DETAILED_FEEDBACK = (
    "Overall, the candidate performed well. Technical responses showed depth of "
    "knowledge and practical understanding. Communication was clear and professional."
)

EYE_CONTACT_FEEDBACK = "Maintained good eye contact throughout the interview"
BODY_LANGUAGE_FEEDBACK = "Professional posture and gestures"
SPEAKING_PACE_FEEDBACK = "Clear and well-paced communication"

# Timing values used when the AI collaborator supplied the scores
DELEGATED_AVERAGE_RESPONSE_TIME = 8
DELEGATED_FILLER_WORDS = 10
DELEGATED_FALLBACK_SCORE = 75

ANALYSIS_SYSTEM_PROMPT = "You are an expert interview analyst. Provide detailed performance analysis in JSON format."


@dataclass
class AnalysisContext:
    """Interview metadata an analysis is built from."""
    duration: int = DEFAULT_DURATION_MINUTES  # minutes
    job_title: Optional[str] = None
    candidate_name: Optional[str] = None
    questions: List[str] = field(default_factory=list)
    recruiter_notes: Optional[str] = None

    @classmethod
    def from_interview(cls, interview) -> "AnalysisContext":
        return cls(
            duration=interview.duration or DEFAULT_DURATION_MINUTES,
            job_title=interview.job.title if interview.job else None,
            candidate_name=interview.student.name if interview.student else None,
            questions=[q.get("question", "") for q in (interview.questions or [])],
            recruiter_notes=interview.recruiter_notes,
        )


def clamp_score(value: float) -> float:
    low, high = SCORE_BOUNDS
    return max(low, min(high, value))


def quality_label(overall_score: float) -> str:
    if overall_score >= EXCELLENT_THRESHOLD:
        return "excellent"
    if overall_score >= GOOD_THRESHOLD:
        return "good"
    return "average"


def speaking_time(duration_minutes: int) -> float:
    return (duration_minutes or DEFAULT_DURATION_MINUTES) * 60 * SPEAKING_SHARE


class AnalysisStrategy(ABC):
    """Produces an Analysis for an interview."""

    name = "base"

    @abstractmethod
    def generate(self, context: AnalysisContext) -> Analysis:
        pass


class SynthesizedAnalysis(AnalysisStrategy):
    """Score-correlated synthesis from fixed ranges. Pass ``rng`` for reproducible output."""

    name = "synthesized"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _sub_score(self, overall: int) -> float:
        return clamp_score(overall + self.rng.randint(-SUB_SCORE_JITTER, SUB_SCORE_JITTER))

    def _share(self, key: str) -> float:
        low, high = SENTIMENT_RANGES[key]
        return round(self.rng.uniform(low, high), 3)

    def generate(self, context: AnalysisContext) -> Analysis:
        overall = self.rng.randint(*OVERALL_SCORE_RANGE)

        return Analysis(
            overall_score=overall,
            communication_score=self._sub_score(overall),
            technical_score=self._sub_score(overall),
            confidence_score=self._sub_score(overall),
            sentiment_analysis=SentimentSplit(
                positive=self._share("positive"),
                neutral=self._share("neutral"),
                negative=self._share("negative"),
            ),
            keyword_matches=list(KEYWORDS),
            response_quality=quality_label(overall),
            eye_contact=SubMetric(score=self._sub_score(overall), feedback=EYE_CONTACT_FEEDBACK),
            body_language=SubMetric(score=self._sub_score(overall), feedback=BODY_LANGUAGE_FEEDBACK),
            speaking_pace=SubMetric(score=self._sub_score(overall), feedback=SPEAKING_PACE_FEEDBACK),
            average_response_time=self.rng.randint(*AVERAGE_RESPONSE_TIME_RANGE),
            total_speaking_time=speaking_time(context.duration),
            filler_words_count=self.rng.randint(*FILLER_WORDS_RANGE),
            strengths=list(STRENGTHS),
            weaknesses=list(WEAKNESSES),
            recommendations=list(RECOMMENDATIONS),
            ai_summary=SUMMARY,
            detailed_feedback=DETAILED_FEEDBACK,
        )


def build_analysis_prompt(context: AnalysisContext) -> str:
    questions = "\n".join(f"- {q}" for q in context.questions if q) or "None recorded"
    return f"""Analyze this interview and provide a performance report.

Job Title: {context.job_title or "Not specified"}
Candidate: {context.candidate_name or "Not specified"}
Duration: {context.duration} minutes

Questions Asked:
{questions}

Notes: {context.recruiter_notes or "No notes"}

Provide ONLY a JSON object with:
{{
  "overall_score": <0-100>,
  "communication_score": <0-100>,
  "technical_score": <0-100>,
  "confidence_score": <0-100>,
  "sentiment_analysis": {{"positive": <0-1>, "neutral": <0-1>, "negative": <0-1>}},
  "strengths": [<3-5 strengths>],
  "weaknesses": [<2-3 weaknesses>],
  "recommendations": [<3-5 recommendations>],
  "ai_summary": "<brief summary>",
  "detailed_feedback": "<detailed feedback>"
}}"""


class DelegatedAnalysis(AnalysisStrategy):
    """Asks the AI collaborator; falls back to ``fallback`` on any failure."""

    name = "delegated"

    def __init__(self, provider: Optional[LLMProvider], fallback: Optional[AnalysisStrategy] = None):
        self.provider = provider
        self.fallback = fallback or SynthesizedAnalysis()

    def _from_reply(self, data: dict, context: AnalysisContext) -> Analysis:
        overall = float(data["overall_score"])
        communication = float(data.get("communication_score", overall))
        confidence = float(data.get("confidence_score", DELEGATED_FALLBACK_SCORE))

        return Analysis(
            overall_score=overall,
            communication_score=communication,
            technical_score=float(data.get("technical_score", overall)),
            confidence_score=confidence,
            sentiment_analysis=data.get("sentiment_analysis") or {},
            keyword_matches=list(KEYWORDS),
            response_quality=quality_label(overall),
            eye_contact=SubMetric(score=confidence, feedback="Based on interview performance"),
            body_language=SubMetric(score=confidence, feedback="Professional demeanor observed"),
            speaking_pace=SubMetric(score=communication, feedback="Clear communication"),
            average_response_time=DELEGATED_AVERAGE_RESPONSE_TIME,
            total_speaking_time=speaking_time(context.duration),
            filler_words_count=DELEGATED_FILLER_WORDS,
            strengths=data.get("strengths") or [],
            weaknesses=data.get("weaknesses") or [],
            recommendations=data.get("recommendations") or [],
            ai_summary=data.get("ai_summary") or "",
            detailed_feedback=data.get("detailed_feedback") or "",
        )

    def generate(self, context: AnalysisContext) -> Analysis:
        if self.provider is None:
            logger.info("No AI provider configured, synthesizing interview analysis")
            return self.fallback.generate(context)

        try:
            reply = self.provider.generate(
                build_analysis_prompt(context),
                model=get_model_for_feature("interview_analysis"),
                system=ANALYSIS_SYSTEM_PROMPT,
                max_tokens=1000,
            )
            payload = parse_json_payload(reply)
            return self._from_reply(payload.data, context)
        except (ProviderError, PayloadParseError) as e:
            logger.warning(f"AI interview analysis failed ({e.kind}: {e.message}), synthesizing instead")
        except (PydanticValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"AI interview analysis had unusable shape ({type(e).__name__}), synthesizing instead")
        return self.fallback.generate(context)


def get_analysis_strategy(
    provider: Optional[LLMProvider] = None,
    rng: Optional[random.Random] = None,
    strategy: Optional[str] = None,
) -> AnalysisStrategy:
    """Strategy named by ``strategy`` or ANALYSIS_STRATEGY; unknown names synthesize."""
    chosen = (strategy or ANALYSIS_STRATEGY).lower()
    synthesized = SynthesizedAnalysis(rng)
    if chosen == DelegatedAnalysis.name:
        return DelegatedAnalysis(provider, fallback=synthesized)
    if chosen != SynthesizedAnalysis.name:
        logger.warning(f"Unknown ANALYSIS_STRATEGY={chosen!r}, using synthesized")
    return synthesized
