"""
Model router for selecting the model used by each AI feature.
"""
import logging
from typing import Optional

from app.core.config import OPENAI_API_KEY
from app.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

# Feature -> model mapping
MODEL_ROUTING = {
    "interview_analysis": "gpt-4o-mini",
    "resume_parse": "gpt-4o-mini",
    "resume_recommendations": "gpt-4o-mini",
    "resume_ats": "gpt-4o-mini",
    "job_comparison": "gpt-4o-mini",
    "career_chat": "gpt-4o-mini",
    "interview_questions": "gpt-4o-mini",
    "resume_feedback": "gpt-4o-mini",
    "job_matching": "gpt-4o-mini",
}

DEFAULT_MODEL = "gpt-4o-mini"

_provider: Optional[LLMProvider] = None


def get_model_for_feature(feature: str) -> str:
    """Get the model identifier for a feature."""
    return MODEL_ROUTING.get(feature, DEFAULT_MODEL)


def is_model_available() -> bool:
    """Check if a provider is configured (OpenAI key present)."""
    return bool(OPENAI_API_KEY)


def get_llm_provider() -> Optional[LLMProvider]:
    """
    FastAPI dependency returning the shared provider, or None when no key is configured.

    Tests override this dependency with a fake provider.
    """
    global _provider
    if _provider is None and is_model_available():
        from app.llm.openai_provider import OpenAIProvider
        _provider = OpenAIProvider()
    return _provider
