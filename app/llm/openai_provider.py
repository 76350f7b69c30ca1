"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict
from openai import OpenAI, APIError, APIStatusError, APITimeoutError

from app.core.config import OPENAI_API_KEY, AI_TIMEOUT_SECONDS
from app.core.errors import ProviderError, ProviderTimeoutError
from app.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""

    def __init__(self, api_key: Optional[str] = None, timeout: float = AI_TIMEOUT_SECONDS):
        """Initialize OpenAI client."""
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        # max_retries=0: a failed call surfaces immediately, callers decide on fallback
        self.client = OpenAI(api_key=self.api_key, timeout=timeout, max_retries=0)
        logger.info("OpenAI provider initialized")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion."""
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 2000,
                **kwargs
            )
        except APITimeoutError as e:
            logger.error(f"OpenAI request timed out: {e}")
            raise ProviderTimeoutError("AI service timed out. Please try again later.") from e
        except APIStatusError as e:
            logger.error(f"OpenAI API error: status={e.status_code} {e.message}")
            raise ProviderError(f"AI service error: {e.message}", status=e.status_code) from e
        except APIError as e:
            logger.error(f"OpenAI API error: {e}", exc_info=True)
            raise ProviderError("AI service temporarily unavailable. Please try again later.") from e

        content = response.choices[0].message.content or ""
        usage = response.usage
        return LLMResponse(
            content=content,
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            model=model,
            metadata={
                "finish_reason": response.choices[0].finish_reason,
            }
        )
