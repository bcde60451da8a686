"""LLM client with Instructor integration for structured responses.

This module provides a narrow interface for structured generation (prompt and
Pydantic output model in, validated model out) and an implementation that wraps
OpenAI's async API with Instructor, with request/response logging.

Retries, backoff and rate limiting are left to the underlying libraries; the
client issues exactly one Instructor call per ``generate``.
"""

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional, Type, TypeVar

import instructor
from langfuse import observe
from openai import AsyncOpenAI
from pydantic import BaseModel

from adaptive_scenarios import constants

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class TokenUsage(BaseModel):
    """Token usage statistics for a single request."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cached_tokens: int = 0  # Prompt cache hits


class StructuredGenerationClient(ABC):
    """Structured generation service: prompt + output model in, validated model out.

    Implementations raise on any failure (network, provider, or a result that
    does not conform to ``response_model``).
    """

    @abstractmethod
    async def generate(self, prompt: str, response_model: Type[T]) -> T:
        pass


class LLMClient(StructuredGenerationClient):
    """Instructor-wrapped async OpenAI client.

    Features:
    - Structured response generation with Pydantic model validation
    - Request/response logging (prompt hash, tokens, latency)
    - Optional Langfuse tracing
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: Optional[int] = None,
        enable_langfuse: Optional[bool] = None,
    ):
        """Initialize LLM client with Instructor.

        Args:
            api_key: OpenAI API key (if None, uses OPENAI_API_KEY env var)
            model: OpenAI model to use (if None, uses LLM_MODEL env var or defaults to gpt-4o-mini)
            temperature: Sampling temperature (if None, uses LLM_TEMPERATURE)
            max_tokens: Maximum tokens to generate (if None, uses LLM_MAX_TOKENS)
            max_retries: Instructor validation re-asks (if None, uses LLM_MAX_RETRIES)
            enable_langfuse: Use the Langfuse-wrapped OpenAI client (if None, uses LANGFUSE_ENABLED)
        """
        self.model = model or constants.LLM_MODEL
        self.temperature = constants.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or constants.LLM_MAX_TOKENS
        self.max_retries = constants.LLM_MAX_RETRIES if max_retries is None else max_retries
        self.enable_langfuse = (
            constants.LANGFUSE_ENABLED if enable_langfuse is None else enable_langfuse
        )

        api_key = api_key or constants.OPENAI_API_KEY
        if self.enable_langfuse:
            # Langfuse-wrapped client for automatic tracing
            from langfuse.openai import AsyncOpenAI as TracedAsyncOpenAI

            client = TracedAsyncOpenAI(api_key=api_key)
            logger.info("Langfuse tracing enabled for OpenAI")
        else:
            client = AsyncOpenAI(api_key=api_key)

        # Wrap with Instructor for structured outputs
        self.client = instructor.from_openai(client)

        logger.info(f"LLMClient initialized with model={self.model}")

    def _build_params(self, prompt: str, response_model: Type[T]) -> dict:
        params: dict = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "response_model": response_model,
            "max_retries": self.max_retries,
            "temperature": self.temperature,
        }

        # GPT-5 and o* models use max_completion_tokens instead of max_tokens
        # and only the default temperature (1) is supported
        if self.model.startswith(("gpt-5", "o1", "o3", "o4")):
            params["max_completion_tokens"] = self.max_tokens
            params["temperature"] = 1.0
        else:
            params["max_tokens"] = self.max_tokens
        return params

    @observe(as_type="generation")
    async def generate(self, prompt: str, response_model: Type[T]) -> T:
        """Generate a structured response validated against ``response_model``.

        Args:
            prompt: User prompt/instruction
            response_model: Pydantic model class for structured output

        Returns:
            Validated Pydantic model instance

        Raises:
            Exception: Any provider, network or validation error, unchanged
        """
        prompt_hash = self._hash_prompt(prompt)
        logger.info(
            f"Generating structured response: model={self.model}, "
            f"response_model={response_model.__name__}, "
            f"prompt_hash={prompt_hash}"
        )

        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                **self._build_params(prompt, response_model)
            )
        except Exception as e:
            self._log_response(
                prompt_hash=prompt_hash,
                response_model=response_model.__name__,
                latency_ms=(time.time() - start_time) * 1000,
                success=False,
                error=str(e)[:200],
            )
            raise

        self._log_response(
            prompt_hash=prompt_hash,
            response_model=response_model.__name__,
            latency_ms=(time.time() - start_time) * 1000,
            success=True,
            usage=self._extract_usage(response),
        )
        return response

    def _extract_usage(self, response: Any) -> TokenUsage:
        """Extract token usage from the raw completion Instructor attaches to the response."""
        usage = TokenUsage()

        raw_response = getattr(response, "_raw_response", None)
        raw_usage = getattr(raw_response, "usage", None)
        if raw_usage is None:
            return usage

        usage.prompt_tokens = getattr(raw_usage, "prompt_tokens", 0) or 0
        usage.completion_tokens = getattr(raw_usage, "completion_tokens", 0) or 0
        usage.total_tokens = getattr(raw_usage, "total_tokens", 0) or 0

        details = getattr(raw_usage, "prompt_tokens_details", None)
        if details is not None:
            usage.cached_tokens = getattr(details, "cached_tokens", 0) or 0

        return usage

    def _hash_prompt(self, prompt: str) -> str:
        """First 16 characters of the prompt's SHA256, for logging."""
        return hashlib.sha256(prompt.encode()).hexdigest()[:16]

    def _log_response(
        self,
        prompt_hash: str,
        response_model: str,
        latency_ms: float,
        success: bool,
        usage: Optional[TokenUsage] = None,
        error: Optional[str] = None,
    ) -> None:
        log_data = {
            "prompt_hash": prompt_hash,
            "response_model": response_model,
            "model": self.model,
            "latency_ms": round(latency_ms, 2),
            "success": success,
        }

        if usage:
            log_data["tokens"] = {
                "prompt": usage.prompt_tokens,
                "completion": usage.completion_tokens,
                "total": usage.total_tokens,
                "cached": usage.cached_tokens,
            }

        if error:
            log_data["error"] = error

        if success:
            logger.info(f"LLM response: {log_data}")
        else:
            logger.warning(f"LLM response failed: {log_data}")
