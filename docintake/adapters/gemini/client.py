"""
Gemini Client - Classification oracle for extracted document text.

Authentication uses OAuth/ADC (Application Default Credentials); run
`gcloud auth application-default login` once. The client only generates
text/JSON; turning that JSON into trusted objects is the analysis
validator's job.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

import google.generativeai as genai
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docintake.config.errors import ErrorCode, LLMError

from .models import GeminiConfig, GeminiResponse

logger = logging.getLogger(__name__)

__all__ = ["GeminiClient", "RateLimitError", "GeminiAPIError"]


class RateLimitError(LLMError):
    """Rate limit exceeded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code=ErrorCode.LLM_RATE_LIMITED)


class GeminiAPIError(LLMError):
    """Gemini API error."""

    pass


class GeminiClient:
    """
    Gemini API client with rate limiting and retries.

    Example:
        >>> client = GeminiClient()
        >>> data = await client.generate_json("Classify this document: ...")
    """

    def __init__(self, config: GeminiConfig | None = None) -> None:
        """
        Initialize Gemini client.

        Args:
            config: Client configuration. Uses defaults if None.
        """
        self.config = config or GeminiConfig()

        # Rate limiting state
        self._request_times: list[float] = []
        self._rate_lock = asyncio.Lock()

        self._model: genai.GenerativeModel | None = None

        logger.info("GeminiClient initialized: model=%s", self.config.model)

    def _get_model(self) -> genai.GenerativeModel:
        """Get or create model instance."""
        if self._model is None:
            self._model = genai.GenerativeModel(
                model_name=self.config.model,
                generation_config={
                    "temperature": self.config.temperature,
                    "max_output_tokens": self.config.max_output_tokens,
                },
            )
        return self._model

    async def _check_rate_limit(self) -> None:
        """Enforce rate limiting."""
        async with self._rate_lock:
            now = time.time()
            # Drop requests older than 1 minute
            self._request_times = [t for t in self._request_times if now - t < 60]

            if len(self._request_times) >= self.config.rate_limit_rpm:
                wait_time = 60 - (now - self._request_times[0])
                if wait_time > 0:
                    logger.warning("Rate limit reached, waiting %.1fs", wait_time)
                    await asyncio.sleep(wait_time)

            self._request_times.append(now)

    @retry(
        retry=retry_if_exception_type((GeminiAPIError, ConnectionError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def generate(
        self,
        prompt: str,
        system_instruction: str | None = None,
        response_mime_type: str = "text/plain",
    ) -> GeminiResponse:
        """
        Generate text from prompt.

        Args:
            prompt: User prompt
            system_instruction: Optional system instruction
            response_mime_type: Response format ("text/plain" or "application/json")

        Raises:
            GeminiAPIError: API call failed
            RateLimitError: Rate limit exceeded
        """
        await self._check_rate_limit()

        try:
            model = self._get_model()

            contents = []
            if system_instruction:
                contents.append({"role": "user", "parts": [system_instruction]})
                contents.append({"role": "model", "parts": ["Understood."]})
            contents.append({"role": "user", "parts": [prompt]})

            response = await asyncio.to_thread(
                model.generate_content,
                contents,
                generation_config={"response_mime_type": response_mime_type},
                request_options={"timeout": self.config.timeout_seconds},
            )

            text = response.text if hasattr(response, "text") else str(response)

            usage = getattr(response, "usage_metadata", None)
            prompt_tokens = getattr(usage, "prompt_token_count", 0) if usage else 0
            completion_tokens = (
                getattr(usage, "candidates_token_count", 0) if usage else 0
            )

            return GeminiResponse(
                text=text,
                model=self.config.model,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            )

        except Exception as e:
            error_msg = str(e).lower()
            if "429" in error_msg or "rate limit" in error_msg or "quota" in error_msg:
                raise RateLimitError(f"Rate limit exceeded: {e}") from e
            raise GeminiAPIError(f"Gemini API error: {e}") from e

    async def generate_json(
        self,
        prompt: str,
        system_instruction: str | None = None,
    ) -> Any:
        """
        Generate a JSON response.

        The decoded value is returned as-is (not necessarily a dict); callers
        must validate it.

        Raises:
            LLMError: API failure or the response holds no JSON at all
        """
        response = await self.generate(
            prompt=prompt,
            system_instruction=system_instruction,
            response_mime_type="application/json",
        )

        try:
            return json.loads(response.text)
        except json.JSONDecodeError:
            # Models sometimes wrap JSON in prose or code fences
            text = response.text
            start = text.find("{")
            end = text.rfind("}") + 1
            if start >= 0 and end > start:
                try:
                    return json.loads(text[start:end])
                except json.JSONDecodeError:
                    pass
            raise LLMError(
                "Gemini response did not contain JSON",
                details={"preview": text[:200]},
                code=ErrorCode.ANALYSIS_INVALID_RESPONSE,
            )
