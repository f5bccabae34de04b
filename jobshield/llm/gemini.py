"""
Gemini Provider — Google Gemini API implementation.

Uses the google.genai SDK. The client is created on first use, so the
app starts without an API key and only fails on an actual LLM call.

Serves both collaborators:
  - text generation (JSON mode) for the AI scorer
  - image transcription for the OCR text extractor

Transient errors are retried with exponential backoff. After repeated
failures a circuit breaker fails fast for a cool-down period so callers
drop to their deterministic fallback instead of waiting on timeouts.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import Any, Optional

from google import genai
from google.genai import types

from jobshield.llm import LLMProvider

logger = logging.getLogger("jobshield.llm.gemini")

_CB_FAILURE_THRESHOLD = 3   # Open after this many consecutive failures
_CB_RECOVERY_TIMEOUT = 60   # Seconds before a trial call is allowed

_TRANSIENT_MARKERS = (
    "429", "500", "503", "rate", "quota", "timeout",
    "connection", "unavailable", "overloaded",
)

OCR_PROMPT = (
    "Transcribe all readable text in this image of a job posting. "
    "Return only the text, preserving line breaks. "
    "Return an empty response if there is no text."
)


class CircuitOpenError(Exception):
    """Raised when the circuit breaker is open."""


class CircuitBreaker:
    """closed → open → half-open → closed."""

    def __init__(
        self,
        failure_threshold: int = _CB_FAILURE_THRESHOLD,
        recovery_timeout: float = _CB_RECOVERY_TIMEOUT,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._failures = 0
        self._opened_at: float = 0
        self._state = "closed"

    @property
    def state(self) -> str:
        if self._state == "open" and time.monotonic() - self._opened_at >= self.recovery_timeout:
            self._state = "half-open"
        return self._state

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    def record_success(self) -> None:
        self._failures = 0
        self._state = "closed"

    def record_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold:
            self._state = "open"
            self._opened_at = time.monotonic()
            logger.warning(
                "Circuit breaker OPEN after %d consecutive Gemini failures; "
                "using fallbacks for %ds",
                self._failures, self.recovery_timeout,
            )


def _is_transient(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


class GeminiProvider(LLMProvider):
    """Google Gemini LLM provider with retry and circuit breaker."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self._api_key = api_key or os.getenv("GEMINI_API_KEY", "")
        self._model = model or os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self._client: Optional[genai.Client] = None
        self.circuit_breaker = CircuitBreaker()

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError(
                    "GEMINI_API_KEY not set. Get one from "
                    "https://aistudio.google.com/apikey"
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def _call(
        self,
        contents: Any,
        config: types.GenerateContentConfig,
        max_retries: int = 3,
    ) -> str:
        if self.circuit_breaker.is_open:
            raise CircuitOpenError("Gemini circuit breaker is open")

        client = self._get_client()
        for attempt in range(max_retries):
            try:
                response = await client.aio.models.generate_content(
                    model=self._model,
                    contents=contents,
                    config=config,
                )
            except Exception as e:
                if _is_transient(e) and attempt < max_retries - 1:
                    await asyncio.sleep(2 ** attempt)
                    continue
                self.circuit_breaker.record_failure()
                raise
            self.circuit_breaker.record_success()
            return response.text or ""

        raise RuntimeError("Gemini call exhausted retries")

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> str:
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
        )
        if json_mode:
            config.response_mime_type = "application/json"
        return await self._call(prompt, config)

    async def extract_text_from_image(self, image: bytes, mime_type: str) -> str:
        config = types.GenerateContentConfig(temperature=0.0)
        contents = [
            types.Part.from_bytes(data=image, mime_type=mime_type),
            OCR_PROMPT,
        ]
        return (await self._call(contents, config)).strip()
