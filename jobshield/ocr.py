"""
Text Extraction — OCR Collaborator

Pulls text out of an uploaded screenshot of a job posting so it can be
scored alongside any typed text. Extractors are total: on failure they
log and return an empty string.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from jobshield.llm import LLMProvider

logger = logging.getLogger(__name__)


class TextExtractor(ABC):
    name: str = "ocr"

    @abstractmethod
    async def extract_text(self, image: bytes, mime_type: str = "image/png") -> str:
        """Return the text in the image, possibly empty. Must not raise."""
        ...


class NullTextExtractor(TextExtractor):
    """Used when no vision-capable provider is configured."""

    name = "none"

    async def extract_text(self, image: bytes, mime_type: str = "image/png") -> str:
        return ""


class LLMTextExtractor(TextExtractor):
    """Transcribes images with a multimodal LLM provider."""

    name = "llm"

    def __init__(self, llm: LLMProvider):
        self._llm = llm

    async def extract_text(self, image: bytes, mime_type: str = "image/png") -> str:
        if not image:
            return ""
        try:
            return (await self._llm.extract_text_from_image(image, mime_type)).strip()
        except NotImplementedError:
            logger.warning("%s has no image support; no text extracted", type(self._llm).__name__)
            return ""
        except Exception as e:
            logger.warning(
                "Text extraction failed: %s", e,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return ""


def combine_text(job_text: Optional[str], extracted_text: Optional[str]) -> str:
    """Typed text and OCR text joined by a newline, trimmed."""
    return f"{job_text or ''}\n{extracted_text or ''}".strip()


def get_text_extractor(settings=None) -> TextExtractor:
    """Factory — LLM transcription when an LLM is configured."""
    if settings is None:
        from jobshield.config import settings
    if not settings.ai_enabled:
        return NullTextExtractor()
    from jobshield.llm.factory import get_provider
    return LLMTextExtractor(get_provider(settings.AI_PROVIDER))
