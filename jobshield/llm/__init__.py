"""
LLM Provider — Abstract Interface

All LLM calls go through this interface. Swap providers
by changing JOBSHIELD_AI_PROVIDER in env.

Required:  generate()
Optional:  extract_text_from_image(). Text-only providers keep the
           default, which raises NotImplementedError; callers that
           need vision (LLMTextExtractor) treat that as "no text".
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Optional


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> str:
        """Generate a text response from the LLM."""
        ...

    async def generate_json(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.3,
    ) -> dict:
        """Generate and parse a JSON response."""
        text = await self.generate(
            prompt=prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            json_mode=True,
        )
        # Strip markdown fences if the LLM wraps JSON in ```json blocks
        cleaned = text.strip()
        if cleaned.startswith("```"):
            cleaned = cleaned.split("\n", 1)[-1].rsplit("```", 1)[0].strip()
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"LLM returned invalid JSON: {e}. Raw response: {text[:300]}"
            ) from e
        if not isinstance(parsed, dict):
            raise ValueError(f"LLM returned JSON {type(parsed).__name__}, expected object")
        return parsed

    async def extract_text_from_image(self, image: bytes, mime_type: str) -> str:
        """
        Transcribe the text in an image.

        Optional capability. Override in vision-capable providers; the
        default raises NotImplementedError.
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not support image input"
        )
