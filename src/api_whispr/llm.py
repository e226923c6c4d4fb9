"""LLM client wrapper around litellm.

Provides a unified interface for calling any LLM model supported by litellm,
plus helpers for reading JSON out of model replies.
"""

import json
import logging
import re
from typing import Any

from litellm import completion

from api_whispr.config import get_settings

logger = logging.getLogger(__name__)


class LlmClient:
    """Wrapper for LLM API calls via litellm."""

    def __init__(self, model: str | None = None, temperature: float | None = None, max_tokens: int | None = None):
        settings = get_settings()
        self.model = model or settings.model
        self.temperature = settings.temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.completion_tokens

    def call(self, system: str, user: str) -> str:
        """Send a system+user message to the LLM and return the response text."""
        response = completion(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""


def extract_json(text: str) -> str:
    """Extract JSON from a response that might contain Markdown code blocks."""
    match = re.search(r"```(?:json)?\s*\n(.*?)```", text, re.DOTALL)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_reply(text: str | None) -> Any:
    """Parse a model reply as JSON, returning None when it is not valid JSON."""
    if not text:
        return None
    try:
        return json.loads(extract_json(text))
    except ValueError:
        logger.info("LLM reply is not valid JSON")
        return None
