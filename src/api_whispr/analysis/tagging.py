"""Rule-based endpoint tagging, used when the LLM tag is unavailable."""

import re
from typing import Literal

from pydantic import BaseModel

from api_whispr.spec.base import Endpoint

Confidence = Literal["high", "medium", "low"]

# Checked in order; the first match wins.
TAG_PATTERNS: list[tuple[re.Pattern, str, Confidence]] = [
    (re.compile(r"auth|login|token|signin|signup|register"), "Authentication", "high"),
    (re.compile(r"user|profile|account"), "Users", "high"),
    (re.compile(r"order|purchase|buy|cart"), "Orders", "high"),
    (re.compile(r"payment|billing|invoice|charge"), "Payments", "high"),
    (re.compile(r"product|item|catalog|inventory"), "Products", "high"),
    (re.compile(r"admin|manage|setting|config"), "Administration", "medium"),
    (re.compile(r"search|query|find"), "Search", "medium"),
    (re.compile(r"notification|message|alert"), "Notifications", "medium"),
    (re.compile(r"report|analytics|stats"), "Reports", "medium"),
    (re.compile(r"upload|download|file|document"), "File Management", "medium"),
    (re.compile(r"webhook|callback|event"), "Webhooks", "medium"),
]


class TagSuggestion(BaseModel):
    tag: str
    confidence: Confidence
    reasoning: str


def suggest_tag(endpoint: Endpoint) -> TagSuggestion:
    """Guess a tag from the endpoint's path, summary and description."""
    path = endpoint.path.lower()

    for pattern, tag, confidence in TAG_PATTERNS:
        if pattern.search(path) or pattern.search(endpoint.summary) or pattern.search(endpoint.description):
            return TagSuggestion(
                tag=tag,
                confidence=confidence,
                reasoning="Generated based on path pattern and endpoint information",
            )

    parts = [part for part in path.split("/") if part and "{" not in part]
    if parts:
        main_part = parts[1] if len(parts) > 1 else parts[0]
        return TagSuggestion(
            tag=main_part[:1].upper() + main_part[1:],
            confidence="low",
            reasoning="Generated from main path component",
        )

    return TagSuggestion(
        tag="General",
        confidence="low",
        reasoning="Default tag when no clear pattern is identified",
    )
