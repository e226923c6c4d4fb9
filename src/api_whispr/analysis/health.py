"""Local API health score, used when the LLM score is unavailable.

The score is out of 100, split across five categories:
documentation (30), design (25), security (20), schemas (15) and
maintainability (10).
"""

import math
from typing import Any

from pydantic import BaseModel

from api_whispr.spec.base import Endpoint

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


class CategoryScore(BaseModel):
    score: int
    max: int
    issues: list[str] = []


class HealthScore(BaseModel):
    """Overall score with per-category breakdown."""

    score: int
    breakdown: dict[str, CategoryScore]
    improvements: list[str] = []
    strengths: list[str] = []


def _round(value: float) -> int:
    # half-up, not banker's rounding
    return math.floor(value + 0.5)


def _ratio(count: int, total: int) -> float:
    return count / max(total, 1)


def _has_examples(endpoint: Endpoint) -> bool:
    return any(isinstance(r, dict) and r.get("examples") for r in endpoint.responses.values())


def calculate_local_score(doc: Any, endpoints: list[Endpoint]) -> HealthScore:
    """Score a spec from its extracted endpoints and top-level metadata."""
    spec = doc if isinstance(doc, dict) else {}
    info = spec.get("info") if isinstance(spec.get("info"), dict) else {}
    total = len(endpoints)
    breakdown: dict[str, CategoryScore] = {}

    with_docs = sum(1 for ep in endpoints if ep.summary or ep.description)
    with_examples = sum(1 for ep in endpoints if _has_examples(ep))
    doc_score = min(30, _round(_ratio(with_docs, total) * 20 + _ratio(with_examples, total) * 10))
    breakdown["documentation"] = CategoryScore(score=doc_score, max=30)

    consistent_paths = all(ep.path.startswith("/") for ep in endpoints)
    proper_methods = all(ep.method in HTTP_METHODS for ep in endpoints)
    with_operation_ids = sum(1 for ep in endpoints if ep.operation_id)
    design_score = min(
        25,
        (10 if consistent_paths else 0)
        + (10 if proper_methods else 0)
        + _round(_ratio(with_operation_ids, total) * 5),
    )
    breakdown["design"] = CategoryScore(score=design_score, max=25)

    components = spec.get("components") if isinstance(spec.get("components"), dict) else {}
    has_security = bool(components.get("securitySchemes") or spec.get("security"))
    security_score = 20 if has_security else 0
    breakdown["security"] = CategoryScore(score=security_score, max=20)

    with_responses = sum(1 for ep in endpoints if ep.responses)
    with_params = sum(1 for ep in endpoints if ep.parameters)
    schema_score = min(15, _round(_ratio(with_responses, total) * 10 + _ratio(with_params, total) * 5))
    breakdown["schemas"] = CategoryScore(score=schema_score, max=15)

    maintainability_score = (
        (4 if info.get("version") else 0)
        + (4 if spec.get("servers") else 0)
        + (2 if info.get("contact") else 0)
    )
    breakdown["maintainability"] = CategoryScore(score=maintainability_score, max=10)

    score = min(100, doc_score + design_score + security_score + schema_score + maintainability_score)

    improvements = []
    if doc_score < 25:
        improvements.append("Add comprehensive descriptions and examples to endpoints")
    if design_score < 20:
        improvements.append("Follow RESTful design principles and consistent naming")
    if not has_security:
        improvements.append("Implement security schemes and authentication")
    if schema_score < 12:
        improvements.append("Define complete request/response schemas")
    if maintainability_score < 8:
        improvements.append("Add version info, server definitions, and contact details")

    if score >= 80:
        strengths = ["Well-documented API", "Good structure"]
    elif score >= 60:
        strengths = ["Decent organization"]
    else:
        strengths = ["Basic functionality present"]

    return HealthScore(
        score=score,
        breakdown=breakdown,
        improvements=improvements[:5],
        strengths=strengths,
    )
