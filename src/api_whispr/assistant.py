"""Spec assistant — builds prompts around a spec and reads the LLM's replies.

Health scores, endpoint tags, diagrams and spec comparisons fall back to
local versions whenever the LLM call fails or returns something unusable.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from api_whispr.analysis.compare import SpecComparison, compare_endpoints
from api_whispr.analysis.fixes import SpecFix, fallback_fix, fix_instruction
from api_whispr.analysis.health import HealthScore, calculate_local_score
from api_whispr.analysis.tagging import TagSuggestion, suggest_tag
from api_whispr.config import get_settings
from api_whispr.generator.diagrams import FLOW_TEMPLATES, Diagram, extract_mermaid, fallback_diagram
from api_whispr.llm import LlmClient, parse_json_reply
from api_whispr.spec.base import Endpoint, SpecWarning
from api_whispr.spec.chunk import select_best_chunk, split_for_budget, to_json

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"

# Truncation limits for spec text embedded in prompts
HEALTH_SPEC_CHARS = 8000
QUESTIONS_SPEC_CHARS = 4000
HEALTH_ENDPOINT_LINES = 10
DIAGRAM_SPEC_CHARS = 6000
FIX_SPEC_CHARS = 6000
COMPARE_SPEC_CHARS = 8000

DEFAULT_QUESTIONS = [
    "How do I authenticate with this API?",
    "What are the main endpoints and their purposes?",
    "How do I handle errors and status codes?",
    "What are the required parameters for creating resources?",
    "How do I paginate through large datasets?",
]


def _load_prompt(name: str) -> str:
    return (PROMPTS_DIR / f"{name}.md").read_text(encoding="utf-8")


class SpecAssistant:
    """Answers questions about a spec, scores it and drafts diagrams, diffs and fixes."""

    def __init__(self, model: str | None = None, max_tokens: int | None = None):
        self.client = LlmClient(model=model)
        self.max_tokens = max_tokens or get_settings().max_tokens

    def ask(self, question: str, doc: dict | None = None, raw_text: str | None = None) -> str:
        """Answer ``question`` using the spec (or raw documentation text) as context.

        Large OpenAPI documents are split to the token budget and only the
        chunk most relevant to the question is sent.
        """
        if isinstance(doc, dict):
            chunks = split_for_budget(doc, self.max_tokens)
            context = select_best_chunk(chunks, question)
            logger.info("Using 1 of %d spec chunks as context", len(chunks))
            user_prompt = (
                f"OpenAPI Specification:\n{to_json(context, indent=2)}\n\n"
                f"Question: {question}\n\n"
                "Please analyze the specification and provide a helpful answer "
                "with relevant details and examples."
            )
            return self.client.call(system=_load_prompt("ask_openapi"), user=user_prompt)

        if raw_text:
            user_prompt = f"API Documentation:\n{raw_text}\n\nQuestion: {question}"
            return self.client.call(system=_load_prompt("ask_document"), user=user_prompt)

        return self.client.call(system=_load_prompt("ask_general"), user=question)

    def health_score(self, doc: Any, endpoints: list[Endpoint], filename: str | None = None) -> HealthScore:
        """Score the spec with the LLM, falling back to the local calculation."""
        endpoint_lines = "\n".join(
            f"{ep.method} {ep.path} - {ep.summary or 'No summary'}"
            for ep in endpoints[:HEALTH_ENDPOINT_LINES]
        )
        user_prompt = (
            "Analyze this OpenAPI specification and calculate a health score:\n\n"
            f"Filename: {filename or 'unknown'}\n"
            f"Endpoints Count: {len(endpoints)}\n\n"
            f"Specification:\n{to_json(doc, indent=2)[:HEALTH_SPEC_CHARS]}\n\n"
            f"Endpoints Summary:\n{endpoint_lines}"
        )

        try:
            reply = self.client.call(system=_load_prompt("health_score"), user=user_prompt)
        except Exception as e:
            logger.warning("Health score LLM call failed, using local calculation: %s", e)
            return calculate_local_score(doc, endpoints)

        parsed = parse_json_reply(reply)
        if parsed is not None:
            try:
                return HealthScore.model_validate(parsed)
            except ValidationError:
                logger.info("Health score reply has unexpected shape")

        logger.info("Using local health score calculation")
        return calculate_local_score(doc, endpoints)

    def generate_tag(self, endpoint: Endpoint) -> TagSuggestion:
        """Suggest a tag for ``endpoint`` with the LLM, falling back to the rule table."""
        user_prompt = (
            "Generate an appropriate tag for this OpenAPI endpoint:\n\n"
            f"Path: {endpoint.path}\n"
            f"Method: {endpoint.method}\n"
            f"Summary: {endpoint.summary or 'Not provided'}\n"
            f"Description: {endpoint.description or 'Not provided'}\n"
            f"Operation ID: {endpoint.operation_id or 'Not provided'}"
        )

        try:
            reply = self.client.call(system=_load_prompt("endpoint_tag"), user=user_prompt)
        except Exception as e:
            logger.warning("Tag LLM call failed, using fallback: %s", e)
            return suggest_tag(endpoint)

        parsed = parse_json_reply(reply)
        if parsed is not None:
            try:
                return TagSuggestion.model_validate(parsed)
            except ValidationError:
                logger.info("Tag reply has unexpected shape")

        return suggest_tag(endpoint)

    def related_questions(self, doc: Any) -> list[str]:
        """Generate follow-up questions a developer might ask about the spec."""
        spec_text = doc if isinstance(doc, str) else to_json(doc, indent=2)
        reply = self.client.call(
            system=_load_prompt("questions"),
            user=f"Generate smart questions for this API specification:\n{spec_text[:QUESTIONS_SPEC_CHARS]}",
        )

        parsed = parse_json_reply(reply)
        questions = parsed.get("questions") if isinstance(parsed, dict) else None
        if not isinstance(questions, list) or not questions:
            return list(DEFAULT_QUESTIONS)
        return [str(q) for q in questions][:5]

    def generate_diagram(self, flow_type: str, doc: Any = None) -> Diagram:
        """Draw a Mermaid diagram of one of the ``FLOW_TEMPLATES`` flows.

        Any failure, including a call error, yields the generic fallback diagram.

        Raises:
            ValueError: if ``flow_type`` is not a known flow.
        """
        template = FLOW_TEMPLATES.get(flow_type)
        if template is None:
            raise ValueError(f"Invalid flow type: {flow_type}")

        system_prompt = _load_prompt("diagram").format(
            flow_prompt=template.prompt,
            diagram_type=template.diagram_type,
        )
        if doc:
            spec_text = doc if isinstance(doc, str) else to_json(doc, indent=2)
            user_prompt = f"Based on this API specification:\n{spec_text[:DIAGRAM_SPEC_CHARS]}"
        else:
            user_prompt = "Generate a generic diagram since no API spec was provided."

        try:
            reply = self.client.call(system=system_prompt, user=user_prompt)
        except Exception as e:
            logger.warning("Diagram LLM call failed, using fallback: %s", e)
            return fallback_diagram(flow_type, template.diagram_type)

        return Diagram(
            mermaid_code=extract_mermaid(reply),
            flow_type=flow_type,
            diagram_type=template.diagram_type,
            pattern=template.pattern,
        )

    def compare_specs(self, old_doc: Any, new_doc: Any) -> SpecComparison:
        """Compare two specs with the LLM, falling back to a local endpoint diff."""
        user_prompt = (
            "Compare these two OpenAPI specifications and provide a detailed analysis of differences:\n\n"
            f"ORIGINAL SPECIFICATION:\n{to_json(old_doc, indent=2)[:COMPARE_SPEC_CHARS]}\n\n"
            f"NEW SPECIFICATION:\n{to_json(new_doc, indent=2)[:COMPARE_SPEC_CHARS]}\n\n"
            "Please identify all differences in endpoints, parameters, methods, response schemas, "
            "and documentation."
        )

        try:
            reply = self.client.call(system=_load_prompt("compare_specs"), user=user_prompt)
        except Exception as e:
            logger.warning("Comparison LLM call failed, using local diff: %s", e)
            return compare_endpoints(old_doc, new_doc)

        parsed = parse_json_reply(reply)
        if isinstance(parsed, dict):
            # null arrays in the reply mean "none"
            for key in ("newEndpoints", "removedEndpoints", "modifiedEndpoints"):
                if parsed.get(key) is None:
                    parsed[key] = []
            try:
                return SpecComparison.model_validate(parsed)
            except ValidationError:
                logger.info("Comparison reply has unexpected shape")

        logger.info("Using local endpoint diff")
        return compare_endpoints(old_doc, new_doc)

    def spec_fix(self, warning: SpecWarning | str, doc: Any, filename: str | None = None) -> SpecFix:
        """Ask for a YAML patch that resolves ``warning``."""
        filename = filename or "specification"
        spec_text = doc if isinstance(doc, str) else to_json(doc, indent=2)
        user_prompt = (
            f"{fix_instruction(warning)}\n\n"
            f"OpenAPI Specification:\n{spec_text[:FIX_SPEC_CHARS]}\n\n"
            f"Filename: {filename}\n"
            f"Issue: {warning}"
        )
        reply = self.client.call(system=_load_prompt("spec_fix"), user=user_prompt)

        parsed = parse_json_reply(reply)
        if isinstance(parsed, dict):
            try:
                return SpecFix.model_validate(parsed)
            except ValidationError:
                logger.info("Spec fix reply has unexpected shape")

        return fallback_fix(warning, filename)
