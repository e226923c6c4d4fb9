"""Fix instructions for documentation-quality warnings."""

from pydantic import BaseModel, ConfigDict, Field

from api_whispr.spec.base import SpecWarning, WarningKind

FIX_INSTRUCTIONS = {
    WarningKind.MISSING_TAGS: (
        "Fix missing tags: Analyze the endpoints in this OpenAPI spec and add appropriate, "
        "meaningful tags for categorization. Use tags like \"Authentication\", \"Users\", "
        "\"Orders\", \"Payments\", etc. based on the endpoint functionality."
    ),
    WarningKind.MISSING_SUMMARY: (
        "Fix missing summaries/descriptions: Add concise, professional summaries and "
        "descriptions to endpoints that are missing them. Make them helpful for developers."
    ),
    WarningKind.NO_SERVERS: (
        "Fix missing servers: Add a proper servers section with a realistic base URL. "
        "Use https://api.example.com as the base URL if no specific domain is apparent."
    ),
}


class SpecFix(BaseModel):
    """A YAML patch addressing one warning."""

    model_config = ConfigDict(populate_by_name=True)

    patch: str
    explanation: str = ""
    affected_paths: list[str] = Field(default=[], alias="affectedPaths")


def warning_kind(warning: SpecWarning | str) -> WarningKind | None:
    """Classify a warning, including free-text ones typed by a user."""
    if isinstance(warning, SpecWarning):
        return warning.kind
    text = warning.lower()
    if "missing tags" in text:
        return WarningKind.MISSING_TAGS
    if "missing summary" in text or "missing description" in text:
        return WarningKind.MISSING_SUMMARY
    if "no servers defined" in text:
        return WarningKind.NO_SERVERS
    return None


def fix_instruction(warning: SpecWarning | str) -> str:
    kind = warning_kind(warning)
    if kind is not None:
        return FIX_INSTRUCTIONS[kind]
    return (
        f"Fix the following OpenAPI specification issue: {warning}. "
        "Provide a targeted solution that follows OpenAPI 3.0 best practices."
    )


def fallback_fix(warning: SpecWarning | str, filename: str) -> SpecFix:
    """Placeholder patch returned when the model reply cannot be parsed."""
    return SpecFix(
        patch=(
            f"# Auto-generated fix for: {warning}\n"
            "# Please review and modify as needed\n\n"
            "# Example fix:\n"
            "info:\n"
            f'  title: "{filename}"\n'
            f'  description: "API specification for {filename}"\n'
            '  version: "1.0.0"'
        ),
        explanation=(
            f"This is a basic fix for the issue: {warning}. Please review the patch "
            "and modify it according to your specific requirements."
        ),
    )
