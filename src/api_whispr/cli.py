"""CLI entry point for api-whispr."""

import json
import logging
from pathlib import Path

import click

from api_whispr.analysis.compare import compare_endpoints
from api_whispr.analysis.health import calculate_local_score
from api_whispr.analysis.tagging import suggest_tag
from api_whispr.assistant import SpecAssistant
from api_whispr.config import get_settings
from api_whispr.generator.diagrams import FLOW_TEMPLATES
from api_whispr.generator.snippets import LANGUAGES, format_snippet
from api_whispr.spec.base import param_location, param_type
from api_whispr.spec.chunk import estimate_tokens, split_for_budget, to_json
from api_whispr.spec.extract import collect_warnings, extract_endpoints
from api_whispr.spec.loader import FORMATS, LoadedSpec, SpecLoadError, load_spec_file

doc_argument = click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
format_option = click.option("--format", "fmt", default="auto", type=click.Choice(FORMATS), help="Document format.")
model_option = click.option("--model", default=None, help="LLM model to use.")


def _load(doc_path: Path, fmt: str) -> LoadedSpec:
    try:
        return load_spec_file(doc_path, fmt=fmt)
    except SpecLoadError as e:
        raise click.ClickException(str(e)) from e


def _load_openapi(doc_path: Path, fmt: str) -> LoadedSpec:
    loaded = _load(doc_path, fmt)
    if not isinstance(loaded.spec, dict):
        raise click.ClickException(f"{doc_path} is not a JSON or YAML API specification")
    return loaded


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Whispr — explore, chunk and score API specifications."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@doc_argument
@format_option
@click.option("--json", "as_json", is_flag=True, help="Print endpoints as JSON.")
def endpoints(doc_path: Path, fmt: str, as_json: bool):
    """List the endpoints of a specification."""
    loaded = _load(doc_path, fmt)
    found = extract_endpoints(loaded.spec)

    if as_json:
        click.echo(json.dumps([ep.model_dump(by_alias=True) for ep in found], indent=2, default=str))
        return

    click.echo(f"Found {len(found)} endpoints.")
    for ep in found:
        tags = f" [{', '.join(str(t) for t in ep.tags)}]" if ep.tags else ""
        click.echo(f"  {ep.method:<7} {ep.path} - {ep.summary}{tags}")
        for param in ep.parameters:
            if isinstance(param, dict) and "name" in param:
                required = ", required" if param.get("required") else ""
                click.echo(f"          {param['name']} ({param_location(param)}, {param_type(param)}{required})")


@main.command()
@doc_argument
@format_option
def warnings(doc_path: Path, fmt: str):
    """Report documentation-quality gaps."""
    loaded = _load(doc_path, fmt)
    found = collect_warnings(loaded.spec)

    if not found:
        click.echo("No warnings.")
        return
    for warning in found:
        click.echo(f"WARNING: {warning.message}")


@main.command()
@doc_argument
@format_option
@click.option("--max-tokens", type=int, default=None, help="Token budget per chunk.")
@click.option("-o", "--output", type=click.Path(file_okay=False, path_type=Path), help="Write each chunk as JSON into this directory.")
def chunks(doc_path: Path, fmt: str, max_tokens: int | None, output: Path | None):
    """Split a large specification into model-sized chunks."""
    loaded = _load_openapi(doc_path, fmt)
    budget = max_tokens or get_settings().max_tokens
    parts = split_for_budget(loaded.spec, budget)

    click.echo(f"Split into {len(parts)} chunk(s) (budget: {budget} tokens).")
    for i, chunk in enumerate(parts, start=1):
        text = to_json(chunk, indent=2)
        paths = chunk.get("paths") or {}
        click.echo(f"  chunk {i}: {len(paths)} path(s), ~{estimate_tokens(text)} tokens")
        if output:
            output.mkdir(parents=True, exist_ok=True)
            (output / f"chunk_{i:03d}.json").write_text(text, encoding="utf-8")

    if output:
        click.echo(f"Chunks saved to {output}")


@main.command()
@doc_argument
@click.argument("question")
@format_option
@model_option
@click.option("--max-tokens", type=int, default=None, help="Token budget for spec context.")
def ask(doc_path: Path, question: str, fmt: str, model: str | None, max_tokens: int | None):
    """Ask a question about a specification."""
    loaded = _load(doc_path, fmt)
    assistant = SpecAssistant(model=model, max_tokens=max_tokens)

    if isinstance(loaded.spec, dict):
        answer = assistant.ask(question, doc=loaded.spec)
    else:
        answer = assistant.ask(question, raw_text=loaded.raw_text)
    click.echo(answer)


@main.command()
@doc_argument
@format_option
@model_option
@click.option("--local", is_flag=True, help="Skip the LLM and use the local score.")
def health(doc_path: Path, fmt: str, model: str | None, local: bool):
    """Calculate a health score out of 100."""
    loaded = _load_openapi(doc_path, fmt)
    found = extract_endpoints(loaded.spec)

    if local:
        result = calculate_local_score(loaded.spec, found)
    else:
        result = SpecAssistant(model=model).health_score(loaded.spec, found, filename=loaded.filename)

    click.echo(f"Health score: {result.score}/100")
    for name, category in result.breakdown.items():
        click.echo(f"  {name:<16} {category.score}/{category.max}")
    for item in result.improvements:
        click.echo(f"  - {item}")


@main.command()
@doc_argument
@click.argument("method")
@click.argument("path")
@format_option
@click.option("--lang", default="curl", type=click.Choice(LANGUAGES), help="Snippet language.")
@click.option("--base-url", default=None, help="Base URL (defaults to the first server).")
def snippet(doc_path: Path, method: str, path: str, fmt: str, lang: str, base_url: str | None):
    """Print a request snippet for one endpoint."""
    loaded = _load_openapi(doc_path, fmt)
    matches = [ep for ep in extract_endpoints(loaded.spec) if ep.method == method.upper() and ep.path == path]
    if not matches:
        raise click.ClickException(f"Endpoint not found: {method.upper()} {path}")

    if base_url is None:
        servers = loaded.spec.get("servers")
        first = servers[0] if isinstance(servers, list) and servers and isinstance(servers[0], dict) else {}
        base_url = first.get("url") or get_settings().base_url

    click.echo(format_snippet(matches[0], lang, base_url=base_url.rstrip("/")))


@main.command()
@doc_argument
@format_option
@model_option
@click.option("--local", is_flag=True, help="Skip the LLM and use the rule table.")
def tag(doc_path: Path, fmt: str, model: str | None, local: bool):
    """Suggest tags for endpoints that have none."""
    loaded = _load_openapi(doc_path, fmt)
    untagged = [ep for ep in extract_endpoints(loaded.spec) if not ep.tags]
    if not untagged:
        click.echo("All endpoints are tagged.")
        return

    assistant = None if local else SpecAssistant(model=model)
    for ep in untagged:
        suggestion = suggest_tag(ep) if assistant is None else assistant.generate_tag(ep)
        click.echo(f"  {ep.method:<7} {ep.path} -> {suggestion.tag} ({suggestion.confidence})")


@main.command()
@doc_argument
@format_option
@model_option
def questions(doc_path: Path, fmt: str, model: str | None):
    """Suggest questions worth asking about a specification."""
    loaded = _load(doc_path, fmt)
    content = loaded.spec if isinstance(loaded.spec, dict) else loaded.raw_text
    for question in SpecAssistant(model=model).related_questions(content):
        click.echo(f"- {question}")


@main.command()
@doc_argument
@format_option
@model_option
@click.option("--flow", "flow_type", required=True, type=click.Choice(list(FLOW_TEMPLATES)), help="Flow to draw.")
def diagram(doc_path: Path, fmt: str, model: str | None, flow_type: str):
    """Draw a Mermaid diagram of a common API flow."""
    loaded = _load(doc_path, fmt)
    content = loaded.spec if isinstance(loaded.spec, dict) else loaded.raw_text
    result = SpecAssistant(model=model).generate_diagram(flow_type, content)

    if result.warning:
        click.echo(f"WARNING: {result.warning}", err=True)
    click.echo(f"%% {result.pattern}")
    click.echo(result.mermaid_code)


@main.command()
@click.argument("old_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@format_option
@model_option
@click.option("--local", is_flag=True, help="Skip the LLM and diff endpoints locally.")
def compare(old_path: Path, new_path: Path, fmt: str, model: str | None, local: bool):
    """Compare two versions of a specification."""
    old = _load_openapi(old_path, fmt)
    new = _load_openapi(new_path, fmt)

    if local:
        result = compare_endpoints(old.spec, new.spec)
    else:
        result = SpecAssistant(model=model).compare_specs(old.spec, new.spec)

    for label, refs in (("New", result.new_endpoints), ("Removed", result.removed_endpoints)):
        click.echo(f"{label} endpoints: {len(refs)}")
        for ref in refs:
            click.echo(f"  {ref.method:<7} {ref.path} - {ref.summary}")
    click.echo(f"Modified endpoints: {len(result.modified_endpoints)}")
    for mod in result.modified_endpoints:
        click.echo(f"  {mod.method:<7} {mod.path}: {mod.changes}")
    if result.summary:
        click.echo(result.summary)
    if result.detailed_analysis:
        click.echo(result.detailed_analysis)


@main.command()
@doc_argument
@format_option
@model_option
@click.option("--warning", "warning_text", default=None, help="Issue to fix (defaults to every detected warning).")
def fix(doc_path: Path, fmt: str, model: str | None, warning_text: str | None):
    """Draft YAML patches for documentation-quality warnings."""
    loaded = _load_openapi(doc_path, fmt)
    issues = [warning_text] if warning_text else collect_warnings(loaded.spec)
    if not issues:
        click.echo("No warnings to fix.")
        return

    assistant = SpecAssistant(model=model)
    for issue in issues:
        result = assistant.spec_fix(issue, loaded.spec, filename=loaded.filename)
        click.echo(f"# Fix for: {issue}")
        click.echo(result.patch)
        if result.explanation:
            click.echo(f"# {result.explanation}")
        click.echo("")
