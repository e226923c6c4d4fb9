"""Endpoint-level comparison of two specs, used when the LLM comparison is unavailable."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api_whispr.spec.base import Endpoint, param_location
from api_whispr.spec.extract import extract_endpoints


class EndpointRef(BaseModel):
    method: str
    path: str
    summary: str = ""


class ModifiedEndpoint(BaseModel):
    method: str
    path: str
    changes: str = ""


class SpecComparison(BaseModel):
    """Added, removed and modified endpoints between two specs."""

    model_config = ConfigDict(populate_by_name=True)

    new_endpoints: list[EndpointRef] = Field(default=[], alias="newEndpoints")
    removed_endpoints: list[EndpointRef] = Field(default=[], alias="removedEndpoints")
    modified_endpoints: list[ModifiedEndpoint] = Field(default=[], alias="modifiedEndpoints")
    summary: str = ""
    detailed_analysis: str = Field(default="", alias="detailedAnalysis")


def _param_keys(endpoint: Endpoint) -> list[str]:
    return [
        f"{p['name']} ({param_location(p)})"
        for p in endpoint.parameters
        if isinstance(p, dict) and "name" in p
    ]


def _added_removed(label: str, old: list[str], new: list[str]) -> list[str]:
    changes = []
    added = [k for k in new if k not in old]
    removed = [k for k in old if k not in new]
    if added:
        changes.append(f"Added {label}: {', '.join(added)}")
    if removed:
        changes.append(f"Removed {label}: {', '.join(removed)}")
    return changes


def describe_changes(old: Endpoint, new: Endpoint) -> list[str]:
    """Human-readable differences between two versions of one endpoint."""
    changes = []
    changes += _added_removed("parameter(s)", _param_keys(old), _param_keys(new))
    changes += _added_removed("status code(s)", list(old.responses), list(new.responses))
    if old.summary != new.summary:
        changes.append("Summary changed")
    if old.description != new.description:
        changes.append("Description changed")
    if old.tags != new.tags:
        changes.append("Tags changed")
    if old.security != new.security:
        changes.append("Security requirements changed")
    if old.request_body != new.request_body:
        changes.append("Request body changed")
    if old.responses != new.responses and list(old.responses) == list(new.responses):
        changes.append("Response details changed")
    return changes


def compare_endpoints(old_doc: Any, new_doc: Any) -> SpecComparison:
    """Diff the extracted endpoints of two specs by (method, path)."""
    old = {(ep.method, ep.path): ep for ep in extract_endpoints(old_doc)}
    new = {(ep.method, ep.path): ep for ep in extract_endpoints(new_doc)}

    added = [
        EndpointRef(method=ep.method, path=ep.path, summary=ep.summary)
        for key, ep in new.items() if key not in old
    ]
    removed = [
        EndpointRef(method=ep.method, path=ep.path, summary=ep.summary)
        for key, ep in old.items() if key not in new
    ]
    modified = []
    for key, ep in new.items():
        if key not in old:
            continue
        changes = describe_changes(old[key], ep)
        if changes:
            modified.append(ModifiedEndpoint(method=ep.method, path=ep.path, changes="; ".join(changes)))

    return SpecComparison(
        new_endpoints=added,
        removed_endpoints=removed,
        modified_endpoints=modified,
        summary=f"{len(added)} new endpoints, {len(removed)} removed, {len(modified)} modified",
    )
