"""Request snippet generators (cURL, Python requests, JavaScript fetch)."""

import json

from api_whispr.spec.base import Endpoint

DEFAULT_BASE_URL = "https://api.example.com"

BODY_METHODS = ("POST", "PUT", "PATCH")

LANGUAGES = ("curl", "python", "javascript")


def _placeholder_body(endpoint: Endpoint) -> dict[str, str]:
    """Map each body parameter to a ``<name>`` placeholder."""
    if endpoint.method not in BODY_METHODS:
        return {}
    return {p["name"]: f"<{p['name']}>" for p in endpoint.body_parameters() if "name" in p}


def _auth(endpoint: Endpoint, auth: bool | None) -> bool:
    return endpoint.requires_auth if auth is None else auth


def format_curl(endpoint: Endpoint, base_url: str = DEFAULT_BASE_URL, auth: bool | None = None) -> str:
    curl = f'curl -X {endpoint.method} "{base_url}{endpoint.path}"'

    headers = []
    if _auth(endpoint, auth):
        headers.append('-H "Authorization: Bearer YOUR_TOKEN"')
    headers.append('-H "Content-Type: application/json"')
    curl += " \\\n  " + " \\\n  ".join(headers)

    body = _placeholder_body(endpoint)
    if body:
        curl += f" \\\n  -d '{json.dumps(body, indent=2)}'"

    return curl


def format_python(endpoint: Endpoint, base_url: str = DEFAULT_BASE_URL, auth: bool | None = None) -> str:
    method = endpoint.method.lower()
    lines = [
        "import requests",
        "",
        f'url = "{base_url}{endpoint.path}"',
        "headers = {",
    ]
    if _auth(endpoint, auth):
        lines.append('    "Authorization": "Bearer YOUR_TOKEN",')
    lines.append('    "Content-Type": "application/json"')
    lines.append("}")

    body = _placeholder_body(endpoint)
    if body:
        lines.append("data = {")
        lines.extend(f'    "{name}": "{value}",' for name, value in body.items())
        lines.append("}")
        lines.append("")
        lines.append(f"response = requests.{method}(url, headers=headers, json=data)")
    else:
        lines.append("")
        lines.append(f"response = requests.{method}(url, headers=headers)")

    return "\n".join(lines)


def format_javascript(endpoint: Endpoint, base_url: str = DEFAULT_BASE_URL, auth: bool | None = None) -> str:
    js = f'fetch("{base_url}{endpoint.path}", {{\n'
    js += f'  method: "{endpoint.method}",\n'
    js += "  headers: {\n"
    if _auth(endpoint, auth):
        js += '    "Authorization": "Bearer YOUR_TOKEN",\n'
    js += '    "Content-Type": "application/json"\n'
    js += "  }"

    body = _placeholder_body(endpoint)
    if body:
        indented = "\n".join("    " + line for line in json.dumps(body, indent=4).splitlines())
        js += ",\n  body: JSON.stringify(" + indented + "\n  )"

    js += "\n})"
    return js


_FORMATTERS = {
    "curl": format_curl,
    "python": format_python,
    "javascript": format_javascript,
}


def format_snippet(
    endpoint: Endpoint,
    language: str,
    base_url: str = DEFAULT_BASE_URL,
    auth: bool | None = None,
) -> str:
    """Render a request snippet for ``endpoint`` in ``language``."""
    try:
        formatter = _FORMATTERS[language.lower()]
    except KeyError:
        raise ValueError(f"Unsupported snippet language: {language}") from None
    return formatter(endpoint, base_url=base_url, auth=auth)
