"""Serialize pruned documents to JSON and to a Markdown report for humans and LLMs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .refs import ref_label, resolve_ref

JSON_MIME_TYPE = "text/json"
MARKDOWN_MIME_TYPE = "text/markdown"

DEFAULT_TITLE = "API Context"
NO_MODELS_PLACEHOLDER = "*No separate models defined.*"


@dataclass(frozen=True)
class ExportArtifact:
    """A rendered export ready to be handed off for persistence.

    Attributes:
        filename: `{basename}-{timestamp}.{ext}`
        content: The rendered document
        mime_type: `text/json` or `text/markdown`
    """

    filename: str
    content: str
    mime_type: str


def render_json(document: Dict[str, Any]) -> str:
    """Pretty-print a document keeping keys in insertion order."""
    return json.dumps(document, indent=2, sort_keys=False, ensure_ascii=False)


def get_timestamp(now: Optional[datetime] = None) -> str:
    """Filesystem-safe local timestamp like `20240131-235959`."""
    return (now or datetime.now()).strftime("%Y%m%d-%H%M%S")


def export_filename(basename: str, extension: str, now: Optional[datetime] = None) -> str:
    return f"{basename}-{get_timestamp(now)}.{extension}"


def _fenced_json(value: Any) -> str:
    return f"```json\n{render_json(value)}\n```\n"


def _resolve_once(document: Dict[str, Any], node: Any) -> Any:
    """Replace a `$ref` object by its target, one level only."""
    if isinstance(node, dict) and "$ref" in node:
        resolved = resolve_ref(document, node["$ref"])
        if resolved is not None:
            return resolved
    return node


def parameter_type(parameter: Dict[str, Any]) -> str:
    """Human label for a parameter type.

    Order: explicit `type`, then `schema.type`, then the name of the schema
    `$ref`, then `Object` for other schemas. Without any type info: `String`.
    """
    param_type = parameter.get("type")
    schema = parameter.get("schema")
    if not param_type and schema:
        if isinstance(schema, dict) and schema.get("type"):
            param_type = schema["type"]
        elif isinstance(schema, dict) and isinstance(schema.get("$ref"), str):
            param_type = ref_label(schema["$ref"])
        else:
            param_type = "Object"
    return str(param_type) if param_type else "String"


def _render_parameters(document: Dict[str, Any], parameters: List[Any]) -> str:
    md = "**Parameters**:\n"
    for raw in parameters:
        p = _resolve_once(document, raw)
        if not isinstance(p, dict):
            continue
        req = "(Required)" if p.get("required") else "(Optional)"
        desc = f" - {p['description']}" if p.get("description") else ""
        md += f"- `{p.get('name', '')}` ({p.get('in', '')}, {parameter_type(p)}) {req}{desc}\n"
    return md + "\n"


def _json_content_schema(container: Any) -> Any:
    if not isinstance(container, dict):
        return None
    content = container.get("content")
    if not isinstance(content, dict):
        return None
    json_content = content.get("application/json")
    if not isinstance(json_content, dict):
        return None
    return json_content.get("schema")


def _render_request_body(document: Dict[str, Any], request_body: Any) -> str:
    md = "**Request Body**:\n"
    schema = _json_content_schema(_resolve_once(document, request_body))
    if schema:
        md += _fenced_json(_resolve_once(document, schema)) + "\n"
    return md


def _render_responses(document: Dict[str, Any], responses: Dict[str, Any]) -> str:
    md = "**Responses**:\n"
    for code, raw in responses.items():
        res = _resolve_once(document, raw)
        if not isinstance(res, dict):
            res = {}
        md += f"- **{code}**: {res.get('description') or ''}\n"

        # Swagger 2.0 keeps the schema on the response, OpenAPI 3 under content
        schema = res.get("schema") or _json_content_schema(res)
        if schema:
            md += _fenced_json(_resolve_once(document, schema))
    return md + "\n"


def _render_operation(document: Dict[str, Any], path: str, method: str, op: Any) -> str:
    md = f"### {method.upper()} {path}\n"
    if not isinstance(op, dict):
        return md + "---\n\n"
    if op.get("summary"):
        md += f"**Summary**: {op['summary']}\n\n"
    if op.get("description"):
        md += f"**Description**: {op['description']}\n\n"

    parameters = op.get("parameters")
    if isinstance(parameters, list) and parameters:
        md += _render_parameters(document, parameters)

    if op.get("requestBody"):
        md += _render_request_body(document, op["requestBody"])

    responses = op.get("responses")
    if isinstance(responses, dict) and responses:
        md += _render_responses(document, responses)

    return md + "---\n\n"


def data_models(document: Dict[str, Any]) -> Dict[str, Any]:
    """Schemas of the document: `definitions` when present, else `components.schemas`."""
    definitions = document.get("definitions")
    if isinstance(definitions, dict):
        return definitions
    components = document.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        return components["schemas"]
    return {}


def render_markdown(document: Dict[str, Any]) -> str:
    """Render a pruned document as a Markdown report.

    Paths are listed in sorted order, methods in the order the document holds
    them. `$ref` schemas are inlined one level deep from the pruned document.
    """
    info = document.get("info")
    info = info if isinstance(info, dict) else {}

    md = f"# {info.get('title') or DEFAULT_TITLE}\n\n"
    if info.get("description"):
        md += f"{info['description']}\n\n"

    md += "## Endpoints\n\n"

    paths = document.get("paths")
    paths = paths if isinstance(paths, dict) else {}
    for path in sorted(paths):
        methods = paths[path]
        if not isinstance(methods, dict):
            continue
        for method, op in methods.items():
            md += _render_operation(document, path, method, op)

    md += "## Data Models\n\n"
    md += "The following schemas are referenced in the endpoints above.\n\n"

    models = data_models(document)
    if models:
        for name, definition in models.items():
            md += f"### {name}\n"
            md += _fenced_json(definition) + "\n"
    else:
        md += f"{NO_MODELS_PLACEHOLDER}\n"

    return md


def export_json(document: Dict[str, Any], basename: str, now: Optional[datetime] = None) -> ExportArtifact:
    """Render a pruned document as the `.json` export artifact."""
    return ExportArtifact(
        filename=export_filename(basename, "json", now),
        content=render_json(document),
        mime_type=JSON_MIME_TYPE,
    )


def export_markdown(document: Dict[str, Any], basename: str, now: Optional[datetime] = None) -> ExportArtifact:
    """Render a pruned document as the `.md` export artifact."""
    return ExportArtifact(
        filename=export_filename(basename, "md", now),
        content=render_markdown(document),
        mime_type=MARKDOWN_MIME_TYPE,
    )
