"""Tools for selecting operations from Swagger/OpenAPI documents and pruning them."""

from .catalog import (
    Dialect,
    InvalidDocument,
    Operation,
    build_catalog,
    detect_dialect,
    filter_operations,
    group_by_tag,
)
from .prune import OpenAPIPruner, prune, prune_openapi_from_string
from .refs import resolve_ref, scan_refs
from .render import ExportArtifact, export_json, export_markdown, render_json, render_markdown

__all__ = [
    "Dialect",
    "ExportArtifact",
    "InvalidDocument",
    "OpenAPIPruner",
    "Operation",
    "build_catalog",
    "detect_dialect",
    "export_json",
    "export_markdown",
    "filter_operations",
    "group_by_tag",
    "prune",
    "prune_openapi_from_string",
    "render_json",
    "render_markdown",
    "resolve_ref",
    "scan_refs",
]
