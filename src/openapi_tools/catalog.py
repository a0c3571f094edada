"""Flatten the path/method tree of a Swagger 2.0 or OpenAPI 3 document into operations.

Reusable API:
- build_catalog(document) -> list[Operation]
- filter_operations(catalog, query) -> list[Operation]
- group_by_tag(operations) -> dict[str, list[Operation]]
- detect_dialect(document) -> Dialect
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")

DEFAULT_TAG = "Default"


class InvalidDocument(ValueError):
    """Raised when a document has no usable `paths` object."""


class Dialect(str, Enum):
    """Shape variant of the imported document."""

    SWAGGER_V2 = "swagger-2.0"
    OPENAPI_V3 = "openapi-3"
    UNKNOWN = "unknown"


@dataclass
class Operation:
    """One HTTP method handler under one path.

    `body` is the operation object of the source document itself, not a copy,
    so the pruner places exactly what the document holds at export time.

    Attributes:
        id: Position in discovery order
        path: Key into the document's `paths`
        method: Upper-cased HTTP verb
        summary: Operation summary or empty string
        description: Operation description or empty string
        tags: Operation tags, possibly empty
        body: The original operation object
    """

    id: int
    path: str
    method: str
    summary: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    body: Any = None

    @property
    def group(self) -> str:
        """Tag used for grouping: the first tag or `Default`."""
        return self.tags[0] if self.tags else DEFAULT_TAG

    @property
    def endpoint(self) -> str:
        """Endpoint spec of this operation like `GET:/pets`."""
        return f"{self.method}:{self.path}"


def _text(details: Any, key: str) -> str:
    if not isinstance(details, dict):
        return ""
    value = details.get(key)
    return value if isinstance(value, str) and value else ""


def _tags(details: Any) -> List[str]:
    if not isinstance(details, dict):
        return []
    tags = details.get("tags")
    if not isinstance(tags, list):
        return []
    return [str(tag) for tag in tags]


def build_catalog(document: Dict[str, Any]) -> List[Operation]:
    """Build the ordered list of operations of a document.

    Paths and methods are visited in the document's own order. Keys at the path
    level that are not HTTP verbs (shared `parameters`, `summary`, `servers`,
    ...) never produce an operation.

    Args:
        document: Parsed Swagger/OpenAPI document

    Returns:
        Operations with ids assigned in discovery order

    Raises:
        InvalidDocument: If the document or its `paths` is not an object
    """
    if not isinstance(document, dict):
        raise InvalidDocument("Invalid Swagger/OpenAPI file: document must be a JSON object.")
    paths = document.get("paths")
    if paths is None:
        raise InvalidDocument("Invalid Swagger/OpenAPI file: 'paths' missing.")
    if not isinstance(paths, dict):
        raise InvalidDocument("Invalid Swagger/OpenAPI file: 'paths' must be an object.")

    catalog: List[Operation] = []
    for path, methods in paths.items():
        if not isinstance(methods, dict):
            continue
        for method, details in methods.items():
            if method.lower() not in HTTP_METHODS:
                continue
            catalog.append(
                Operation(
                    id=len(catalog),
                    path=path,
                    method=method.upper(),
                    summary=_text(details, "summary"),
                    description=_text(details, "description"),
                    tags=_tags(details),
                    body=details,
                )
            )
    return catalog


def filter_operations(catalog: Iterable[Operation], query: str | None = None) -> List[Operation]:
    """Return operations whose path, summary or method contains the query (case-insensitive)."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(catalog)
    return [
        op
        for op in catalog
        if needle in op.path.lower() or needle in op.summary.lower() or needle in op.method.lower()
    ]


def group_by_tag(operations: Iterable[Operation]) -> Dict[str, List[Operation]]:
    """Group operations by their first tag.

    Groups come out in sorted tag order; operations keep their catalog order
    inside a group.
    """
    groups: Dict[str, List[Operation]] = {}
    for op in operations:
        groups.setdefault(op.group, []).append(op)
    return {tag: groups[tag] for tag in sorted(groups)}


def detect_dialect(document: Dict[str, Any]) -> Dialect:
    """Tell Swagger 2.0 from OpenAPI 3 by the fields the document carries."""
    if not isinstance(document, dict):
        return Dialect.UNKNOWN
    if "swagger" in document or "definitions" in document:
        return Dialect.SWAGGER_V2
    if "openapi" in document or "components" in document:
        return Dialect.OPENAPI_V3
    return Dialect.UNKNOWN
