#!/usr/bin/env python3
"""
Prune a Swagger 2.0 / OpenAPI 3 JSON document to a selected set of operations
and every definition they transitively reference.

Reusable API:
- function prune(document, catalog, selection) -> dict
- class OpenAPIPruner(document: dict)
  - prune(selection: Iterable[int]) -> dict
  - select_endpoints(endpoints: Iterable[str]) -> set[int]
- function prune_openapi_from_string(openapi_json: str, endpoints: Iterable[str]) -> str

CLI usage:
  python -m openapi_tools.prune --file openapi.json --endpoint GET:/pets --endpoint /stores
  python -m openapi_tools.prune --file swagger.json --endpoint POST:/pets --format markdown

Notes:
- Endpoints may be provided either as "+METHOD:+PATH" (e.g. "GET:/v1/users") or
  just "+PATH" to select every method on that path.
- References are resolved as plain `#/a/b/c` pointers, so `#/definitions/...`
  and `#/components/...` are handled the same way. Each kept definition lands
  at the address it had in the source document.
"""

from __future__ import annotations

import argparse
import copy
import json
import logging
import sys
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .catalog import Operation, build_catalog
from .refs import assign_ref, resolve_ref, scan_refs
from .render import render_json, render_markdown

HttpMethod = str
PathTemplate = str

logger = logging.getLogger("OpenAPIPruner")


def _reset_rebuilt_containers(document: Dict[str, Any]) -> None:
    """Empty `paths`, `definitions` and `components.schemas`; they are rebuilt from the selection."""
    document["paths"] = {}
    if document.get("definitions"):
        document["definitions"] = {}
    components = document.get("components")
    if isinstance(components, dict) and components.get("schemas"):
        components["schemas"] = {}


def prune(document: Dict[str, Any], catalog: Iterable[Operation], selection: Iterable[int]) -> Dict[str, Any]:
    """Build the document holding only the selected operations and their reference closure.

    The source document is never modified. Selected operation objects are placed
    as they are, referenced definitions are resolved against the source document
    and written at the same address in the result.

    Args:
        document: The source document
        catalog: Operations built from `document` by `build_catalog`
        selection: Selected operation ids; ids not in the catalog are ignored

    Returns:
        The pruned document
    """
    selected = set(selection)
    result = copy.deepcopy(document)
    _reset_rebuilt_containers(result)

    pending: Dict[str, None] = {}
    placed = 0
    for op in catalog:
        if op.id not in selected:
            continue
        placed += 1
        result["paths"].setdefault(op.path, {})[op.method.lower()] = op.body
        for ref in scan_refs(op.body):
            pending.setdefault(ref, None)

    resolved: Set[str] = set()
    queue: List[str] = list(pending)
    while queue:
        ref = queue.pop()
        if ref in resolved:
            continue
        resolved.add(ref)

        node = resolve_ref(document, ref)
        if node is None:
            logger.debug("Dropping unresolvable reference %s", ref)
            continue

        assign_ref(result, ref, node)
        for child in scan_refs(node):
            if child not in resolved:
                queue.append(child)

    logger.debug("Pruned document to %d operations and %d references", placed, len(resolved))
    return result


class OpenAPIPruner:
    """Prune a document to selected operations and their transitive definitions."""

    def __init__(self, document: Dict[str, Any]) -> None:
        self.document = document
        self.catalog = build_catalog(document)

    @classmethod
    def from_response(cls, response: Dict[str, Any] | str) -> "OpenAPIPruner":
        """Create a pruner from a dict or a JSON string response."""
        if isinstance(response, dict):
            return cls(response)
        if isinstance(response, str):
            return cls(json.loads(response))
        raise TypeError("OpenAPIPruner.from_response expects a dict or JSON string")

    @staticmethod
    def parse_endpoint_spec(spec: str) -> Tuple[Optional[HttpMethod], PathTemplate]:
        """Parse an endpoint spec like "GET:/v1/users" or "/v1/users".

        Returns (method_or_None, path)
        """
        if ":" in spec and not spec.startswith("/"):
            method, path = spec.split(":", 1)
            method = method.strip().upper()
            return method, path.strip()
        return None, spec.strip()

    def select_endpoints(self, endpoints: Iterable[str]) -> Set[int]:
        """Map endpoint specs to the ids of matching operations."""
        specs = [self.parse_endpoint_spec(e) for e in endpoints]
        selection: Set[int] = set()
        for op in self.catalog:
            for method, path in specs:
                if path == op.path and method in (None, op.method):
                    selection.add(op.id)
        return selection

    def prune(self, selection: Iterable[int]) -> Dict[str, Any]:
        """Prune the document to the given operation ids."""
        return prune(self.document, self.catalog, selection)


def prune_openapi_from_string(openapi_json: str, endpoints: Iterable[str], output_format: str = "json") -> str:
    """Prune an OpenAPI JSON string to only include the specified endpoints.

    Args:
        openapi_json: Swagger/OpenAPI document as a JSON string
        endpoints: Iterable of endpoint specifications like "GET:/api/users" or "/api/users"
        output_format: "json" or "markdown"

    Returns:
        Pruned document rendered in the requested format
    """
    pruner = OpenAPIPruner.from_response(openapi_json)
    pruned = pruner.prune(pruner.select_endpoints(endpoints))
    if output_format == "markdown":
        return render_markdown(pruned)
    return render_json(pruned) + "\n"


def _read_file_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Main CLI entry point for pruning Swagger/OpenAPI documents.

    Args:
        argv: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(prog="openapi-prune", description="Prune a Swagger/OpenAPI document to selected endpoints")
    parser.add_argument("--file", required=True, help="Path to swagger.json / openapi.json")
    parser.add_argument(
        "--endpoint",
        action="append",
        default=[],
        help="Endpoint spec like GET:/v1/users or /v1/users (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "markdown"],
        default="json",
        help="Output format (default: json)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    if not args.endpoint:
        print("No endpoints provided. Nothing to do.", file=sys.stderr)
        return 2

    try:
        original_str = _read_file_bytes(args.file).decode("utf-8")
        pruned_str = prune_openapi_from_string(original_str, args.endpoint, output_format=args.format)
    except (OSError, ValueError) as e:
        # ValueError covers UnicodeDecodeError, json.JSONDecodeError and InvalidDocument
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(pruned_str)

    before_len = len(json.dumps(json.loads(original_str), indent=2, ensure_ascii=False))
    after_len = len(pruned_str)
    print(
        (
            f"\n--- Stats ---\n"
            f"Before (pretty chars): {before_len}\n"
            f"After  (pretty chars): {after_len}\n"
            f"Delta               : {before_len - after_len}"
        ),
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
