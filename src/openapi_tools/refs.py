"""Find, resolve and place local `$ref` pointers inside an API document.

Only document-local references of the form `#/a/b/c` are supported. Every
segment is a literal key lookup: no array indices and no `~0`/`~1` decoding.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

LOCAL_REF_PREFIX = "#/"


def scan_refs(node: Any) -> List[str]:
    """Walk a JSON value and collect every `$ref` string found.

    An object carrying `$ref` still has its other keys scanned, since some
    tooling puts siblings next to a reference.

    Args:
        node: Any JSON value (None is allowed)

    Returns:
        Unique reference strings in discovery order
    """
    found: Dict[str, None] = {}

    def visit(n: Any) -> None:
        if isinstance(n, dict):
            ref = n.get("$ref")
            if isinstance(ref, str) and ref:
                found.setdefault(ref, None)
            for v in n.values():
                visit(v)
        elif isinstance(n, list):
            for v in n:
                visit(v)

    visit(node)
    return list(found)


def is_local_ref(ref: Any) -> bool:
    """Return True for references this module can resolve."""
    return isinstance(ref, str) and ref.startswith(LOCAL_REF_PREFIX)


def ref_segments(ref: str) -> List[str]:
    """Split `#/components/schemas/Pet` into `["components", "schemas", "Pet"]`."""
    return ref.split("/")[1:]


def ref_label(ref: str) -> str:
    """Last segment of a reference, used as a human readable type name."""
    return ref.split("/")[-1]


def _is_missing(value: Any) -> bool:
    # null, false, 0 and "" end a lookup; empty objects and arrays are values.
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return isinstance(value, str) and value == ""


def resolve_ref(root: Any, ref: Any) -> Optional[Any]:
    """Follow a local reference from the document root.

    Args:
        root: The document to resolve against
        ref: Reference string like `#/definitions/Pet`

    Returns:
        The referenced node, or None for external or dangling references
    """
    if not is_local_ref(ref):
        return None

    current = root
    for part in ref_segments(ref):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if _is_missing(current):
            return None
    return current


def assign_ref(root: Dict[str, Any], ref: str, value: Any) -> None:
    """Store `value` at the address named by `ref`, creating parent objects as needed."""
    parts = ref_segments(ref)
    current = root
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value
