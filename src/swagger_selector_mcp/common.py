"""Shared parameter helpers for Swagger Selector MCP tools."""

from __future__ import annotations


def normalise_int(name: str, value: int | str | None) -> int | None:
    """Normalise value to an int (or None) - tolerate string input from MCP clients.

    Args:
        name: The name of the parameter being validated.
        value: The value to normalise.

    Returns:
        The normalised integer value, or None if the input was None or an
        empty/whitespace string.
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    if isinstance(value, bool):  # Boolean is subclass of int
        raise ValueError(f"Parameter '{name}' must be an integer; got '{value}' of type '{type(value).__name__}'.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value_str = value.strip()
        try:
            return int(value_str)
        except ValueError as exc:
            raise ValueError(
                f"Parameter '{name}' must be convertible to integer; got '{value}' of type '{type(value).__name__}'."
            ) from exc

    raise ValueError(f"Parameter '{name}' must be an integer; got '{value}' of type '{type(value).__name__}'.")


def normalise_ids(name: str, value: list[int | str] | int | str | None) -> list[int]:
    """Normalise operation ids sent by MCP clients.

    Accepts a list of ints or numeric strings, a single int, or a
    comma-separated string like "0, 3,7". Blank entries are skipped, order is
    kept and duplicates are dropped.

    Args:
        name: The name of the parameter being validated.
        value: The value to normalise.

    Returns:
        The operation ids.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: list[int | str] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]

    ids: list[int] = []
    for item in items:
        op_id = normalise_int(name, item)
        if op_id is not None and op_id not in ids:
            ids.append(op_id)
    return ids
