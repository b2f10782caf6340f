"""
Named column tables for CMS positional rows.

The `rows.json` endpoint returns each row as a bare array with no field names.
Everything outside this module addresses row fields by name through these
tables, so an upstream column reorder is a configuration change.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence


FACILITY_COLUMNS: dict[str, int] = {
    "name": 1,
    "city": 4,
    "state": 5,
    "zip": 7,
    "phone": 8,
    "ccn": 9,
    "beds": 10,
}

DEFICIENCY_COLUMNS: dict[str, int] = {
    "description": 4,
    "ftag": 5,
    "date": 7,
}


def load_columns(raw: str, defaults: Mapping[str, int]) -> dict[str, int]:
    """
    Merge a JSON object of `name -> index` overrides onto `defaults`.

    Empty input returns a copy of `defaults`.
    """
    merged = dict(defaults)
    raw = (raw or "").strip()
    if not raw:
        return merged

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Column table is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Column table must be a JSON object.")

    for name, index in data.items():
        if name not in defaults:
            raise ValueError(f"Unknown column name: {name!r}")
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValueError(f"Column {name!r} must map to a non-negative integer.")
        merged[name] = index
    return merged


def column_value(row: Sequence[Any], columns: Mapping[str, int], name: str) -> Any | None:
    """
    Return the named field of `row`, or None when it is absent.

    Out-of-range indices, nulls and empty strings all count as absent.
    """
    index = columns[name]
    if index >= len(row):
        return None
    value = row[index]
    if value is None or value == "":
        return None
    return value
