# citegraph/graph/fields.py

"""
Normalization helpers for raw node/edge attribute values.

Input documents are loose about shape: list-valued fields such as
``fields_of_study`` may arrive as real JSON arrays, as JSON-encoded strings,
or as a bare string. Everything here runs once at build time so the rest of
the package only ever sees tuples of strings, ints and bools.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional, Tuple

_TRUE_STRINGS = {"true", "1", "yes"}
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _item_to_str(item: Any) -> str:
    """
    List items are usually strings; objects (e.g. author records) contribute
    their ``name`` when they have one.
    """
    if isinstance(item, dict):
        name = item.get("name")
        return "" if name is None else str(name)
    return str(item)


def decode_string_list(value: Any) -> Tuple[str, ...]:
    """
    Decode a string-or-sequence field into a tuple of strings.

    - None -> ()
    - list/tuple -> items converted to strings
    - str -> parsed as JSON; a JSON array is used as the sequence, any other
      JSON value becomes a one-element tuple, and a string that is not valid
      JSON falls back to ``(raw_string,)``
    - anything else -> ``(str(value),)``
    """
    if value is None:
        return ()

    if isinstance(value, (list, tuple)):
        return tuple(_item_to_str(v) for v in value)

    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            return (value,)

        if isinstance(decoded, list):
            return tuple(_item_to_str(v) for v in decoded)
        if decoded is None:
            return (value,)
        return (_item_to_str(decoded),)

    return (str(value),)


def coerce_year(value: Any) -> Optional[int]:
    """
    Return an integer year, or None when the value is missing or not numeric.

    Strings contribute their leading integer ("2019 (preprint)" -> 2019) and
    fractional numbers are truncated.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)

    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))

    return None


def coerce_count(value: Any) -> int:
    """Counts default to 0 when missing or not numeric."""
    if value is None or isinstance(value, bool):
        return 0

    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def endpoint_id(value: Any) -> Optional[str]:
    """
    Reduce an edge endpoint to a node id.

    Force-layout libraries replace ``source``/``target`` ids with the node
    objects themselves, so an object with an ``id`` key is accepted too.
    """
    if isinstance(value, dict):
        value = value.get("id")
    if value is None:
        return None
    text = str(value)
    return text or None
