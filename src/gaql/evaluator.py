"""
Condition evaluation over nested records.

Records are plain mappings whose values are either scalars or further
mappings.  Field paths are dotted (``campaign.status``); a path that does not
resolve never raises, it simply fails the condition.
"""
from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from src.gaql.model import Condition, Operator


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def get_nested_value(record: Mapping[str, Any], path: str) -> Any:
    """Walk *path* through *record*; return ``MISSING`` if any segment is absent."""
    current: Any = record
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return MISSING
    return current


def stringify(value: Any) -> str:
    """Render a record value the way it appears on the JSON wire.

    Lists render as their members joined with ``,``, so a one-element list
    compares equal to that element.
    """
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _parse_list(raw: str) -> list[str]:
    raw = raw.strip()
    if raw.startswith("(") and raw.endswith(")"):
        raw = raw[1:-1]
    items = []
    for item in raw.split(","):
        item = item.strip()
        if len(item) >= 2 and item[0] == item[-1] and item[0] in "'\"":
            item = item[1:-1]
        items.append(item)
    return items


def _like_pattern(raw: str) -> re.Pattern[str]:
    # Only % is a wildcard; everything else matches literally.
    parts = [re.escape(p) for p in raw.split("%")]
    return re.compile(".*".join(parts), re.IGNORECASE | re.DOTALL)


def matches(record: Mapping[str, Any], condition: Condition) -> bool:
    value = get_nested_value(record, condition.field)
    if value is MISSING:
        return False

    op = condition.operator
    expected = condition.value

    if op == Operator.EQ:
        return stringify(value) == expected
    if op == Operator.NE:
        return stringify(value) != expected
    if op in (Operator.GT, Operator.LT, Operator.GE, Operator.LE):
        left, right = _to_number(value), _to_number(expected)
        if op == Operator.GT:
            return left > right
        if op == Operator.LT:
            return left < right
        if op == Operator.GE:
            return left >= right
        return left <= right
    if op == Operator.IN:
        return stringify(value) in _parse_list(expected)
    if op == Operator.NOT_IN:
        return stringify(value) not in _parse_list(expected)
    if op == Operator.LIKE:
        return _like_pattern(expected).search(stringify(value)) is not None
    return False


def filter_records(
    records: Iterable[Mapping[str, Any]],
    conditions: Iterable[Condition],
) -> list[Mapping[str, Any]]:
    """Keep records satisfying every condition, in input order."""
    conditions = list(conditions)
    return [r for r in records if all(matches(r, c) for c in conditions)]
