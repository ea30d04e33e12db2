"""
Field projection: rebuild the nested shape of a record keeping only the
selected dotted paths.
"""
from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from src.gaql.evaluator import MISSING, get_nested_value


def project_record(record: Mapping[str, Any], select_fields: Iterable[str]) -> dict[str, Any]:
    """Return a new dict holding only the paths in *select_fields* that resolve."""
    out: dict[str, Any] = {}
    for path in select_fields:
        value = get_nested_value(record, path)
        if value is MISSING:
            continue

        *parents, leaf = path.split(".")
        node = out
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[leaf] = copy.deepcopy(value)
    return out


def project(
    records: Iterable[Mapping[str, Any]],
    select_fields: Iterable[str],
) -> list[dict[str, Any]]:
    fields = list(select_fields)
    return [project_record(r, fields) for r in records]
