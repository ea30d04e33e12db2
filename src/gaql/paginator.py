"""
Offset-token pagination.

A page token is the decimal string of a zero-based offset.  No server-side
state is kept: the token alone picks the next slice.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from src.gaql.errors import ValidationError

_TOKEN_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Page:
    items: list[Any] = field(default_factory=list)
    next_page_token: str | None = None
    total_count: int = 0


def decode_token(page_token: str | None) -> int:
    """Return the offset encoded in *page_token* (0 when absent or empty)."""
    if page_token is None or page_token == "":
        return 0
    if not _TOKEN_RE.fullmatch(page_token):
        raise ValidationError(
            f"Invalid page token: {page_token!r}",
            reason="INVALID_PAGE_TOKEN",
        )
    return int(page_token)


def paginate(items: Sequence[Any], page_size: int, page_token: str | None = None) -> Page:
    if page_size < 1:
        raise ValidationError(
            f"Page size must be a positive integer, got {page_size}.",
            reason="INVALID_PAGE_SIZE",
        )

    offset = decode_token(page_token)
    end = offset + page_size
    return Page(
        items=list(items[offset:end]),
        next_page_token=str(end) if end < len(items) else None,
        total_count=len(items),
    )
