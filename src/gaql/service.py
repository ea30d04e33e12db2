"""
Search service -- orchestrates parse -> resolve -> fetch -> filter -> project -> paginate.

The engine stages are pure; the record store is injected so the same pipeline
runs against the YAML-seeded repository or any test double.
"""
from __future__ import annotations

from datetime import date

from src.core.config import get_settings
from src.core.utils import timer
from src.gaql.date_range import resolve
from src.gaql.errors import ValidationError
from src.gaql.evaluator import filter_records
from src.gaql.paginator import paginate
from src.gaql.parser import parse
from src.gaql.projector import project
from src.gaql.model import SearchPage
from src.store.repository import RecordRepository
from src.core.logging import get_logger

logger = get_logger(__name__)


def _check_page_size(page_size: int | None) -> int:
    settings = get_settings()
    if page_size is None:
        return settings.default_page_size
    if page_size < 1 or page_size > settings.max_page_size:
        raise ValidationError(
            f"Page size {page_size} is outside the allowed range 1..{settings.max_page_size}.",
            reason="INVALID_PAGE_SIZE",
        )
    return page_size


def search(
    query: str,
    repository: RecordRepository,
    page_size: int | None = None,
    page_token: str | None = None,
    today: date | None = None,
) -> SearchPage:
    """Run *query* against *repository* and return one page of results.

    Raises
    ------
    ParseError
        If the query has no usable SELECT / FROM clause.
    ValidationError
        For a bad page size or token, an unsupported resource, or a
        non-ISO BETWEEN literal.
    """
    size = _check_page_size(page_size)

    with timer() as t:
        parsed = parse(query)
        if parsed.source.lower() not in repository.sources():
            raise ValidationError(
                f"Unsupported resource '{parsed.source}'. "
                f"Allowed: {', '.join(repository.sources())}",
                reason="UNSUPPORTED_RESOURCE",
            )

        window = resolve(
            parsed.date_range,
            today=today,
            default_days=get_settings().default_window_days,
        )
        records = repository.list(parsed.source, window)
        matched = filter_records(records, parsed.conditions)
        rows = project(matched, parsed.select_fields)
        page = paginate(rows, size, page_token)

    logger.info(
        "Search | source=%s | window=%s..%s | matched=%d | returned=%d | %dms",
        parsed.source, window.start, window.end,
        page.total_count, len(page.items), t["elapsed_ms"],
    )
    return SearchPage(
        results=page.items,
        next_page_token=page.next_page_token,
        total_results_count=page.total_count,
        field_mask=parsed.field_mask,
    )
