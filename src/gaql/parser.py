"""
Parser — turns a GAQL-like query string into a ParsedQuery.

Grammar (whitespace-insensitive, keyword-order-sensitive):

  SELECT <field> [, <field> ...]
  FROM <resource>
  [WHERE <predicate> [AND|OR <predicate> ...]]
  [ORDER BY ...] [LIMIT ...] [PARAMETERS ...]

ORDER BY / LIMIT / PARAMETERS only terminate the WHERE clause (outside quoted
literals); their contents are not interpreted.  Inside WHERE, a ``<x>.date DURING <KEYWORD>`` or
``<x>.date BETWEEN '<d1>' AND '<d2>'`` predicate becomes the query's
DateRangeSpec.  Everything else goes through a best-effort scanner: predicates
that do not look like ``<field> <operator> <value>`` are dropped with a
warning rather than rejected.
"""
from __future__ import annotations

import re

from src.gaql.errors import ParseError
from src.gaql.model import Condition, DateRangeSpec, Operator, ParsedQuery
from src.core.logging import get_logger

logger = get_logger(__name__)

# ── Compiled patterns ────────────────────────────────────

_WS_RE = re.compile(r"\s+")

_SELECT_RE = re.compile(r"\bSELECT\s+(.+?)\s+FROM\b", re.IGNORECASE)
_FROM_KW_RE = re.compile(r"\bFROM\b", re.IGNORECASE)
_FROM_RE = re.compile(r"\bFROM\s+(\w+)", re.IGNORECASE)
_WHERE_RE = re.compile(r"\bWHERE\s+", re.IGNORECASE)
_WHERE_END_RE = re.compile(r"\s+(?:ORDER\s+BY|LIMIT|PARAMETERS)\b", re.IGNORECASE)
_QUOTED_RE = re.compile(r"'[^']*'|\"[^\"]*\"")

_DATE_FIELD = r"\b(?:\w+\.)*date\b"
_DURING_RE = re.compile(rf"{_DATE_FIELD}\s+DURING\s+(\w+)", re.IGNORECASE)
_BETWEEN_RE = re.compile(
    rf"{_DATE_FIELD}\s+BETWEEN\s+'([^']*)'\s+AND\s+'([^']*)'",
    re.IGNORECASE,
)

# Multi-character operators are listed before their prefixes.
_PREDICATE_RE = re.compile(
    r"^(?P<field>\w+(?:\.\w+)*)"
    r"(?:\s+(?P<word>NOT\s+IN|IN|LIKE)\b|\s*(?P<symbol>>=|<=|!=|=|>|<))"
    r"\s*(?P<value>.+)$",
    re.IGNORECASE,
)
_PREDICATE_START_RE = re.compile(
    r"^\w+(?:\.\w+)*(?:\s+(?:NOT\s+IN|IN|LIKE)\b|\s*(?:>=|<=|!=|=|>|<))",
    re.IGNORECASE,
)

_TOKEN_RE = re.compile(r"'[^']*'|\"[^\"]*\"|[(),]|\s+|[^\s(),'\"]+")

_CONJUNCTIONS = {"AND", "OR"}


# ── Clause extraction ────────────────────────────────────

def _normalise(query: str) -> str:
    return _WS_RE.sub(" ", query).strip()


def _parse_select(text: str) -> tuple[tuple[str, ...], int]:
    m = _SELECT_RE.search(text)
    if not m:
        if _FROM_KW_RE.search(text) is None:
            raise ParseError("Invalid GAQL: Missing FROM clause", reason="MISSING_FROM")
        raise ParseError("Invalid GAQL: Missing SELECT clause", reason="MISSING_SELECT")

    fields = tuple(f.strip() for f in m.group(1).split(",") if f.strip())
    if not fields:
        raise ParseError("Invalid GAQL: SELECT clause lists no fields", reason="MISSING_SELECT")
    # Resume scanning at the FROM keyword
    return fields, m.end() - len("FROM")


def _parse_from(text: str, pos: int) -> tuple[str, int]:
    m = _FROM_RE.search(text, pos)
    if not m:
        raise ParseError("Invalid GAQL: Missing FROM clause", reason="MISSING_FROM")
    return m.group(1), m.end()


# ── WHERE clause ─────────────────────────────────────────

def _where_body(text: str, pos: int) -> str | None:
    """Return the WHERE clause body, cut at the first unquoted ORDER BY / LIMIT / PARAMETERS."""
    m = _WHERE_RE.search(text, pos)
    if not m:
        return None
    body = text[m.end():]
    # Blank out quoted literals so keywords inside them cannot end the clause
    masked = _QUOTED_RE.sub(lambda q: "_" * len(q.group()), body)
    end = _WHERE_END_RE.search(masked)
    return body[: end.start()] if end else body


def _extract_date_range(where: str) -> tuple[DateRangeSpec | None, str]:
    """Pull the date directive out of *where*; BETWEEN wins over DURING."""
    date_range: DateRangeSpec | None = None

    m = _DURING_RE.search(where)
    if m:
        date_range = DateRangeSpec.during(m.group(1))
        where = where[: m.start()] + where[m.end():]

    m = _BETWEEN_RE.search(where)
    if m:
        date_range = DateRangeSpec.between(m.group(1).strip(), m.group(2).strip())
        where = where[: m.start()] + where[m.end():]

    return date_range, where


def _split_predicates(where: str) -> list[str]:
    """Split *where* on top-level AND / OR / commas.

    Quoted literals and parenthesised lists are kept whole.  A comma-separated
    piece that does not start a new predicate is glued back onto the previous
    one, so bare ``IN A, B`` lists survive.
    """
    chunks: list[list[str]] = [[]]
    depth = 0
    for token in _TOKEN_RE.findall(where):
        if token == "(":
            depth += 1
        elif token == ")":
            depth = max(depth - 1, 0)
        elif depth == 0 and token.upper() in _CONJUNCTIONS:
            chunks.append([])
            continue
        elif depth == 0 and token == ",":
            chunks[-1].append("\0")
            continue
        chunks[-1].append(token)

    predicates: list[str] = []
    for chunk in chunks:
        pieces = [p.strip() for p in "".join(chunk).split("\0")]
        merged: list[str] = []
        for piece in pieces:
            if merged and not _PREDICATE_START_RE.match(piece):
                merged[-1] = f"{merged[-1]}, {piece}" if piece else merged[-1]
            elif piece:
                merged.append(piece)
        predicates.extend(merged)
    return predicates


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


def _parse_predicate(text: str) -> Condition | None:
    m = _PREDICATE_RE.match(text)
    if not m:
        return None

    op_text = m.group("word") or m.group("symbol")
    operator = Operator(_WS_RE.sub(" ", op_text.upper()))
    value = m.group("value").strip()
    if operator not in (Operator.IN, Operator.NOT_IN):
        value = _strip_quotes(value)
    if not value:
        return None
    return Condition(field=m.group("field"), operator=operator, value=value)


def _is_date_field(path: str) -> bool:
    return path.rsplit(".", 1)[-1].lower() == "date"


def parse_where(where: str) -> tuple[tuple[Condition, ...], DateRangeSpec | None]:
    """Scan a WHERE clause body into generic conditions and a date range."""
    date_range, remainder = _extract_date_range(where)

    conditions: list[Condition] = []
    for text in _split_predicates(remainder):
        cond = _parse_predicate(text)
        if cond is None:
            logger.warning("Dropping unrecognised WHERE predicate: %r", text)
            continue
        if _is_date_field(cond.field):
            logger.warning("Ignoring date predicate outside DURING/BETWEEN: %r", text)
            continue
        conditions.append(cond)

    return tuple(conditions), date_range


# ── Public API ───────────────────────────────────────────

def parse(query: str) -> ParsedQuery:
    """Parse *query* into a ParsedQuery.

    Raises
    ------
    ParseError
        If the SELECT or FROM clause is absent or malformed.
    """
    text = _normalise(query or "")

    select_fields, pos = _parse_select(text)
    source, pos = _parse_from(text, pos)

    conditions: tuple[Condition, ...] = ()
    date_range: DateRangeSpec | None = None
    where = _where_body(text, pos)
    if where:
        conditions, date_range = parse_where(where)

    return ParsedQuery(
        select_fields=select_fields,
        source=source,
        conditions=conditions,
        date_range=date_range,
    )
