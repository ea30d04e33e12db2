"""
Unit tests — GAQL parser: SELECT / FROM / WHERE extraction.
"""
import pytest
from src.gaql.errors import ParseError
from src.gaql.parser import parse, parse_where
from src.gaql.model import Condition, DateRangeKind, Operator


# ── SELECT / FROM ───────────────────────────────────────

def test_basic_select_from():
    q = parse("SELECT a, b FROM campaign")
    assert q.select_fields == ("a", "b")
    assert q.source == "campaign"
    assert q.conditions == ()
    assert q.date_range is None


def test_select_preserves_order_and_duplicates():
    q = parse("SELECT metrics.clicks, campaign.id, metrics.clicks FROM campaign")
    assert q.select_fields == ("metrics.clicks", "campaign.id", "metrics.clicks")


def test_whitespace_is_collapsed():
    q = parse("  SELECT\n  campaign.id ,\n\tcampaign.name\n FROM\n   campaign  ")
    assert q.select_fields == ("campaign.id", "campaign.name")
    assert q.source == "campaign"


def test_keywords_case_insensitive():
    q = parse("select campaign.id from ad_group where campaign.status = 'ENABLED'")
    assert q.source == "ad_group"
    assert len(q.conditions) == 1


def test_field_mask():
    q = parse("SELECT campaign.id, metrics.clicks FROM campaign")
    assert q.field_mask == "campaign.id,metrics.clicks"


def test_parse_is_deterministic():
    text = "SELECT campaign.id FROM campaign WHERE metrics.clicks > 10 AND segments.date DURING LAST_7_DAYS"
    assert parse(text) == parse(text)


# ── Parse errors ────────────────────────────────────────

@pytest.mark.parametrize("query", [
    "",
    "campaign.id, campaign.name",
    "SELECT campaign.id",
    "SELECT campaign.id FROM",
    "FROM campaign",
    "SELECT FROM campaign",
    "SELECT , FROM campaign",
])
def test_missing_clause_raises(query):
    with pytest.raises(ParseError):
        parse(query)


def test_missing_select_reason():
    with pytest.raises(ParseError) as exc_info:
        parse("FROM campaign")
    assert exc_info.value.reason == "MISSING_SELECT"


def test_missing_from_reason():
    with pytest.raises(ParseError) as exc_info:
        parse("SELECT campaign.id")
    assert exc_info.value.reason == "MISSING_FROM"


# ── WHERE conditions ────────────────────────────────────

def test_single_equality_condition():
    q = parse("SELECT campaign.id FROM campaign WHERE campaign.status = 'ENABLED'")
    assert q.conditions == (
        Condition(field="campaign.status", operator=Operator.EQ, value="ENABLED"),
    )


@pytest.mark.parametrize("text, operator", [
    ("metrics.clicks >= 10", Operator.GE),
    ("metrics.clicks <= 10", Operator.LE),
    ("metrics.clicks != 10", Operator.NE),
    ("metrics.clicks > 10", Operator.GT),
    ("metrics.clicks < 10", Operator.LT),
    ("metrics.clicks = 10", Operator.EQ),
    ("metrics.clicks>=10", Operator.GE),
])
def test_multichar_operators_win(text, operator):
    conditions, _ = parse_where(text)
    assert len(conditions) == 1
    assert conditions[0].operator == operator
    assert conditions[0].value == "10"


def test_not_in_before_in():
    conditions, _ = parse_where("campaign.status NOT IN ('REMOVED', 'PAUSED')")
    assert conditions[0].operator == Operator.NOT_IN
    assert conditions[0].value == "('REMOVED', 'PAUSED')"


def test_in_list_kept_whole():
    conditions, _ = parse_where("campaign.status IN ('ENABLED','PAUSED') AND metrics.clicks > 5")
    assert [c.operator for c in conditions] == [Operator.IN, Operator.GT]
    assert conditions[0].value == "('ENABLED','PAUSED')"


def test_bare_in_list_survives_comma_split():
    conditions, _ = parse_where("campaign.status IN ENABLED, PAUSED")
    assert len(conditions) == 1
    assert conditions[0].value == "ENABLED, PAUSED"


def test_like_condition():
    conditions, _ = parse_where("campaign.name LIKE '%sale%'")
    assert conditions[0].operator == Operator.LIKE
    assert conditions[0].value == "%sale%"


def test_lowercase_operator_is_normalised():
    conditions, _ = parse_where("campaign.name like '%sale%' and campaign.status not in (REMOVED)")
    assert [c.operator for c in conditions] == [Operator.LIKE, Operator.NOT_IN]


def test_and_or_and_comma_separators():
    conditions, _ = parse_where(
        "campaign.status = 'ENABLED' OR metrics.clicks > 5, metrics.impressions < 100"
    )
    assert [c.field for c in conditions] == [
        "campaign.status", "metrics.clicks", "metrics.impressions",
    ]


def test_quoted_value_containing_and():
    conditions, _ = parse_where("campaign.name = 'Salt AND Pepper'")
    assert len(conditions) == 1
    assert conditions[0].value == "Salt AND Pepper"


def test_where_stops_at_order_by_and_limit():
    q = parse(
        "SELECT campaign.id FROM campaign WHERE campaign.status = 'ENABLED' "
        "ORDER BY metrics.clicks DESC LIMIT 5"
    )
    assert q.conditions == (
        Condition(field="campaign.status", operator=Operator.EQ, value="ENABLED"),
    )


def test_terminator_keywords_inside_quotes_do_not_end_where():
    q = parse(
        "SELECT campaign.id FROM campaign "
        "WHERE campaign.name = 'No LIMIT here' AND campaign.status != 'ORDER BY me' LIMIT 5"
    )
    assert q.conditions == (
        Condition(field="campaign.name", operator=Operator.EQ, value="No LIMIT here"),
        Condition(field="campaign.status", operator=Operator.NE, value="ORDER BY me"),
    )


def test_conditions_order_preserved():
    q = parse(
        "SELECT campaign.id FROM campaign "
        "WHERE metrics.clicks > 1 AND campaign.status = 'ENABLED' AND campaign.name LIKE '%a%'"
    )
    assert [c.field for c in q.conditions] == ["metrics.clicks", "campaign.status", "campaign.name"]


# ── Tolerant scanning (unrecognised predicates are dropped) ─

def test_unrecognised_predicates_dropped():
    q = parse(
        "SELECT campaign.id FROM campaign "
        "WHERE campaign.status = 'ENABLED' AND garbage here AND metrics.clicks ~ 3"
    )
    assert [c.field for c in q.conditions] == ["campaign.status"]


def test_empty_value_dropped():
    conditions, _ = parse_where("campaign.name = ''")
    assert conditions == ()


def test_dropped_predicate_logs_warning(caplog):
    with caplog.at_level("WARNING"):
        parse_where("this is not a predicate")
    assert "Dropping unrecognised WHERE predicate" in caplog.text


# ── Date ranges ─────────────────────────────────────────

def test_during_extracted():
    q = parse("SELECT campaign.id FROM campaign WHERE segments.date DURING LAST_7_DAYS")
    assert q.date_range is not None
    assert q.date_range.kind == DateRangeKind.DURING
    assert q.date_range.keyword == "LAST_7_DAYS"
    assert q.conditions == ()


def test_between_extracted():
    q = parse(
        "SELECT campaign.id FROM campaign "
        "WHERE segments.date BETWEEN '2024-01-01' AND '2024-01-31' AND campaign.status = 'ENABLED'"
    )
    assert q.date_range.kind == DateRangeKind.BETWEEN
    assert q.date_range.start_literal == "2024-01-01"
    assert q.date_range.end_literal == "2024-01-31"
    assert [c.field for c in q.conditions] == ["campaign.status"]


def test_date_range_alongside_conditions():
    q = parse(
        "SELECT campaign.id FROM campaign "
        "WHERE campaign.status = 'ENABLED' AND segments.date DURING THIS_MONTH AND metrics.clicks > 0"
    )
    assert q.date_range.keyword == "THIS_MONTH"
    assert [c.field for c in q.conditions] == ["campaign.status", "metrics.clicks"]


def test_between_wins_over_during():
    q = parse(
        "SELECT campaign.id FROM campaign WHERE segments.date DURING LAST_7_DAYS "
        "AND segments.date BETWEEN '2024-02-01' AND '2024-02-10'"
    )
    assert q.date_range.kind == DateRangeKind.BETWEEN


def test_date_field_never_in_conditions():
    q = parse("SELECT campaign.id FROM campaign WHERE segments.date >= '2024-01-01'")
    assert q.conditions == ()
    assert q.date_range is None


def test_non_date_suffix_is_a_condition():
    q = parse("SELECT campaign.id FROM campaign WHERE campaign.start_date > '2024-01-01'")
    assert [c.field for c in q.conditions] == ["campaign.start_date"]
