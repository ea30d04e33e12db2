"""
Loads the mock Google Ads account from YAML and serves it as query records.

The seed is the single source of truth for:
  - campaigns   (status, channel type, budget)
  - ad groups   (parent campaign, bid)
  - ad group ads (parent ad group, creative)
  - a per-day metrics baseline for each of the above

Records handed to the query engine are rebuilt on every ``list`` call so a
search can never mutate the store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

import yaml

from src.core.config import get_settings
from src.gaql.errors import ValidationError
from src.gaql.model import DateWindow


class RecordRepository(Protocol):
    def sources(self) -> list[str]: ...

    def list(self, source: str, window: DateWindow) -> list[dict[str, Any]]: ...


# ── Typed domain objects ─────────────────────────────────

@dataclass(frozen=True)
class DailyMetrics:
    impressions: int = 0
    clicks: int = 0
    cost_micros: int = 0
    conversions: int = 0

    def over(self, days: int) -> dict[str, Any]:
        """Totals for *days* days plus the derived ratios."""
        days = max(days, 0)
        impressions = self.impressions * days
        clicks = self.clicks * days
        cost_micros = self.cost_micros * days
        return {
            "impressions": impressions,
            "clicks": clicks,
            "cost_micros": cost_micros,
            "conversions": self.conversions * days,
            "ctr": round(clicks / impressions, 4) if impressions else 0.0,
            "average_cpc": round(cost_micros / clicks, 2) if clicks else 0.0,
        }


@dataclass(frozen=True)
class Campaign:
    id: str
    name: str
    status: str
    advertising_channel_type: str
    budget_id: str
    start_date: str | None = None
    target_spend_micros: int | None = None
    metrics: DailyMetrics = field(default_factory=DailyMetrics)


@dataclass(frozen=True)
class AdGroup:
    id: str
    campaign_id: str
    name: str
    status: str
    type: str
    cpc_bid_micros: int
    metrics: DailyMetrics = field(default_factory=DailyMetrics)


@dataclass(frozen=True)
class AdGroupAd:
    id: str
    ad_group_id: str
    status: str
    type: str
    final_urls: list[str] = field(default_factory=list)
    headlines: list[str] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)
    metrics: DailyMetrics = field(default_factory=DailyMetrics)


# ── Repository ───────────────────────────────────────────

class InMemoryRepository:
    """Read-only record store for one mock customer account."""

    def __init__(
        self,
        customer_id: str,
        campaigns: dict[str, Campaign],
        ad_groups: dict[str, AdGroup],
        ads: dict[str, AdGroupAd],
    ):
        self.customer_id = customer_id
        self.campaigns = campaigns
        self.ad_groups = ad_groups
        self.ads = ads
        self._builders = {
            "campaign": self._campaign_records,
            "ad_group": self._ad_group_records,
            "ad_group_ad": self._ad_records,
        }

    def sources(self) -> list[str]:
        return list(self._builders)

    def list(self, source: str, window: DateWindow) -> list[dict[str, Any]]:
        builder = self._builders.get(source.lower())
        if builder is None:
            raise ValidationError(
                f"Unsupported resource '{source}'. Allowed: {', '.join(self.sources())}",
                reason="UNSUPPORTED_RESOURCE",
            )
        return builder(window.days)

    # ── Record builders ──────────────────────────────

    def _resource(self, collection: str, entity_id: str) -> str:
        return f"customers/{self.customer_id}/{collection}/{entity_id}"

    def _customer(self) -> dict[str, Any]:
        return {"id": self.customer_id, "resource_name": f"customers/{self.customer_id}"}

    def _campaign_fields(self, c: Campaign) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "resource_name": self._resource("campaigns", c.id),
            "id": c.id,
            "name": c.name,
            "status": c.status,
            "advertising_channel_type": c.advertising_channel_type,
            "campaign_budget": self._resource("campaignBudgets", c.budget_id),
        }
        if c.start_date:
            fields["start_date"] = c.start_date
        if c.target_spend_micros is not None:
            fields["target_spend"] = {"target_spend_micros": c.target_spend_micros}
        return fields

    def _ad_group_fields(self, g: AdGroup) -> dict[str, Any]:
        return {
            "resource_name": self._resource("adGroups", g.id),
            "id": g.id,
            "name": g.name,
            "status": g.status,
            "type": g.type,
            "cpc_bid_micros": g.cpc_bid_micros,
            "campaign": self._resource("campaigns", g.campaign_id),
        }

    def _ad_fields(self, a: AdGroupAd) -> dict[str, Any]:
        ad: dict[str, Any] = {"id": a.id, "type": a.type, "final_urls": list(a.final_urls)}
        if a.type == "EXPANDED_TEXT_AD":
            headlines = a.headlines + ["", ""]
            ad["expanded_text_ad"] = {
                "headline_part1": headlines[0],
                "headline_part2": headlines[1],
                "description": a.descriptions[0] if a.descriptions else "",
            }
        else:
            ad["responsive_search_ad"] = {
                "headlines": [{"text": h} for h in a.headlines],
                "descriptions": [{"text": d} for d in a.descriptions],
            }
        return {
            "resource_name": self._resource("adGroupAds", f"{a.ad_group_id}~{a.id}"),
            "status": a.status,
            "ad_group": self._resource("adGroups", a.ad_group_id),
            "ad": ad,
        }

    def _campaign_records(self, days: int) -> list[dict[str, Any]]:
        return [
            {
                "customer": self._customer(),
                "campaign": self._campaign_fields(c),
                "metrics": c.metrics.over(days),
            }
            for c in self.campaigns.values()
        ]

    def _ad_group_records(self, days: int) -> list[dict[str, Any]]:
        records = []
        for g in self.ad_groups.values():
            record: dict[str, Any] = {
                "customer": self._customer(),
                "ad_group": self._ad_group_fields(g),
                "metrics": g.metrics.over(days),
            }
            campaign = self.campaigns.get(g.campaign_id)
            if campaign is not None:
                record["campaign"] = self._campaign_fields(campaign)
            records.append(record)
        return records

    def _ad_records(self, days: int) -> list[dict[str, Any]]:
        records = []
        for a in self.ads.values():
            record: dict[str, Any] = {
                "customer": self._customer(),
                "ad_group_ad": self._ad_fields(a),
                "metrics": a.metrics.over(days),
            }
            group = self.ad_groups.get(a.ad_group_id)
            if group is not None:
                record["ad_group"] = self._ad_group_fields(group)
                campaign = self.campaigns.get(group.campaign_id)
                if campaign is not None:
                    record["campaign"] = self._campaign_fields(campaign)
            records.append(record)
        return records


# ── Parsing ──────────────────────────────────────────────

def _parse_metrics(raw: dict[str, Any] | None) -> DailyMetrics:
    if not raw:
        return DailyMetrics()
    return DailyMetrics(
        impressions=int(raw.get("impressions", 0)),
        clicks=int(raw.get("clicks", 0)),
        cost_micros=int(raw.get("cost_micros", 0)),
        conversions=int(raw.get("conversions", 0)),
    )


def _parse_campaign(raw: dict[str, Any]) -> Campaign:
    return Campaign(
        id=str(raw["id"]),
        name=raw["name"],
        status=raw.get("status", "PAUSED"),
        advertising_channel_type=raw.get("advertising_channel_type", "SEARCH"),
        budget_id=str(raw.get("budget_id", "")),
        start_date=raw.get("start_date"),
        target_spend_micros=raw.get("target_spend_micros"),
        metrics=_parse_metrics(raw.get("metrics_per_day")),
    )


def _parse_ad_group(raw: dict[str, Any]) -> AdGroup:
    return AdGroup(
        id=str(raw["id"]),
        campaign_id=str(raw["campaign_id"]),
        name=raw["name"],
        status=raw.get("status", "ENABLED"),
        type=raw.get("type", "SEARCH_STANDARD"),
        cpc_bid_micros=int(raw.get("cpc_bid_micros", 0)),
        metrics=_parse_metrics(raw.get("metrics_per_day")),
    )


def _parse_ad(raw: dict[str, Any]) -> AdGroupAd:
    return AdGroupAd(
        id=str(raw["id"]),
        ad_group_id=str(raw["ad_group_id"]),
        status=raw.get("status", "ENABLED"),
        type=raw.get("type", "RESPONSIVE_SEARCH_AD"),
        final_urls=raw.get("final_urls") or [],
        headlines=raw.get("headlines") or [],
        descriptions=raw.get("descriptions") or [],
        metrics=_parse_metrics(raw.get("metrics_per_day")),
    )


def build_repository(raw_yaml: dict[str, Any]) -> InMemoryRepository:
    campaigns = [_parse_campaign(c) for c in raw_yaml.get("campaigns", [])]
    ad_groups = [_parse_ad_group(g) for g in raw_yaml.get("ad_groups", [])]
    ads = [_parse_ad(a) for a in raw_yaml.get("ad_group_ads", [])]
    return InMemoryRepository(
        customer_id=str(raw_yaml.get("customer_id", "")),
        campaigns={c.id: c for c in campaigns},
        ad_groups={g.id: g for g in ad_groups},
        ads={a.id: a for a in ads},
    )


# ── Public API ───────────────────────────────────────────

@lru_cache
def load_repository(path: Path | None = None) -> InMemoryRepository:
    """Load and cache the mock account from YAML."""
    path = path or get_settings().mock_data_path
    with open(path) as f:
        raw = yaml.safe_load(f)
    return build_repository(raw or {})
