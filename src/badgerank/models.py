"""Domain models shared by the aggregator, ranker and store."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Badge(StrEnum):
    POPULAR = "Popular"
    NOTABLE = "Notable"
    RISING = "Rising"

    @property
    def label(self) -> str:
        """Display text shown next to a badged listing."""
        return _BADGE_LABELS[self]


_BADGE_LABELS: dict[Badge, str] = {
    Badge.POPULAR: "🔥 인기 서평단",
    Badge.NOTABLE: "⭐ 주목받는 서평단",
    Badge.RISING: "🚀 급상승 서평단",
}


class Listing(BaseModel):
    """A catalog entry. Display fields (title, url, publisher, ...) ride along as extras."""

    model_config = ConfigDict(extra="allow")

    id: int
    deadline: date
    created_at: datetime | None = None


class ClickEvent(BaseModel):
    listing_id: int
    occurred_at: datetime


class AggregatedCount(BaseModel):
    listing_id: int
    total_clicks: int = 0
    recent_clicks: int = 0


class AnnotatedListing(Listing):
    click_count: int = Field(default=0, ge=0)
    badge: Badge | None = None


class ListingClickStats(BaseModel):
    listing: Listing
    click_count: int = 0
