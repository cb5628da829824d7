"""Ranking orchestration: fetch inputs → aggregate → rank → merge."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, date, datetime
from typing import Protocol

from pydantic import BaseModel, Field

from badgerank import config
from badgerank.aggregate import active_only, aggregate, as_utc
from badgerank.merge import merge
from badgerank.models import AggregatedCount, AnnotatedListing, Badge, ClickEvent, Listing
from badgerank.rank import rank

logger = logging.getLogger(__name__)


class BadgeSource(Protocol):
    """Read side of the listing catalog and click log."""

    def active_listings(self, today: date) -> list[Listing]: ...

    def click_events(
        self,
        active_only: bool = True,
        today: date | None = None,
        since: datetime | None = None,
    ) -> list[ClickEvent]: ...


class Ranking(BaseModel):
    """One request's ranking, reusable across several listing slices."""

    listings: list[Listing] = Field(default_factory=list)
    counts: dict[int, AggregatedCount] = Field(default_factory=dict)
    badges: dict[int, Badge | None] = Field(default_factory=dict)

    def annotate(self, listings: Iterable[Listing]) -> list[AnnotatedListing]:
        return merge(listings, self.counts, self.badges)


def compute_ranking(source: BadgeSource, now: datetime | None = None) -> Ranking:
    """Read both inputs from *source* and rank the active listings.

    The three reads (active listings, full click history, recent clicks) are
    independent and run concurrently. Read errors propagate to the caller.
    """
    now = as_utc(now) if now is not None else datetime.now(UTC)
    today = config.today(now)
    since = now - config.recent_window()

    with ThreadPoolExecutor(max_workers=3) as pool:
        listings_future = pool.submit(source.active_listings, today)
        events_future = pool.submit(source.click_events, active_only=True, today=today)
        recent_future = pool.submit(
            source.click_events, active_only=True, today=today, since=since
        )
        listings = active_only(listings_future.result(), today)
        events = events_future.result()
        recent = recent_future.result()

    logger.info(
        "Fetched %d active listings, %d clicks (%d since %s)",
        len(listings),
        len(events),
        len(recent),
        since.isoformat(),
    )
    counts = aggregate(listings, events, now, recent_events=recent)
    return Ranking(listings=listings, counts=counts, badges=rank(counts))


def listings_with_badges(source: BadgeSource, now: datetime | None = None) -> list[AnnotatedListing]:
    """Every active listing, annotated with its click count and badge."""
    ranking = compute_ranking(source, now)
    return ranking.annotate(ranking.listings)


def assign_badges(
    listings: Iterable[Listing], source: BadgeSource, now: datetime | None = None
) -> list[AnnotatedListing]:
    """Annotate an arbitrary slice of listings using the global ranking."""
    return compute_ranking(source, now).annotate(listings)


def assign_badges_or_plain(
    listings: Iterable[Listing], source: BadgeSource, now: datetime | None = None
) -> list[AnnotatedListing]:
    """Like :func:`assign_badges`, but falls back to badge-free listings on read errors."""
    listings = list(listings)
    try:
        return assign_badges(listings, source, now)
    except Exception:
        logger.exception("Badge ranking failed; serving %d listings without badges", len(listings))
        return merge(listings, {}, {})
