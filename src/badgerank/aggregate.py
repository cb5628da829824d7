"""Click aggregation: join active listings against the click log."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from badgerank import config
from badgerank.models import AggregatedCount, ClickEvent, Listing

logger = logging.getLogger(__name__)


def as_utc(ts: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def active_only(listings: Iterable[Listing], today: date) -> list[Listing]:
    """Return listings whose deadline is *today* or later."""
    return [listing for listing in listings if listing.deadline >= today]


def aggregate(
    active_listings: Iterable[Listing],
    events: Iterable[ClickEvent],
    now: datetime,
    recent_events: Iterable[ClickEvent] | None = None,
    window: timedelta | None = None,
) -> dict[int, AggregatedCount]:
    """Count lifetime and recent clicks for every active listing.

    The result holds one entry per active listing, in input order, including
    listings without any clicks. ``recent_clicks`` counts events at or after
    ``now - window``. When *recent_events* is given (a narrower, already
    time-bounded read) it is used for the recent pass instead of *events*.
    Events for listings outside *active_listings* are ignored.
    """
    since = as_utc(now) - (window if window is not None else config.recent_window())

    counts: dict[int, AggregatedCount] = {}
    for listing in active_listings:
        counts.setdefault(listing.id, AggregatedCount(listing_id=listing.id))

    skipped = 0
    for event in events:
        count = counts.get(event.listing_id)
        if count is None:
            skipped += 1
            continue
        count.total_clicks += 1
        if recent_events is None and as_utc(event.occurred_at) >= since:
            count.recent_clicks += 1

    if recent_events is not None:
        for event in recent_events:
            count = counts.get(event.listing_id)
            if count is not None and as_utc(event.occurred_at) >= since:
                count.recent_clicks += 1
        # Clicks landing between the two reads can only show up in the recent one.
        for count in counts.values():
            count.recent_clicks = min(count.recent_clicks, count.total_clicks)

    logger.info(
        "Aggregated clicks for %d active listings (ignored %d events on inactive listings)",
        len(counts),
        skipped,
    )
    return counts
