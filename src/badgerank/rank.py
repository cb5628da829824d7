"""Popularity badges for active listings."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from badgerank import config
from badgerank.models import AggregatedCount, Badge

logger = logging.getLogger(__name__)


def _notable_count(n: int, ratio: float) -> int:
    return max(1, math.ceil(n * ratio))


def rank(
    counts: Mapping[int, AggregatedCount],
    notable_min_listings: int | None = None,
    notable_ratio: float | None = None,
) -> dict[int, Badge | None]:
    """Assign at most one badge per listing, in priority order.

    1. ``Popular``: the single listing with the most lifetime clicks (> 0).
    2. ``Notable``: with at least ``notable_min_listings`` listings, the next
       ``max(1, ceil(n * notable_ratio))`` listings by lifetime clicks that
       have at least one click.
    3. ``Rising``: the single listing with the most clicks in the recency
       window (> 0), unless it already holds a badge.

    Ties keep the iteration order of *counts* (both sorts are stable).
    """
    min_listings = (
        config.NOTABLE_MIN_LISTINGS if notable_min_listings is None else notable_min_listings
    )
    ratio = config.NOTABLE_RATIO if notable_ratio is None else notable_ratio

    badges: dict[int, Badge | None] = {listing_id: None for listing_id in counts}
    if not counts:
        logger.info("No active listings; nothing to rank")
        return badges

    by_total = sorted(counts.values(), key=lambda c: c.total_clicks, reverse=True)

    # ── 1. Popular ────────────────────────────────────────────────────
    top = by_total[0]
    if top.total_clicks > 0:
        badges[top.listing_id] = Badge.POPULAR

    # ── 2. Notable ────────────────────────────────────────────────────
    n = len(counts)
    if n >= min_listings:
        top_count = _notable_count(n, ratio)
        clicked = [c for c in by_total if c.total_clicks > 0]
        for count in clicked[1 : top_count + 1]:
            if badges[count.listing_id] is None:
                badges[count.listing_id] = Badge.NOTABLE

    # ── 3. Rising ─────────────────────────────────────────────────────
    by_recent = sorted(counts.values(), key=lambda c: c.recent_clicks, reverse=True)
    hottest = by_recent[0]
    if hottest.recent_clicks > 0 and badges[hottest.listing_id] is None:
        badges[hottest.listing_id] = Badge.RISING

    logger.info(
        "Ranked %d listings; top total=%d, top recent=%d, badged=%d",
        n,
        top.total_clicks,
        hottest.recent_clicks,
        sum(1 for badge in badges.values() if badge is not None),
    )
    return badges
