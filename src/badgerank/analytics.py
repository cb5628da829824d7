"""Lifetime click counts for the admin dashboard."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from badgerank.aggregate import as_utc
from badgerank.models import Listing, ListingClickStats

_EPOCH = datetime.min


def click_analytics(
    listings: Iterable[Listing], click_counts: Mapping[int, int]
) -> list[ListingClickStats]:
    """Pair every listing (expired ones included) with its lifetime clicks.

    Newest-created listings come first; listings without ``created_at`` last.
    """
    stats = [
        ListingClickStats(listing=listing, click_count=click_counts.get(listing.id, 0))
        for listing in listings
    ]
    stats.sort(
        key=lambda s: as_utc(s.listing.created_at or _EPOCH),
        reverse=True,
    )
    return stats
