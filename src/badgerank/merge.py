"""Attach computed badges and click counts to listing records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from badgerank.models import AggregatedCount, AnnotatedListing, Badge, Listing


def merge(
    listings: Iterable[Listing],
    counts: Mapping[int, AggregatedCount],
    badges: Mapping[int, Badge | None],
) -> list[AnnotatedListing]:
    """Return annotated copies of *listings*.

    Listings outside the ranked set get ``click_count=0`` and no badge, so the
    same ranking can annotate any slice (home feed, search results, ...).
    """
    annotated: list[AnnotatedListing] = []
    for listing in listings:
        count = counts.get(listing.id)
        fields = listing.model_dump(exclude={"click_count", "badge"})
        annotated.append(
            AnnotatedListing(
                **fields,
                click_count=count.total_clicks if count is not None else 0,
                badge=badges.get(listing.id),
            )
        )
    return annotated
