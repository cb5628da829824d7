"""Unit tests for click aggregation."""

from datetime import UTC, date, datetime, timedelta

from badgerank.aggregate import active_only, aggregate
from badgerank.models import ClickEvent, Listing
from badgerank.rank import rank

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def _listing(listing_id: int, deadline: date = date(2026, 3, 31)) -> Listing:
    return Listing(id=listing_id, deadline=deadline, title=f"Listing {listing_id}")


def _click(listing_id: int, minutes_ago: float) -> ClickEvent:
    return ClickEvent(listing_id=listing_id, occurred_at=NOW - timedelta(minutes=minutes_ago))


class TestActiveOnly:
    def test_deadline_today_is_active(self) -> None:
        listings = [
            _listing(1, date(2026, 3, 9)),
            _listing(2, date(2026, 3, 10)),
            _listing(3, date(2026, 3, 11)),
        ]
        assert [lst.id for lst in active_only(listings, date(2026, 3, 10))] == [2, 3]


class TestAggregate:
    def test_zero_click_listings_present(self) -> None:
        counts = aggregate([_listing(1), _listing(2)], [], NOW)
        assert list(counts) == [1, 2]
        assert all(c.total_clicks == 0 and c.recent_clicks == 0 for c in counts.values())

    def test_total_and_recent(self) -> None:
        events = [_click(1, 5), _click(1, 600), _click(1, 60 * 24 * 30), _click(2, 30)]
        counts = aggregate([_listing(1), _listing(2)], events, NOW)
        assert (counts[1].total_clicks, counts[1].recent_clicks) == (3, 1)
        assert (counts[2].total_clicks, counts[2].recent_clicks) == (1, 1)

    def test_window_lower_bound_is_inclusive(self) -> None:
        events = [_click(1, 60), _click(1, 60 + 1 / 60)]
        counts = aggregate([_listing(1)], events, NOW)
        assert counts[1].total_clicks == 2
        assert counts[1].recent_clicks == 1

    def test_events_on_inactive_listings_ignored(self) -> None:
        counts = aggregate([_listing(1)], [_click(1, 1), _click(99, 1)], NOW)
        assert set(counts) == {1}
        assert counts[1].total_clicks == 1

    def test_separate_recent_read_matches_filtering(self) -> None:
        events = [_click(1, 5), _click(1, 120), _click(2, 59), _click(2, 61)]
        recent = [e for e in events if e.occurred_at >= NOW - timedelta(hours=1)]
        listings = [_listing(1), _listing(2)]
        assert aggregate(listings, events, NOW, recent_events=recent) == aggregate(
            listings, events, NOW
        )

    def test_recent_read_never_exceeds_total(self) -> None:
        listings = [_listing(i) for i in range(1, 7)]
        late = [_click(6, 1)]
        counts = aggregate(listings, [_click(1, 600)], NOW, recent_events=late)
        assert (counts[6].total_clicks, counts[6].recent_clicks) == (0, 0)
        assert all(c.recent_clicks <= c.total_clicks for c in counts.values())
        assert rank(counts)[6] is None

    def test_naive_timestamps_treated_as_utc(self) -> None:
        naive = ClickEvent(listing_id=1, occurred_at=datetime(2026, 3, 10, 11, 30))
        counts = aggregate([_listing(1)], [naive], NOW)
        assert counts[1].recent_clicks == 1

    def test_custom_window(self) -> None:
        counts = aggregate([_listing(1)], [_click(1, 90)], NOW, window=timedelta(hours=2))
        assert counts[1].recent_clicks == 1

    def test_does_not_mutate_inputs(self) -> None:
        listings = [_listing(1)]
        events = [_click(1, 1)]
        before = [lst.model_dump() for lst in listings], [e.model_dump() for e in events]
        aggregate(listings, events, NOW)
        assert ([lst.model_dump() for lst in listings], [e.model_dump() for e in events]) == before
