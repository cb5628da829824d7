"""SQLite-backed listing catalog and append-only click log."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable
from datetime import UTC, date, datetime
from pathlib import Path

from badgerank.aggregate import as_utc
from badgerank.models import ClickEvent, Listing

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS listings (
    id         INTEGER PRIMARY KEY,
    deadline   TEXT NOT NULL,
    created_at TEXT NOT NULL,
    fields     TEXT NOT NULL DEFAULT '{}'
);
CREATE TABLE IF NOT EXISTS log_clicks (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    listing_id  INTEGER NOT NULL REFERENCES listings(id),
    occurred_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_log_clicks_listing ON log_clicks (listing_id);
CREATE INDEX IF NOT EXISTS idx_log_clicks_occurred ON log_clicks (occurred_at);
"""

_CORE_COLUMNS = {"id", "deadline", "created_at"}


class UnknownListingError(LookupError):
    """Raised when a click is recorded for a listing the catalog does not hold."""


def _ts(value: datetime) -> str:
    # Fixed-width UTC text so lexical comparison in SQL matches time order.
    return as_utc(value).isoformat(timespec="microseconds")


class ClickStore:
    """Listing catalog plus click log backed by SQLite.

    Serves both ranking inputs: active listings and click events.
    """

    def __init__(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    # ── public ──────────────────────────────────────────────────────────

    def upsert_listings(self, listings: Iterable[Listing]) -> int:
        """Insert or update listings; return the number of rows written.

        ``created_at`` is kept from the first insert.
        """
        now = _ts(datetime.now(UTC))
        rows = [
            (
                listing.id,
                listing.deadline.isoformat(),
                _ts(listing.created_at) if listing.created_at else now,
                json.dumps(
                    listing.model_dump(mode="json", exclude=_CORE_COLUMNS),
                    ensure_ascii=False,
                ),
            )
            for listing in listings
        ]
        con = self._connect()
        try:
            con.executemany(
                """
                INSERT INTO listings (id, deadline, created_at, fields)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    deadline = excluded.deadline,
                    fields = excluded.fields
                """,
                rows,
            )
            con.commit()
        finally:
            con.close()
        logger.info("Upserted %d listings", len(rows))
        return len(rows)

    def record_click(self, listing_id: int, occurred_at: datetime | None = None) -> ClickEvent:
        """Append a click event for *listing_id* (default timestamp: now)."""
        event = ClickEvent(listing_id=listing_id, occurred_at=occurred_at or datetime.now(UTC))
        con = self._connect()
        try:
            cur = con.execute("SELECT 1 FROM listings WHERE id = ?", (listing_id,))
            if cur.fetchone() is None:
                raise UnknownListingError(f"No listing with id {listing_id}")
            con.execute(
                "INSERT INTO log_clicks (listing_id, occurred_at) VALUES (?, ?)",
                (event.listing_id, _ts(event.occurred_at)),
            )
            con.commit()
        finally:
            con.close()
        logger.debug("Recorded click on listing %d", listing_id)
        return event

    def active_listings(self, today: date) -> list[Listing]:
        """Return listings whose deadline is *today* or later, by id."""
        return self._listings(
            "SELECT id, deadline, created_at, fields FROM listings "
            "WHERE deadline >= ? ORDER BY id",
            (today.isoformat(),),
        )

    def all_listings(self) -> list[Listing]:
        """Return every listing, newest first."""
        return self._listings(
            "SELECT id, deadline, created_at, fields FROM listings "
            "ORDER BY created_at DESC, id DESC",
            (),
        )

    def click_events(
        self,
        active_only: bool = True,
        today: date | None = None,
        since: datetime | None = None,
    ) -> list[ClickEvent]:
        """Return click events in insertion order.

        With *active_only*, only events whose listing is still active on
        *today* are returned. *since* is an inclusive lower bound on
        ``occurred_at``.
        """
        sql = "SELECT c.listing_id, c.occurred_at FROM log_clicks c"
        clauses: list[str] = []
        params: list[str] = []
        if active_only:
            if today is None:
                raise ValueError("today is required when active_only is set")
            sql += " JOIN listings l ON l.id = c.listing_id"
            clauses.append("l.deadline >= ?")
            params.append(today.isoformat())
        if since is not None:
            clauses.append("c.occurred_at >= ?")
            params.append(_ts(since))
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY c.id"

        con = self._connect()
        try:
            cur = con.execute(sql, params)
            return [
                ClickEvent(listing_id=row[0], occurred_at=datetime.fromisoformat(row[1]))
                for row in cur.fetchall()
            ]
        finally:
            con.close()

    def click_counts(self) -> dict[int, int]:
        """Return lifetime click counts per listing id (listings with clicks only)."""
        con = self._connect()
        try:
            cur = con.execute(
                "SELECT listing_id, COUNT(*) FROM log_clicks GROUP BY listing_id"
            )
            return {row[0]: row[1] for row in cur.fetchall()}
        finally:
            con.close()

    # ── private ─────────────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _init_db(self) -> None:
        con = self._connect()
        con.executescript(_SCHEMA)
        con.close()

    def _listings(self, sql: str, params: tuple[str, ...]) -> list[Listing]:
        con = self._connect()
        try:
            cur = con.execute(sql, params)
            return [
                Listing(
                    id=row[0],
                    deadline=date.fromisoformat(row[1]),
                    created_at=datetime.fromisoformat(row[2]),
                    **json.loads(row[3]),
                )
                for row in cur.fetchall()
            ]
        finally:
            con.close()
