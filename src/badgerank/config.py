"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DB_PATH: Path = Path(
    os.getenv("BADGERANK_DB_PATH", str(PROJECT_ROOT / "var" / "badgerank.sqlite3"))
)

# ── Ranking ────────────────────────────────────────────────────────────────
RECENT_WINDOW_MINUTES: int = int(os.getenv("BADGERANK_RECENT_WINDOW_MINUTES", "60"))
NOTABLE_MIN_LISTINGS: int = int(os.getenv("BADGERANK_NOTABLE_MIN_LISTINGS", "5"))
NOTABLE_RATIO: float = float(os.getenv("BADGERANK_NOTABLE_RATIO", "0.2"))

# ── Calendar ───────────────────────────────────────────────────────────────
# Deadlines are calendar dates in the catalog's local timezone.
TIMEZONE: str = os.getenv("BADGERANK_TIMEZONE", "Asia/Seoul")


def recent_window() -> timedelta:
    return timedelta(minutes=RECENT_WINDOW_MINUTES)


def today(now: datetime | None = None) -> date:
    """Return the catalog-local calendar date for *now* (default: current time)."""
    tz = ZoneInfo(TIMEZONE)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(tz).date()
