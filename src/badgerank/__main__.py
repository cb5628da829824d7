"""CLI entry-point: ``python -m badgerank import|click|badges|analytics``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from badgerank import config
from badgerank.analytics import click_analytics
from badgerank.catalog import CatalogError, load_listings
from badgerank.pipeline import compute_ranking
from badgerank.store import ClickStore, UnknownListingError

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")


def _import(store: ClickStore, path: Path) -> None:
    try:
        listings = load_listings(path)
    except (OSError, CatalogError) as exc:
        logger.error("Could not load catalog: %s", exc)
        sys.exit(1)
    store.upsert_listings(listings)


def _click(store: ClickStore, listing_id: int) -> None:
    try:
        event = store.record_click(listing_id)
    except UnknownListingError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    logger.info("Click recorded on listing %d at %s", event.listing_id, event.occurred_at)


def _badges(store: ClickStore, show_all: bool) -> None:
    ranking = compute_ranking(store)
    annotated = ranking.annotate(ranking.listings)
    if not show_all:
        annotated = [listing for listing in annotated if listing.badge is not None]
    _print_json(
        [
            {**listing.model_dump(mode="json"), "label": listing.badge.label if listing.badge else None}
            for listing in annotated
        ]
    )


def _analytics(store: ClickStore) -> None:
    stats = click_analytics(store.all_listings(), store.click_counts())
    _print_json(
        [
            {**s.listing.model_dump(mode="json"), "click_count": s.click_count}
            for s in stats
        ]
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="badgerank",
        description="Popularity badges for time-bounded listings.",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=config.DB_PATH,
        help=f"SQLite database path (default: {config.DB_PATH}).",
    )
    sub = parser.add_subparsers(dest="command")

    # ── import ─────────────────────────────────────────────────────────
    import_parser = sub.add_parser("import", help="Load listings from a YAML catalog.")
    import_parser.add_argument("path", type=Path, help="Catalog file (YAML).")

    # ── click ──────────────────────────────────────────────────────────
    click_parser = sub.add_parser("click", help="Record a click on a listing.")
    click_parser.add_argument("listing_id", type=int)

    # ── badges ─────────────────────────────────────────────────────────
    badges_parser = sub.add_parser("badges", help="Print active listings with badges.")
    badges_parser.add_argument(
        "--all",
        action="store_true",
        help="Include active listings without a badge.",
    )

    # ── analytics ──────────────────────────────────────────────────────
    sub.add_parser("analytics", help="Print lifetime click counts for every listing.")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _setup_logging()
    store = ClickStore(db_path=args.db)

    if args.command == "import":
        _import(store, args.path)
    elif args.command == "click":
        _click(store, args.listing_id)
    elif args.command == "badges":
        _badges(store, show_all=args.all)
    elif args.command == "analytics":
        _analytics(store)


if __name__ == "__main__":
    main()
