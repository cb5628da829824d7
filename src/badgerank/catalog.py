"""Load listing records from a YAML catalog file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from badgerank.models import Listing

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a catalog file cannot be turned into listings."""


def load_listings(path: Path) -> list[Listing]:
    """Parse a catalog file of the form ``listings: [{id, deadline, ...}, ...]``.

    A bare top-level list is accepted as well.
    """
    with open(path, encoding="utf-8") as fh:
        raw: Any = yaml.safe_load(fh)

    if raw is None:
        logger.warning("Catalog %s is empty", path)
        return []
    entries = raw.get("listings", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise CatalogError(f"{path}: expected a list of listings")

    listings: list[Listing] = []
    for index, entry in enumerate(entries):
        try:
            listings.append(Listing.model_validate(entry))
        except ValidationError as exc:
            raise CatalogError(f"{path}: entry {index} is invalid: {exc}") from exc
    logger.info("Loaded %d listings from %s", len(listings), path)
    return listings
