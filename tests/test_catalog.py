"""Tests for YAML catalog loading."""

from datetime import date
from pathlib import Path

import pytest

from badgerank.catalog import CatalogError, load_listings


class TestLoadListings:
    def test_mapping_form(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yml"
        path.write_text(
            "listings:\n"
            "  - id: 1\n"
            "    deadline: 2026-04-01\n"
            "    title: 서평단 모집\n"
            "    url: https://example.com/1\n",
            encoding="utf-8",
        )
        listings = load_listings(path)
        assert len(listings) == 1
        assert listings[0].deadline == date(2026, 4, 1)
        assert listings[0].model_dump()["title"] == "서평단 모집"

    def test_bare_list(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yml"
        path.write_text("- {id: 1, deadline: '2026-04-01'}\n- {id: 2, deadline: '2026-04-02'}\n")
        assert [lst.id for lst in load_listings(path)] == [1, 2]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_listings(path) == []

    def test_missing_deadline(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yml"
        path.write_text("listings:\n  - id: 3\n")
        with pytest.raises(CatalogError):
            load_listings(path)
