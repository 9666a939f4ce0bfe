"""Tests for site initialization."""

from __future__ import annotations

import tomllib
from pathlib import Path

from strata.services.init import init_site


class TestInitSite:
    def test_creates_config_and_database(self, tmp_path: Path) -> None:
        result = init_site(tmp_path, name="blog", theme="Agency", admin_theme="Admin")
        assert result.ok
        assert result.op == "init_site"
        config = tomllib.loads((tmp_path / "strata.toml").read_text())
        assert config["site"] == {"name": "blog", "theme": "Agency", "admin_theme": "Admin"}
        assert (tmp_path / ".strata" / "strata.db").is_file()

    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "new-site"
        assert init_site(root, name="x", theme="A", admin_theme="B").ok
        assert (root / "strata.toml").is_file()

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        init_site(tmp_path, name="one", theme="A", admin_theme="B")
        result = init_site(tmp_path, name="two", theme="A", admin_theme="B")
        assert not result.ok
        assert result.error.code == "ALREADY_EXISTS"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        init_site(tmp_path, name="one", theme="A", admin_theme="B")
        assert init_site(tmp_path, name="two", theme="A", admin_theme="B", force=True).ok
        assert 'name = "two"' in (tmp_path / "strata.toml").read_text()

    def test_themes_must_differ(self, tmp_path: Path) -> None:
        result = init_site(tmp_path, name="x", theme="Same", admin_theme="Same")
        assert not result.ok
        assert result.error.code == "INVALID_INPUT"
        assert not (tmp_path / "strata.toml").exists()
