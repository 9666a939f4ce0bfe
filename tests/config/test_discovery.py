"""Tests for config file discovery and loading."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from strata.config.discovery import CONFIG_ENV_VAR, find_config, load_config, render_config
from strata.config.models import SiteConfig, StrataConfig


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / "strata.toml").write_text("")
        assert find_config(tmp_path) == tmp_path / "strata.toml"

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "strata.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path / "strata.toml"

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        other = tmp_path / "other.toml"
        other.write_text("")
        (tmp_path / "strata.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert find_config(tmp_path) == other

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        assert load_config(cwd=tmp_path) == StrataConfig()

    def test_loads_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "strata.toml"
        path.write_text('[site]\nadmin_theme = "Admin"\n[scripting]\nengine = "jinja"\n')
        config = load_config(path)
        assert config.site.admin_theme == "Admin"
        assert config.site.theme == "TheTheme"


class TestRenderConfig:
    def test_renders_parseable_site_section(self) -> None:
        config = StrataConfig(site=SiteConfig(name='My "Blog"', theme="Agency", admin_theme="Admin"))
        data = tomllib.loads(render_config(config))
        assert data == {"site": {"name": 'My "Blog"', "theme": "Agency", "admin_theme": "Admin"}}

    def test_round_trips_through_load(self, tmp_path: Path) -> None:
        config = StrataConfig(site=SiteConfig(name="blog"))
        path = tmp_path / "strata.toml"
        path.write_text(render_config(config))
        assert load_config(path) == config
