"""Shared pytest fixtures and test helpers for strata tests."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from strata.config.settings import StrataSettings
from strata.domain.layers import Layer, WidgetAssignment
from strata.domain.shapes import Layout, Shape, ShapeMetadata
from strata.infrastructure.database.engine import init_database
from strata.infrastructure.display import (
    RequestLayoutAccessor,
    StaticAdminThemeService,
    StaticThemeManager,
)
from strata.infrastructure.site import Site
from strata.services.request import (
    AdminThemeService,
    DisplayManager,
    LayerStore,
    LayoutAccessor,
    ModelUpdater,
    NullModelUpdater,
    RequestInfo,
    ServiceProvider,
    ThemeManager,
)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo the handlers each CLI invocation installs on the root logger."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    strata = logging.getLogger("strata")
    strata_level = strata.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    strata.setLevel(strata_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary site directory with a minimal strata.toml."""
    (tmp_path / "strata.toml").write_text(
        '[site]\nname = "test-site"\ntheme = "TheTheme"\nadmin_theme = "TheAdmin"\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def site(site_root: Path) -> Site:
    """Fully initialized site on a temp directory."""
    settings = StrataSettings.from_cli(site_root=site_root)
    s = Site(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp site root so the CLI picks up its strata.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes.
    """
    monkeypatch.chdir(site_root)


# ---------------------------------------------------------------------------
# In-memory collaborators for pipeline tests
# ---------------------------------------------------------------------------


class FakeLayerStore:
    """Layer store that counts how often it is queried."""

    def __init__(
        self,
        layers: Iterable[Layer] = (),
        widgets: Iterable[WidgetAssignment] = (),
    ) -> None:
        self.layers = list(layers)
        self.widgets = list(widgets)
        self.layer_queries = 0
        self.widget_queries = 0

    async def get_layers(self) -> list[Layer]:
        self.layer_queries += 1
        return list(self.layers)

    async def get_published_widgets(self) -> list[WidgetAssignment]:
        self.widget_queries += 1
        return [w for w in self.widgets if w.published]


class FakeDisplayManager:
    """Builds a bare shape per widget and records the build order."""

    def __init__(self) -> None:
        self.built: list[str] = []

    async def build_display(self, widget: WidgetAssignment, updater: ModelUpdater) -> Shape:
        self.built.append(widget.content_item_id)
        return Shape(
            metadata=ShapeMetadata(type=widget.content_type),
            properties={"content_item_id": widget.content_item_id},
        )


def make_services(
    store: Any,
    *,
    request: RequestInfo | None = None,
    theme: str | None = "TheTheme",
    admin_theme: str | None = "TheAdmin",
    layout: Layout | None = None,
    display: Any = None,
) -> ServiceProvider:
    """Build a per-response provider from fakes."""
    services = ServiceProvider()
    services.add_instance(RequestInfo, request or RequestInfo())
    services.add_instance(ThemeManager, StaticThemeManager(theme))
    services.add_instance(AdminThemeService, StaticAdminThemeService(admin_theme))
    services.add_instance(LayerStore, store)
    services.add_instance(LayoutAccessor, RequestLayoutAccessor(layout or Layout.create()))
    services.add_instance(DisplayManager, display or FakeDisplayManager())
    services.add_instance(ModelUpdater, NullModelUpdater())
    return services


def widget(content_item_id: str, layer: str, zone: str, **kwargs: Any) -> WidgetAssignment:
    """Shorthand for a published HtmlWidget assignment."""
    kwargs.setdefault("content_type", "HtmlWidget")
    return WidgetAssignment(content_item_id=content_item_id, layer=layer, zone=zone, **kwargs)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def add_layer(site: Site, name: str, rule: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """Create a layer via LayerService, asserting success."""
    from strata.services.layers import LayerService

    result = LayerService(site).save_layer(name, rule=rule, **kwargs)
    assert result.ok, result.error
    return result.data


def assign_widget(site: Site, content_item_id: str, **kwargs: Any) -> dict[str, Any]:
    """Assign a widget via LayerService, asserting success."""
    from strata.services.layers import LayerService

    kwargs.setdefault("content_type", "HtmlWidget")
    result = LayerService(site).assign_widget(content_item_id, **kwargs)
    assert result.ok, result.error
    return result.data
