"""Site — the process-wide container for one strata site.

The Site owns everything shared across requests: the database engine,
the layer store, the change signal, the memory cache, the plugin
manager, the scripting manager, and the rendering pipeline. Per-request
state is created by :meth:`Site.build_services` and lives only on the
returned :class:`ServiceProvider`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from strata.config.logging import bind_request, clear_request
from strata.infrastructure.cache import MemoryCache
from strata.infrastructure.database.engine import init_database
from strata.infrastructure.display import (
    RequestLayoutAccessor,
    StaticAdminThemeService,
    StaticThemeManager,
    TemplateDisplayManager,
)
from strata.infrastructure.scripting import ScriptingManager
from strata.infrastructure.signal import Signal
from strata.infrastructure.store import SqlLayerStore
from strata.plugins.manager import PluginManager
from strata.services.pipeline import LayerRenderingPipeline
from strata.services.request import (
    AdminThemeService,
    DisplayManager,
    LayerStore,
    LayoutAccessor,
    ModelUpdater,
    NullModelUpdater,
    RequestInfo,
    ResultExecutingContext,
    ResultKind,
    ServiceProvider,
    ThemeManager,
)

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from strata.config.settings import StrataSettings
    from strata.domain.shapes import Layout
    from strata.services.pipeline import LayeringOutcome

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Outcome of a simulated response: the pipeline report and final layout."""

    outcome: LayeringOutcome
    layout: Layout
    continued: bool


class Site:
    """Shared services for one site, built from settings."""

    def __init__(self, settings: StrataSettings) -> None:
        self._settings = settings
        self._engine = init_database(settings.site_root)
        self.store = SqlLayerStore(self._engine)
        self.signal = Signal()
        self.memory_cache = MemoryCache()
        self.plugin_manager = PluginManager()
        self._load_plugins()
        self.scripting = ScriptingManager.default(self.plugin_manager.collect_global_methods())
        self.pipeline = LayerRenderingPipeline(
            self.scripting,
            self.memory_cache,
            self.signal,
            engine_prefix=settings.scripting.engine,
        )

    @property
    def root(self) -> Path:
        return self._settings.site_root

    @property
    def settings(self) -> StrataSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    def _load_plugins(self) -> None:
        plugins = self._settings.plugins
        if plugins.request_rules:
            from strata.plugins.builtins.request_rules import RequestRulesPlugin

            self.plugin_manager.register_plugin(RequestRulesPlugin(), name="request_rules")
        local_dir = self._settings.data_dir / "plugins" if plugins.local_dir_enabled else None
        loaded = self.plugin_manager.discover_and_load(local_dir=local_dir)
        logger.debug("Plugins loaded: %s", ", ".join(loaded) or "none")

    # ------------------------------------------------------------------
    # Per-request wiring
    # ------------------------------------------------------------------

    def build_services(
        self,
        request: RequestInfo,
        *,
        theme: str | None = None,
        layout: Layout | None = None,
    ) -> ServiceProvider:
        """Create the per-response service provider.

        *theme* overrides the configured front-end theme for this request.
        """
        site = self._settings.site
        services = ServiceProvider()
        services.add_instance(RequestInfo, request)
        services.register(ThemeManager, lambda _: StaticThemeManager(theme or site.theme))
        services.register(AdminThemeService, lambda _: StaticAdminThemeService(site.admin_theme))
        services.add_instance(LayerStore, self.store)
        services.register(LayoutAccessor, lambda _: RequestLayoutAccessor(layout))
        services.register(DisplayManager, lambda _: TemplateDisplayManager())
        services.register(ModelUpdater, lambda _: NullModelUpdater())
        return services

    async def render(
        self,
        request: RequestInfo,
        *,
        result: ResultKind = ResultKind.VIEW,
        is_admin: bool = False,
        theme: str | None = None,
        layout: Layout | None = None,
    ) -> RenderResult:
        """Run the layering hook for a simulated response to *request*."""
        services = self.build_services(request, theme=theme, layout=layout)
        context = ResultExecutingContext(result=result, services=services, is_admin=is_admin)
        continued = False

        async def _next() -> None:
            nonlocal continued
            continued = True

        bind_request(path=request.path, result=str(result))
        try:
            outcome = await self.pipeline.on_result_execution(context, _next)
        finally:
            clear_request()
        accessor: LayoutAccessor = services.get_required(LayoutAccessor)
        return RenderResult(outcome=outcome, layout=await accessor.get_layout(), continued=continued)
