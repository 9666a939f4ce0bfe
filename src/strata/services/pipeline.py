"""LayerRenderingPipeline — the per-response layering hook.

For every outgoing response the request pipeline calls
:meth:`LayerRenderingPipeline.on_result_execution`. Layering runs only
for full front-end renders that do not use the admin theme. It then:

1. loads the cached :class:`~strata.domain.layers.MetadataSnapshot`,
2. evaluates each distinct layer's rule once,
3. places widgets of active layers into their zones, in snapshot order.

The pipeline object is shared across concurrent requests and holds no
request data; everything request-scoped lives on :class:`LayerRequestScope`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

import structlog

from strata.services.composer import LayoutComposer
from strata.services.metadata_cache import MetadataCache
from strata.services.request import (
    AdminThemeService,
    DisplayManager,
    LayerStore,
    LayoutAccessor,
    ModelUpdater,
    ThemeManager,
)
from strata.services.rules import RuleEvaluator
from strata.services.telemetry import trace_span

if TYPE_CHECKING:
    from strata.infrastructure.cache import MemoryCache
    from strata.infrastructure.scripting import ScriptingManager
    from strata.infrastructure.signal import Signal
    from strata.services.request import ResultExecutingContext, ServiceProvider

log = structlog.get_logger(__name__)


class LayerRequestScope:
    """Services for one response, each resolved on first use."""

    def __init__(self, services: ServiceProvider) -> None:
        self.services = services

    @cached_property
    def theme_manager(self) -> ThemeManager:
        return self.services.get_required(ThemeManager)

    @cached_property
    def admin_theme_service(self) -> AdminThemeService:
        return self.services.get_required(AdminThemeService)

    @cached_property
    def layer_store(self) -> LayerStore:
        return self.services.get_required(LayerStore)

    @cached_property
    def layout_accessor(self) -> LayoutAccessor:
        return self.services.get_required(LayoutAccessor)

    @cached_property
    def display_manager(self) -> DisplayManager:
        return self.services.get_required(DisplayManager)

    @cached_property
    def updater(self) -> ModelUpdater:
        return self.services.get_required(ModelUpdater)


@dataclass(frozen=True)
class LayeringOutcome:
    """What one pass did; ``ran`` is False when the gate skipped layering."""

    ran: bool
    evaluations: int = 0
    placed: int = 0
    skipped_stale: int = 0


class LayerRenderingPipeline:
    """Inject rule-gated widgets into the layout of qualifying responses."""

    def __init__(
        self,
        scripting_manager: ScriptingManager,
        memory_cache: MemoryCache,
        signal: Signal,
        *,
        engine_prefix: str = "jinja",
    ) -> None:
        self._scripting_manager = scripting_manager
        self._memory_cache = memory_cache
        self._signal = signal
        self._engine_prefix = engine_prefix

    async def on_result_execution(
        self,
        context: ResultExecutingContext,
        next_: Callable[[], Awaitable[None]],
    ) -> LayeringOutcome:
        """Layer the response if it qualifies, then continue the pipeline.

        Rule, store, and layout faults propagate; ``next_`` is not called
        in that case.
        """
        outcome = LayeringOutcome(ran=False)
        if context.result.is_full_render and not context.is_admin:
            outcome = await self._apply(LayerRequestScope(context.services))
        await next_()
        return outcome

    async def _apply(self, scope: LayerRequestScope) -> LayeringOutcome:
        # A request without the admin flag can still render with the admin
        # theme (login screens, for instance). Layers never apply there.
        theme = await scope.theme_manager.get_theme()
        admin_theme = await scope.admin_theme_service.get_admin_theme_name()
        if (theme.id if theme is not None else None) == admin_theme:
            log.debug("layers.skipped", reason="admin_theme", theme=admin_theme)
            return LayeringOutcome(ran=False)

        with trace_span("load_metadata"):
            snapshot = await MetadataCache(self._memory_cache, self._signal, scope.layer_store).get()

        layout = await scope.layout_accessor.get_layout()
        engine = self._scripting_manager.get_engine(self._engine_prefix)
        rule_scope = engine.create_scope(self._scripting_manager.global_methods, scope.services)
        evaluator = RuleEvaluator(engine, rule_scope)
        composer = LayoutComposer(layout)

        skipped_stale = 0
        with trace_span("place_widgets") as span:
            for widget in snapshot.widgets:
                layer = snapshot.find_layer(widget.layer)
                if layer is None:
                    skipped_stale += 1
                    continue
                if not evaluator.evaluate(layer):
                    continue
                content = await scope.display_manager.build_display(widget, scope.updater)
                await composer.place(widget, content, widget.zone)
            if span is not None:
                span.annotate("evaluations", evaluator.evaluations)
                span.annotate("placed", composer.placed)

        log.debug(
            "layers.applied",
            widgets=len(snapshot.widgets),
            evaluations=evaluator.evaluations,
            placed=composer.placed,
            skipped_stale=skipped_stale,
        )
        return LayeringOutcome(
            ran=True,
            evaluations=evaluator.evaluations,
            placed=composer.placed,
            skipped_stale=skipped_stale,
        )
