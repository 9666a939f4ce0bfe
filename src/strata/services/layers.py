"""LayerService — administer layers and widget assignments.

Every successful mutation advances the layer change token, so the next
request rebuilds the cached metadata snapshot, and then notifies plugins
through ``post_layer_change``.
"""

from __future__ import annotations

from pydantic import ValidationError

from strata.domain.errors import RuleSyntaxError
from strata.domain.layers import Layer, WidgetAssignment
from strata.services.base import BaseService
from strata.services.contracts import LayerListData, WidgetListData, dump_validated
from strata.services.metadata_cache import LAYER_CHANGE_TOKEN
from strata.services.result import ServiceResult
from strata.services.telemetry import traced


class LayerService(BaseService):
    """Create, update, and remove layers and widget assignments."""

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    @traced
    def list_layers(self) -> ServiceResult:
        counts: dict[str, int] = {}
        for widget in self._site.store.list_widgets():
            counts[widget.layer] = counts.get(widget.layer, 0) + 1
        items = [
            {**layer.model_dump(), "widgets": counts.get(layer.name, 0)}
            for layer in self._site.store.list_layers()
        ]
        data = dump_validated(LayerListData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_layers", data=data)

    @traced
    def save_layer(self, name: str, *, rule: str | None = None, description: str = "") -> ServiceResult:
        """Create or update a layer.

        A non-empty rule is compiled first so syntax errors surface here
        rather than on the next page render.
        """
        op = "save_layer"
        try:
            layer = Layer(
                name=name.strip(),
                rule=rule if rule and rule.strip() else None,
                description=description,
            )
        except ValidationError as exc:
            return ServiceResult.failure(op, "INVALID_INPUT", "Layer name must not be empty", errors=str(exc))

        if layer.rule:
            error = self._check_rule_syntax(layer.rule)
            if error is not None:
                return ServiceResult.failure(op, "INVALID_RULE", error, layer=layer.name)

        created = self._site.store.save_layer(layer)
        warnings = self._changed("layer", layer.name, "created" if created else "updated")
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": layer.name, "rule": layer.rule, "created": created},
            warnings=warnings,
        )

    @traced
    def remove_layer(self, name: str) -> ServiceResult:
        """Delete a layer. Widgets that referenced it become stale and are skipped."""
        op = "remove_layer"
        if not self._site.store.delete_layer(name):
            return ServiceResult.failure(op, "NOT_FOUND", f"No layer named {name!r}", name=name)

        stale = sum(1 for w in self._site.store.list_widgets() if w.layer == name)
        warnings = self._changed("layer", name, "removed")
        if stale:
            warnings.append(f"{stale} widget(s) still reference layer {name!r}")
        return ServiceResult(ok=True, op=op, data={"name": name, "stale_widgets": stale}, warnings=warnings)

    # ------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------

    @traced
    def list_widgets(self, *, published_only: bool = False) -> ServiceResult:
        layer_names = {layer.name for layer in self._site.store.list_layers()}
        items = [
            {
                "id": w.content_item_id,
                "type": w.content_type,
                "layer": w.layer,
                "zone": w.zone,
                "title": w.display_text,
                "published": w.published,
                "stale": w.layer not in layer_names,
            }
            for w in self._site.store.list_widgets(published_only)
        ]
        data = dump_validated(WidgetListData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_widgets", data=data)

    @traced
    def assign_widget(
        self,
        content_item_id: str,
        *,
        content_type: str,
        layer: str,
        zone: str,
        display_text: str = "",
        body: str = "",
        published: bool = True,
    ) -> ServiceResult:
        """Create or update a widget bound to *layer* and *zone*."""
        op = "assign_widget"
        if self._site.store.get_layer(layer) is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"No layer named {layer!r}", layer=layer)
        if not zone.strip():
            return ServiceResult.failure(op, "INVALID_INPUT", "Zone name must not be empty")
        try:
            widget = WidgetAssignment(
                content_item_id=content_item_id,
                content_type=content_type,
                layer=layer,
                zone=zone.strip(),
                display_text=display_text,
                body=body,
                published=published,
            )
        except ValidationError as exc:
            return ServiceResult.failure(op, "INVALID_INPUT", "Invalid widget", errors=str(exc))

        created = self._site.store.save_widget(widget)
        warnings = self._changed("widget", content_item_id, "created" if created else "updated")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": content_item_id,
                "layer": layer,
                "zone": widget.zone,
                "published": published,
                "created": created,
            },
            warnings=warnings,
        )

    @traced
    def publish_widget(self, content_item_id: str, *, published: bool = True) -> ServiceResult:
        op = "publish_widget"
        if not self._site.store.set_published(content_item_id, published):
            return ServiceResult.failure(op, "NOT_FOUND", f"No widget {content_item_id!r}", id=content_item_id)
        warnings = self._changed("widget", content_item_id, "published" if published else "unpublished")
        return ServiceResult(
            ok=True, op=op, data={"id": content_item_id, "published": published}, warnings=warnings
        )

    @traced
    def remove_widget(self, content_item_id: str) -> ServiceResult:
        op = "remove_widget"
        if not self._site.store.delete_widget(content_item_id):
            return ServiceResult.failure(op, "NOT_FOUND", f"No widget {content_item_id!r}", id=content_item_id)
        warnings = self._changed("widget", content_item_id, "removed")
        return ServiceResult(ok=True, op=op, data={"id": content_item_id}, warnings=warnings)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _changed(self, kind: str, name: str, action: str) -> list[str]:
        self._site.signal.signal_token(LAYER_CHANGE_TOKEN)
        warnings: list[str] = []
        self._dispatch_event("post_layer_change", {"kind": kind, "name": name, "action": action}, warnings)
        return warnings

    def _check_rule_syntax(self, rule: str) -> str | None:
        engine = self._site.scripting.get_engine(self._site.settings.scripting.engine)
        try:
            engine.compile(rule)
        except RuleSyntaxError as exc:
            return f"Invalid rule: {exc}"
        return None
