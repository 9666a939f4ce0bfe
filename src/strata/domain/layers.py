"""Layer and widget metadata models.

Layers and widget assignments are authored and persisted elsewhere; within
a request they are immutable inputs, so every model here is frozen.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field


class Layer(BaseModel):
    """A named, rule-gated visibility scope for widgets."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    rule: str | None = None
    description: str = ""


class WidgetAssignment(BaseModel):
    """A content widget bound to one layer and one target zone."""

    model_config = {"frozen": True}

    content_item_id: str = Field(min_length=1)
    content_type: str = Field(min_length=1)
    layer: str
    zone: str
    display_text: str = ""
    body: str = ""
    published: bool = True


class MetadataSnapshot(BaseModel):
    """All published widget assignments plus all layers, indexed by name.

    ``widgets`` keeps the store's order; placement order within a zone
    follows it.
    """

    model_config = {"frozen": True}

    widgets: tuple[WidgetAssignment, ...] = ()
    layers: dict[str, Layer] = Field(default_factory=dict)

    @classmethod
    def build(
        cls,
        widgets: Iterable[WidgetAssignment],
        layers: Iterable[Layer],
    ) -> MetadataSnapshot:
        """Index *layers* by name and freeze *widgets* in iteration order."""
        return cls(widgets=tuple(widgets), layers={layer.name: layer for layer in layers})

    def find_layer(self, name: str) -> Layer | None:
        """Return the layer called *name*, or None for a stale reference."""
        return self.layers.get(name)
