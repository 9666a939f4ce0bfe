"""Typed payload contracts for service results.

These models validate payload shapes before they leave the service
layer so the CLI renderers can rely on stable keys.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class LayerItem(BaseModel):
    name: str
    rule: str | None = None
    description: str = ""
    widgets: int = 0


class LayerListData(BaseModel):
    """Payload contract for ``LayerService.list_layers``."""

    count: int
    items: list[LayerItem]


class WidgetItem(BaseModel):
    id: str
    type: str
    layer: str
    zone: str
    title: str = ""
    published: bool
    stale: bool = False


class WidgetListData(BaseModel):
    """Payload contract for ``LayerService.list_widgets``."""

    count: int
    items: list[WidgetItem]


class PlacementItem(BaseModel):
    zone: str
    position: int
    id: str
    type: str
    classes: list[str]
    alternates: list[str]


class PreviewData(BaseModel):
    """Payload contract for ``PreviewService.preview``."""

    path: str
    result: str
    layered: bool
    evaluations: int
    placed: int
    skipped_stale: int
    zones: dict[str, int]
    items: list[PlacementItem]
