"""Shape model for the in-flight page layout.

A layout is an explicit mapping from zone name to zone handle. Zones come
in two capability variants:

- :class:`Zone` — a plain ordered container with synchronous ``add``.
- :class:`ZoneOnDemand` — a placeholder for a zone the layout has not
  materialised yet; it only supports ``await add_async(item)``.

Callers dispatch on :class:`SupportsAddAsync` / :class:`SupportsAppend`
with ``isinstance`` checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SupportsAddAsync(Protocol):
    """Zone capability: asynchronous on-demand addition."""

    async def add_async(self, item: Shape) -> None: ...


@runtime_checkable
class SupportsAppend(Protocol):
    """Zone capability: synchronous ordered append."""

    def add(self, item: Shape) -> None: ...


@dataclass
class ShapeMetadata:
    """Display metadata: the shape type and its alternate template names."""

    type: str
    alternates: list[str] = field(default_factory=list)

    def add_alternate(self, name: str) -> None:
        if name not in self.alternates:
            self.alternates.append(name)


@dataclass
class Shape:
    """A renderable view fragment with ordered children."""

    metadata: ShapeMetadata
    classes: list[str] = field(default_factory=list)
    items: list[Shape] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)

    def add(self, item: Shape) -> None:
        self.items.append(item)

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)


@dataclass
class WidgetWrapper(Shape):
    """Wrapper shape around a placed widget's built content."""

    widget: Any = None
    content: Shape | None = None

    @classmethod
    def wrap(cls, widget: Any, content: Shape) -> WidgetWrapper:
        return cls(metadata=ShapeMetadata(type="Widget_Wrapper"), widget=widget, content=content)


@dataclass
class Zone(Shape):
    """A named layout region holding placed shapes in order."""

    name: str = ""

    @classmethod
    def named(cls, name: str) -> Zone:
        return cls(metadata=ShapeMetadata(type="Zone"), name=name)


class ZoneOnDemand:
    """Placeholder for a zone that does not exist yet in *layout*.

    The first :meth:`add_async` creates the real :class:`Zone` in the
    layout; later calls (on this or another placeholder for the same
    name) append to that zone.
    """

    def __init__(self, layout: Layout, name: str) -> None:
        self._layout = layout
        self.name = name

    async def add_async(self, item: Shape) -> None:
        zone = self._layout.zones.get(self.name)
        if zone is None:
            zone = self._layout.zones[self.name] = Zone.named(self.name)
        zone.add(item)

    def __repr__(self) -> str:
        return f"ZoneOnDemand({self.name!r})"


@dataclass
class Layout(Shape):
    """The page layout: an explicit zone-name to zone mapping.

    Attributes:
        zones: Materialised zones in creation order.
        strict: When True, unknown zone names resolve to None instead of
            a :class:`ZoneOnDemand` placeholder.
    """

    zones: dict[str, Zone] = field(default_factory=dict)
    strict: bool = False

    @classmethod
    def create(cls, zone_names: list[str] | tuple[str, ...] = (), *, strict: bool = False) -> Layout:
        layout = cls(metadata=ShapeMetadata(type="Layout"), strict=strict)
        for name in zone_names:
            layout.zones[name] = Zone.named(name)
        return layout

    def resolve_zone(self, name: str) -> Zone | ZoneOnDemand | None:
        """Return the zone handle for *name*."""
        zone = self.zones.get(name)
        if zone is not None:
            return zone
        if self.strict:
            return None
        return ZoneOnDemand(self, name)
