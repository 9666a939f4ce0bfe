"""LayoutComposer — place built widgets into layout zones."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strata.domain.classify import html_classify
from strata.domain.errors import LayoutError, ZoneNotFoundError
from strata.domain.shapes import SupportsAddAsync, SupportsAppend, WidgetWrapper

if TYPE_CHECKING:
    from strata.domain.layers import WidgetAssignment
    from strata.domain.shapes import Layout, Shape


class LayoutComposer:
    """Merge widgets into the live layout in the order they are placed."""

    def __init__(self, layout: Layout) -> None:
        self._layout = layout
        self.placed = 0

    async def place(self, widget: WidgetAssignment, content: Shape, zone_name: str) -> WidgetWrapper:
        """Annotate *content*, wrap it, and add it to zone *zone_name*."""
        content.add_class("widget")
        content.add_class("widget-" + html_classify(widget.content_type))

        wrapper = WidgetWrapper.wrap(widget, content)
        wrapper.metadata.add_alternate(f"Widget_Wrapper__{widget.content_type}")
        wrapper.metadata.add_alternate(f"Widget_Wrapper__Zone__{zone_name}")

        zone = self._layout.resolve_zone(zone_name)
        if zone is None:
            raise ZoneNotFoundError(zone_name)

        if isinstance(zone, SupportsAddAsync):
            await zone.add_async(wrapper)
        elif isinstance(zone, SupportsAppend):
            zone.add(wrapper)
        else:
            raise LayoutError(f"Zone {zone_name!r} ({type(zone).__name__}) accepts no widgets")

        self.placed += 1
        return wrapper
