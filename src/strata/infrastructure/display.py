"""Default per-request collaborators: themes, layout access, widget display.

Hosts embedding strata usually supply their own; these back the CLI
preview and make a :class:`~strata.infrastructure.site.Site` usable on
its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment

from strata.domain.shapes import Layout, Shape, ShapeMetadata
from strata.services.request import Theme

if TYPE_CHECKING:
    from strata.domain.layers import WidgetAssignment
    from strata.services.request import ModelUpdater


class StaticThemeManager:
    """Theme manager returning a fixed theme (None for an unthemed site)."""

    def __init__(self, theme_id: str | None) -> None:
        self._theme = Theme(theme_id) if theme_id else None

    async def get_theme(self) -> Theme | None:
        return self._theme


class StaticAdminThemeService:
    def __init__(self, name: str | None) -> None:
        self._name = name

    async def get_admin_theme_name(self) -> str | None:
        return self._name


class RequestLayoutAccessor:
    """Creates the layout on first access and returns the same one afterwards."""

    def __init__(self, layout: Layout | None = None) -> None:
        self._layout = layout

    async def get_layout(self) -> Layout:
        if self._layout is None:
            self._layout = Layout.create()
        return self._layout


class TemplateDisplayManager:
    """Builds a widget's display shape by rendering its body as a template.

    The body is a sandboxed jinja2 template with ``widget`` in scope; the
    rendered markup is stored in the shape's ``html`` property.
    """

    def __init__(self) -> None:
        self._env = SandboxedEnvironment(undefined=StrictUndefined, autoescape=True)

    async def build_display(self, widget: WidgetAssignment, updater: ModelUpdater) -> Shape:
        html = self._env.from_string(widget.body).render(widget=widget) if widget.body else ""
        return Shape(
            metadata=ShapeMetadata(type=widget.content_type),
            properties={
                "content_item_id": widget.content_item_id,
                "display_text": widget.display_text,
                "html": html,
            },
        )
