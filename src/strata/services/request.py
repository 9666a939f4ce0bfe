"""Per-response request context and the collaborators it resolves.

The request pipeline hands the layering hook a :class:`ResultExecutingContext`
for every outgoing response. Services are resolved lazily from its
:class:`ServiceProvider`; each key is resolved at most once per response.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

from strata.domain.errors import MissingServiceError

if TYPE_CHECKING:
    from strata.domain.layers import Layer, WidgetAssignment
    from strata.domain.shapes import Layout, Shape


class ResultKind(StrEnum):
    """Kind of result a response produces."""

    VIEW = "view"
    PAGE = "page"
    PARTIAL = "partial"
    REDIRECT = "redirect"
    JSON = "json"
    CONTENT = "content"
    FILE = "file"
    EMPTY = "empty"

    @property
    def is_full_render(self) -> bool:
        return self in (ResultKind.VIEW, ResultKind.PAGE)


@dataclass(frozen=True)
class RequestInfo:
    """The facts about the current HTTP request that rules may inspect."""

    path: str = "/"
    user: str | None = None
    roles: tuple[str, ...] = ()
    culture: str = "en-US"

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def matches_url(self, pattern: str) -> bool:
        """Glob-match the request path; ``~/`` is the site root."""
        if pattern.startswith("~/"):
            pattern = pattern[1:]
        return fnmatch.fnmatchcase(self.path.rstrip("/") or "/", pattern.rstrip("/") or "/")

    def matches_culture(self, name: str) -> bool:
        """Exact match, or *name* is a parent culture (``en`` matches ``en-US``)."""
        current = self.culture.lower()
        wanted = name.lower()
        return current == wanted or current.startswith(wanted + "-")


# ---------------------------------------------------------------------------
# Collaborators resolved per response
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Theme:
    id: str


class ThemeManager(Protocol):
    async def get_theme(self) -> Theme | None: ...


class AdminThemeService(Protocol):
    async def get_admin_theme_name(self) -> str | None: ...


class LayerStore(Protocol):
    async def get_layers(self) -> list[Layer]: ...

    async def get_published_widgets(self) -> list[WidgetAssignment]: ...


class LayoutAccessor(Protocol):
    async def get_layout(self) -> Layout: ...


class ModelUpdater(Protocol):
    """Opaque model-binding context handed to display builders."""


class DisplayManager(Protocol):
    async def build_display(self, widget: WidgetAssignment, updater: ModelUpdater) -> Shape: ...


@dataclass
class NullModelUpdater:
    """Model updater for display-only builds: records errors, binds nothing."""

    errors: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Service provider
# ---------------------------------------------------------------------------


class ServiceProvider:
    """Lazy, memoising service lookup for one response.

    Factories receive the provider so they can depend on other services.
    """

    def __init__(self, factories: dict[Any, Callable[[ServiceProvider], Any]] | None = None) -> None:
        self._factories: dict[Any, Callable[[ServiceProvider], Any]] = dict(factories or {})
        self._resolved: dict[Any, Any] = {}

    def register(self, key: Any, factory: Callable[[ServiceProvider], Any]) -> None:
        self._factories[key] = factory
        self._resolved.pop(key, None)

    def add_instance(self, key: Any, instance: Any) -> None:
        self.register(key, lambda _provider: instance)

    def get_required(self, key: Any) -> Any:
        if key in self._resolved:
            return self._resolved[key]
        factory = self._factories.get(key)
        if factory is None:
            name = getattr(key, "__name__", repr(key))
            raise MissingServiceError(f"No service registered for {name}")
        instance = self._resolved[key] = factory(self)
        return instance

    def is_resolved(self, key: Any) -> bool:
        return key in self._resolved


@dataclass
class ResultExecutingContext:
    """What the request pipeline knows about the response being produced."""

    result: ResultKind
    services: ServiceProvider
    is_admin: bool = False
