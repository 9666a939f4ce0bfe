"""BaseService — foundation for administrative services.

Every service receives a :class:`Site` at construction time. The Site
provides the layer store, the change signal, and the plugin manager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strata.infrastructure.site import Site


class BaseService:
    """Base for service-layer classes that return ServiceResult.

    Usage::

        class LayerService(BaseService):
            def save_layer(self, name: str, ...) -> ServiceResult:
                created = self._site.store.save_layer(...)
                ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Dispatch a lifecycle hook.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        warnings.extend(self._site.plugin_manager.dispatch(hook_name, **payload))
