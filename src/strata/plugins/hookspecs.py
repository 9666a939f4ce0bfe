"""Pluggy hook specifications for strata.

One setup-time hook lets plugins expose methods to layer rules; one
lifecycle hook reports layer and widget mutations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from strata.infrastructure.scripting import GlobalMethod

PROJECT_NAME = "strata"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class StrataHookSpec:
    """Hook specifications for the strata plugin system."""

    @hookspec
    def register_global_methods(self) -> list[GlobalMethod] | None:
        """Return methods bound into every layer rule scope."""

    @hookspec
    def post_layer_change(self, kind: str, name: str, action: str) -> None:
        """Called after a layer or widget is saved, published, or removed.

        *kind* is ``"layer"`` or ``"widget"``; *name* is the layer name or
        widget content item id.
        """
