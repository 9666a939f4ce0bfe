"""Built-in rule vocabulary bound to the current request.

Exposes to every layer rule:

- ``is_homepage()`` — the request path is the site root
- ``is_anonymous()`` / ``is_authenticated()``
- ``url(pattern)`` — glob match on the path (``url('~/blog/*')``)
- ``culture(name)`` — current culture equals *name* or is a child of it
- ``role(name)`` — the current user has role *name*

Methods resolve :class:`RequestInfo` lazily, so a rule scope can be built
for a response that never evaluates a rule without touching the request.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from strata.infrastructure.scripting import GlobalMethod
from strata.plugins.hookspecs import hookimpl
from strata.services.request import RequestInfo, ServiceProvider


def _bind(check: Callable[..., bool]) -> Callable[[ServiceProvider], Callable[..., bool]]:
    def factory(services: ServiceProvider) -> Callable[..., bool]:
        def method(*args: Any) -> bool:
            return check(services.get_required(RequestInfo), *args)

        return method

    return factory


class RequestRulesPlugin:
    """Default global methods for layer rules."""

    @hookimpl
    def register_global_methods(self) -> list[GlobalMethod]:
        return [
            GlobalMethod("is_homepage", _bind(lambda req: req.matches_url("~/"))),
            GlobalMethod("is_anonymous", _bind(lambda req: not req.is_authenticated)),
            GlobalMethod("is_authenticated", _bind(lambda req: req.is_authenticated)),
            GlobalMethod("url", _bind(lambda req, pattern: req.matches_url(pattern))),
            GlobalMethod("culture", _bind(lambda req, name: req.matches_culture(name))),
            GlobalMethod("role", _bind(lambda req, name: name in req.roles)),
        ]
