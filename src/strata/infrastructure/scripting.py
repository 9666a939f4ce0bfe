"""Scripting host for layer rules.

Rules are jinja2 expressions (``is_homepage() or url('~/blog*')``)
evaluated in a sandboxed environment. Names missing from the scope are
:class:`jinja2.StrictUndefined`, so a typo in a rule faults instead of
silently evaluating falsy.

All truthiness decisions go through :func:`to_boolean`.
"""

from __future__ import annotations

import functools
import logging
import numbers
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol

from jinja2 import StrictUndefined, TemplateSyntaxError, Undefined
from jinja2.sandbox import SandboxedEnvironment

from strata.domain.errors import RuleSyntaxError, UnknownScriptingEngineError

logger = logging.getLogger(__name__)

# Distinct rule texts kept compiled per engine; least recently used are evicted.
COMPILE_CACHE_SIZE = 256


def to_boolean(value: Any) -> bool:
    """Convert a rule result to a boolean.

    - ``bool``: returned as is
    - ``None``: False
    - numbers: True when non-zero
    - ``str``: True when non-empty (``"false"`` is True)
    - jinja2 ``Undefined``: raises ``UndefinedError`` (missing binding)
    - anything else: Python truthiness
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, Undefined):
        # StrictUndefined raises UndefinedError here.
        return bool(value)
    if isinstance(value, numbers.Number):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return bool(value)


@dataclass(frozen=True)
class GlobalMethod:
    """A binding exposed to every rule scope.

    ``method`` is called once per scope with the request's service
    provider and returns the bound value (usually a callable).
    """

    name: str
    method: Callable[[Any], Any]


class EvaluationScope(Mapping[str, Any]):
    """Read-only bindings shared by every rule evaluated in one request."""

    def __init__(self, bindings: Mapping[str, Any]) -> None:
        self._bindings = MappingProxyType(dict(bindings))

    def __getitem__(self, key: str) -> Any:
        return self._bindings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)


class ScriptingEngine(Protocol):
    prefix: str

    def create_scope(self, methods: Iterable[GlobalMethod], services: Any) -> EvaluationScope: ...

    def compile(self, script: str) -> Callable[..., Any]: ...

    def evaluate(self, scope: EvaluationScope, script: str) -> Any: ...


class JinjaExpressionEngine:
    """Evaluates jinja2 expressions in a sandbox."""

    prefix = "jinja"

    def __init__(self, *, cache_size: int = COMPILE_CACHE_SIZE) -> None:
        self._env = SandboxedEnvironment(undefined=StrictUndefined)
        self._compile = functools.lru_cache(maxsize=cache_size)(self._compile_expression)

    def create_scope(self, methods: Iterable[GlobalMethod], services: Any) -> EvaluationScope:
        return EvaluationScope({m.name: m.method(services) for m in methods})

    def evaluate(self, scope: EvaluationScope, script: str) -> Any:
        """Evaluate *script* against *scope*.

        Syntax errors raise :class:`RuleSyntaxError`; runtime faults raise
        whatever the expression raised.
        """
        return self.compile(script)(**scope)

    def compile(self, script: str) -> Callable[..., Any]:
        return self._compile(script)

    def _compile_expression(self, script: str) -> Callable[..., Any]:
        try:
            return self._env.compile_expression(script, undefined_to_none=False)
        except TemplateSyntaxError as exc:
            raise RuleSyntaxError(str(exc)) from exc


class ScriptingManager:
    """Registry of scripting engines and the global methods they expose."""

    def __init__(
        self,
        engines: Iterable[ScriptingEngine] = (),
        global_methods: Iterable[GlobalMethod] = (),
    ) -> None:
        self._engines: dict[str, ScriptingEngine] = {}
        for engine in engines:
            self.register_engine(engine)
        self._global_methods = list(global_methods)

    @property
    def global_methods(self) -> list[GlobalMethod]:
        return list(self._global_methods)

    def register_engine(self, engine: ScriptingEngine) -> None:
        self._engines[engine.prefix] = engine

    def add_global_methods(self, methods: Iterable[GlobalMethod]) -> None:
        self._global_methods.extend(methods)

    def get_engine(self, prefix: str) -> ScriptingEngine:
        try:
            return self._engines[prefix]
        except KeyError:
            raise UnknownScriptingEngineError(prefix) from None

    @classmethod
    def default(cls, global_methods: Iterable[GlobalMethod] = ()) -> ScriptingManager:
        return cls([JinjaExpressionEngine()], global_methods)
