"""RuleEvaluator — layer rule evaluation memoised per request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strata.domain.errors import RuleEvaluationError
from strata.infrastructure.scripting import to_boolean

if TYPE_CHECKING:
    from strata.domain.layers import Layer
    from strata.infrastructure.scripting import EvaluationScope, ScriptingEngine

logger = logging.getLogger(__name__)


class RuleEvaluator:
    """Turn layer rules into booleans, at most once per layer.

    One instance serves exactly one request: the cache is keyed by layer
    name and is discarded with the evaluator.
    """

    def __init__(self, engine: ScriptingEngine, scope: EvaluationScope) -> None:
        self._engine = engine
        self._scope = scope
        self._results: dict[str, bool] = {}
        self.evaluations = 0

    def evaluate(self, layer: Layer) -> bool:
        """Return whether *layer* is active for the current request.

        A layer with a missing or blank rule is never active. Engine faults
        are raised as :class:`RuleEvaluationError`.
        """
        cached = self._results.get(layer.name)
        if cached is not None:
            return cached

        if not layer.rule or not layer.rule.strip():
            display = False
        else:
            self.evaluations += 1
            try:
                display = to_boolean(self._engine.evaluate(self._scope, layer.rule))
            except Exception as exc:
                raise RuleEvaluationError(layer.name, layer.rule, str(exc)) from exc
            logger.debug("Layer %s rule evaluated to %s", layer.name, display)

        self._results[layer.name] = display
        return display
