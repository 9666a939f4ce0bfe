"""Exception hierarchy for faults that fail the current response.

Normal outcomes (a rule evaluating false, a widget whose layer no longer
exists) are never expressed as exceptions.
"""

from __future__ import annotations


class StrataError(Exception):
    """Base class for all strata faults."""


class RuleEvaluationError(StrataError):
    """A layer rule could not be evaluated by the scripting engine."""

    def __init__(self, layer: str, rule: str, reason: str) -> None:
        super().__init__(f"Rule for layer {layer!r} failed: {reason} (rule: {rule!r})")
        self.layer = layer
        self.rule = rule
        self.reason = reason


class LayoutError(StrataError):
    """The layout cannot accept a widget placement."""


class ZoneNotFoundError(LayoutError):
    """A widget targets a zone the layout does not provide."""

    def __init__(self, zone: str) -> None:
        super().__init__(f"Zone {zone!r} does not exist in the current layout")
        self.zone = zone


class MissingServiceError(StrataError, LookupError):
    """A required per-request service has not been registered."""


class UnknownScriptingEngineError(StrataError, KeyError):
    """No scripting engine is registered for the requested prefix."""


class RuleSyntaxError(StrataError):
    """Rule text is not a valid expression for its scripting engine."""
