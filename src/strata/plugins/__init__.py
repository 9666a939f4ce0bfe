"""Extension layer — plugin system via pluggy.

Plugins contribute rule methods and observe layer changes.
INVARIANT: Plugin failures are warnings, never errors.
"""

from strata.plugins.hookspecs import hookimpl
from strata.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
