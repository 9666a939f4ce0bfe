"""Subcommand modules for strata.

Provides register_commands() which uses deferred imports to keep
``strata --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    from strata.commands.init_cmd import init_cmd
    from strata.commands.layer import layer
    from strata.commands.preview import preview
    from strata.commands.widget import widget

    cli.add_command(init_cmd)
    cli.add_command(layer)
    cli.add_command(widget)
    cli.add_command(preview)
