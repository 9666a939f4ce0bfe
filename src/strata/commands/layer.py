"""Command group: layer administration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strata.commands._base import StrataGroup
from strata.services.layers import LayerService

if TYPE_CHECKING:
    from strata.commands._context import AppContext

_LAYER_EXAMPLES = """\
  strata layer list
  strata layer add Always --rule true
  strata layer add Homepage --rule "is_homepage()" --description "Front page only"
  strata layer remove Homepage"""


@click.group(cls=StrataGroup, examples=_LAYER_EXAMPLES)
@click.pass_obj
def layer(app: AppContext) -> None:
    """Manage layers and their activation rules."""


@layer.command(
    "list",
    examples="""\
  strata layer list
  strata --json layer list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List layers with their rules and widget counts."""
    app.emit(LayerService(app.site).list_layers())


@layer.command(
    examples="""\
  strata layer add Always --rule true
  strata layer add Members --rule "is_authenticated() and role('Member')"
  strata layer add Disabled"""
)
@click.argument("name")
@click.option("--rule", default=None, help="Activation rule; omit to keep the layer inactive.")
@click.option("--description", default="", help="Free-form description.")
@click.pass_obj
def add(app: AppContext, name: str, rule: str | None, description: str) -> None:
    """Create a layer, or update it if NAME already exists."""
    app.emit(LayerService(app.site).save_layer(name, rule=rule, description=description))


@layer.command(
    examples="""\
  strata layer remove Homepage"""
)
@click.argument("name")
@click.pass_obj
def remove(app: AppContext, name: str) -> None:
    """Delete a layer. Its widgets stay but are no longer rendered."""
    app.emit(LayerService(app.site).remove_layer(name))
