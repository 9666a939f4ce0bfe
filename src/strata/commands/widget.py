"""Command group: widget assignment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strata.commands._base import StrataGroup
from strata.services.layers import LayerService

if TYPE_CHECKING:
    from strata.commands._context import AppContext

_WIDGET_EXAMPLES = """\
  strata widget list
  strata widget assign w-footer --type HtmlWidget --layer Always --zone Footer
  strata widget publish w-footer --unpublish
  strata widget remove w-footer"""


@click.group(cls=StrataGroup, examples=_WIDGET_EXAMPLES)
@click.pass_obj
def widget(app: AppContext) -> None:
    """Assign widgets to layers and zones."""


@widget.command(
    "list",
    examples="""\
  strata widget list
  strata widget list --published
  strata --json widget list""",
)
@click.option("--published", "published_only", is_flag=True, help="Only published widgets.")
@click.pass_obj
def list_cmd(app: AppContext, published_only: bool) -> None:
    """List widgets in placement order."""
    app.emit(LayerService(app.site).list_widgets(published_only=published_only))


@widget.command(
    examples="""\
  strata widget assign w-footer --type HtmlWidget --layer Always --zone Footer
  strata widget assign w-promo --type HtmlWidget --layer Homepage --zone Content \\
      --title "Promo" --body "<p>{{ widget.display_text }}</p>" --draft"""
)
@click.argument("content_item_id")
@click.option("--type", "content_type", required=True, help="Widget content type.")
@click.option("--layer", "layer_name", required=True, help="Layer the widget belongs to.")
@click.option("--zone", required=True, help="Layout zone to place the widget in.")
@click.option("--title", "display_text", default="", help="Display text.")
@click.option("--body", default="", help="Body template rendered at display time.")
@click.option("--draft", is_flag=True, help="Save the widget unpublished.")
@click.pass_obj
def assign(
    app: AppContext,
    content_item_id: str,
    content_type: str,
    layer_name: str,
    zone: str,
    display_text: str,
    body: str,
    draft: bool,
) -> None:
    """Create or update a widget assignment."""
    app.emit(
        LayerService(app.site).assign_widget(
            content_item_id,
            content_type=content_type,
            layer=layer_name,
            zone=zone,
            display_text=display_text,
            body=body,
            published=not draft,
        )
    )


@widget.command(
    examples="""\
  strata widget publish w-footer
  strata widget publish w-footer --unpublish"""
)
@click.argument("content_item_id")
@click.option("--unpublish", is_flag=True, help="Return the widget to draft.")
@click.pass_obj
def publish(app: AppContext, content_item_id: str, unpublish: bool) -> None:
    """Publish (or unpublish) a widget."""
    app.emit(LayerService(app.site).publish_widget(content_item_id, published=not unpublish))


@widget.command(
    examples="""\
  strata widget remove w-footer"""
)
@click.argument("content_item_id")
@click.pass_obj
def remove(app: AppContext, content_item_id: str) -> None:
    """Delete a widget."""
    app.emit(LayerService(app.site).remove_widget(content_item_id))
