"""Command: preview widget placement for a simulated request."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strata.commands._base import StrataCommand
from strata.services.preview import PreviewService
from strata.services.request import ResultKind

if TYPE_CHECKING:
    from strata.commands._context import AppContext

_PREVIEW_EXAMPLES = """\
  strata preview /
  strata preview /blog/hello --user alice --role Member
  strata preview /admin --admin
  strata preview / --result partial
  strata -v preview / --theme TheAdmin"""


@click.command("preview", cls=StrataCommand, examples=_PREVIEW_EXAMPLES)
@click.argument("path", default="/")
@click.option(
    "--result",
    "result_kind",
    type=click.Choice([k.value for k in ResultKind], case_sensitive=False),
    default=ResultKind.VIEW.value,
    show_default=True,
    help="Kind of result being rendered.",
)
@click.option("--admin", "is_admin", is_flag=True, help="Simulate an admin-area request.")
@click.option("--theme", default=None, help="Override the active front-end theme.")
@click.option("--user", default=None, help="Authenticated user name.")
@click.option("--role", "roles", multiple=True, help="User role (repeatable).")
@click.option("--culture", default="en-US", show_default=True, help="Request culture.")
@click.pass_obj
def preview(
    app: AppContext,
    path: str,
    result_kind: str,
    is_admin: bool,
    theme: str | None,
    user: str | None,
    roles: tuple[str, ...],
    culture: str,
) -> None:
    """Show which widgets a request to PATH would receive."""
    app.emit(
        PreviewService(app.site).preview(
            path,
            result=ResultKind(result_kind.lower()),
            is_admin=is_admin,
            theme=theme,
            user=user,
            roles=roles,
            culture=culture,
        )
    )
