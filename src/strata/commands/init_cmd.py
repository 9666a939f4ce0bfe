"""Command: site initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from strata.commands._base import StrataCommand
from strata.config.models import SiteConfig

if TYPE_CHECKING:
    from strata.commands._context import AppContext

_INIT_EXAMPLES = """\
  strata init
  strata init /srv/site --name blog
  strata init . --theme Agency --admin-theme Admin
  strata init . --force"""

_DEFAULTS = SiteConfig()


@click.command("init", cls=StrataCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Site name (defaults to the directory name).")
@click.option("--theme", default=_DEFAULTS.theme, show_default=True, help="Front-end theme id.")
@click.option(
    "--admin-theme", default=_DEFAULTS.admin_theme, show_default=True, help="Admin theme name."
)
@click.option("--force", is_flag=True, help="Overwrite an existing strata.toml.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    name: str | None,
    theme: str,
    admin_theme: str,
    force: bool,
) -> None:
    """Initialize a new strata site."""
    from strata.services.init import init_site

    root = Path(path).resolve()
    app.emit(init_site(root, name=name or root.name, theme=theme, admin_theme=admin_theme, force=force))
