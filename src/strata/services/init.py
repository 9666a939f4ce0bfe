"""Site initialization — write strata.toml and create the database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strata.config.discovery import CONFIG_FILENAME, render_config
from strata.config.models import SiteConfig, StrataConfig
from strata.infrastructure.database.engine import init_database
from strata.services.result import ServiceResult

if TYPE_CHECKING:
    from pathlib import Path


def init_site(
    root: Path,
    *,
    name: str,
    theme: str,
    admin_theme: str,
    force: bool = False,
) -> ServiceResult:
    """Create ``strata.toml`` and ``.strata/strata.db`` under *root*."""
    op = "init_site"
    config_path = root / CONFIG_FILENAME
    if config_path.exists() and not force:
        return ServiceResult.failure(
            op, "ALREADY_EXISTS", f"{config_path} already exists (use --force to overwrite)"
        )
    if theme == admin_theme:
        return ServiceResult.failure(
            op, "INVALID_INPUT", "Front-end and admin themes must differ; layers never render on the admin theme"
        )

    config = StrataConfig(site=SiteConfig(name=name, theme=theme, admin_theme=admin_theme))
    root.mkdir(parents=True, exist_ok=True)
    config_path.write_text(render_config(config), encoding="utf-8")
    engine = init_database(root)
    engine.dispose()
    return ServiceResult(
        ok=True,
        op=op,
        data={"name": name, "theme": theme, "admin_theme": admin_theme, "path": str(config_path)},
    )
