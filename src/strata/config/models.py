"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, strata.toml only contains overrides.
A fresh site needs only [site] name and the two theme names.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- strata.toml sections ---


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    name: str = "my-site"
    theme: str = "TheTheme"
    admin_theme: str = "TheAdmin"


class ScriptingConfig(BaseModel):
    """[scripting] section."""

    model_config = {"frozen": True}

    engine: str = "jinja"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    local_dir_enabled: bool = True
    request_rules: bool = True


class StrataConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    site: SiteConfig = Field(default_factory=SiteConfig)
    scripting: ScriptingConfig = Field(default_factory=ScriptingConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
