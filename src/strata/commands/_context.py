"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Site initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strata.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from strata.config.settings import StrataSettings
    from strata.infrastructure.site import Site
    from strata.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The site is created on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: StrataSettings) -> None:
        self.settings = settings
        self._site: Site | None = None

        from strata.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from strata.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def site(self) -> Site:
        """The site container (created lazily on first access)."""
        if self._site is None:
            from strata.infrastructure.site import Site

            self._site = Site(self.settings)
            ctx = click.get_current_context(silent=True)
            if ctx is not None:
                ctx.call_on_close(self._site.close)
        return self._site

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr outside JSON mode.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
