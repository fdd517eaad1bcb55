"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Configures logging and owns result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from sankeyctl.config.logging import configure_logging
from sankeyctl.output.formatters import OutputSettings, format_result
from sankeyctl.services.sankey import SankeyService

if TYPE_CHECKING:
    from sankeyctl.config.settings import SankeySettings
    from sankeyctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: SankeySettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def service(self, **layout_overrides: Any) -> SankeyService:
        """A SankeyService for the current config, with CLI layout overrides applied.

        ``None`` overrides are ignored so unset options keep config values.
        """
        config = self.settings.config
        updates = {k: v for k, v in layout_overrides.items() if v is not None}
        if updates:
            layout = config.layout.model_validate({**config.layout.model_dump(), **updates})
            config = config.model_copy(update={"layout": layout})
        return SankeyService(config)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout, warnings to stderr.
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
