"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Holds the settings, a lazily built workspace, and
the single place where results are printed and exit codes decided.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pantryform.config.logging import configure_logging
from pantryform.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pantryform.config.settings import PantrySettings
    from pantryform.infrastructure.workspace import Workspace
    from pantryform.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help`` and
    ``--version`` never open the counter database.
    """

    def __init__(self, settings: PantrySettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace (created lazily on first access)."""
        if self._workspace is None:
            from pantryform.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    def close(self) -> None:
        if self._workspace is not None:
            self._workspace.close()
            self._workspace = None

    def emit(self, result: ServiceResult) -> None:
        """Print a ServiceResult with the right stream and exit code.

        * Success: stdout. Warnings go to stderr so piped output stays
          clean (in JSON mode they are already in the payload).
        * Failure: stderr, then exit code 1.
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
