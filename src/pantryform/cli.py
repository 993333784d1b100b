"""Root CLI group for pantryform with global flags and command registration."""

from __future__ import annotations

import click

from pantryform import __version__
from pantryform.commands import register_commands
from pantryform.commands._base import PantryGroup
from pantryform.commands._context import AppContext
from pantryform.config.settings import PantrySettings


@click.group(
    cls=PantryGroup,
    invoke_without_command=True,
    examples="""\
  pantryform generate 2
  pantryform sweep
  pantryform -c ~/pantry/pantryform.toml preview 5""",
)
@click.version_option(version=__version__, prog_name="pantryform")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Pet pantry intake forms from spreadsheet responses."""
    settings = PantrySettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
