"""Command: generate forms for every response row."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pantryform.commands._base import PantryCommand

if TYPE_CHECKING:
    from pantryform.commands._context import AppContext


@click.command(
    cls=PantryCommand,
    examples="""\
  pantryform sweep
  pantryform -q sweep
  pantryform sweep --force""",
)
@click.option("--force", is_flag=True, help="Regenerate rows that already have a PDF.")
@click.pass_obj
def sweep(app: AppContext, force: bool) -> None:
    """Generate forms for all response rows that do not have one yet."""
    from pantryform.services.intake import IntakeService

    app.emit(IntakeService(app.workspace).sweep(force=force))
