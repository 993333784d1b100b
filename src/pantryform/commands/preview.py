"""Command: show what a response row would produce, without writing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pantryform.commands._base import PantryCommand

if TYPE_CHECKING:
    from pantryform.commands._context import AppContext


@click.command(
    cls=PantryCommand,
    examples="""\
  pantryform preview 2
  pantryform -v preview 2
  pantryform --json preview 2""",
)
@click.argument("row", type=click.IntRange(min=1))
@click.pass_obj
def preview(app: AppContext, row: int) -> None:
    """Show household counts and recommended items for response ROW."""
    from pantryform.services.intake import IntakeService

    app.emit(IntakeService(app.workspace).preview(row))
