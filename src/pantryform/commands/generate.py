"""Command: generate the order form for one response row."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pantryform.commands._base import PantryCommand

if TYPE_CHECKING:
    from pantryform.commands._context import AppContext


@click.command(
    cls=PantryCommand,
    examples="""\
  pantryform generate 2
  pantryform generate 14 --force
  pantryform --json generate 7""",
)
@click.argument("row", type=click.IntRange(min=1))
@click.option("--force", is_flag=True, help="Regenerate even if a PDF already exists.")
@click.pass_obj
def generate(app: AppContext, row: int, force: bool) -> None:
    """Generate the order form PDF for response ROW (1-based, row 1 is the header)."""
    from pantryform.services.intake import IntakeService

    app.emit(IntakeService(app.workspace).generate(row, force=force))
