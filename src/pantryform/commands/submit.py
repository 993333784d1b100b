"""Command: handle a form-submit event for a response row."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pantryform.commands._base import PantryCommand

if TYPE_CHECKING:
    from pantryform.commands._context import AppContext


@click.command(
    cls=PantryCommand,
    examples="""\
  pantryform submit 12
  pantryform submit 12 --sheet 'Form Responses 1'""",
)
@click.argument("row", type=click.IntRange(min=1))
@click.option(
    "--sheet",
    "sheet_name",
    default=None,
    help="Sheet the submission landed on (default: the configured response sheet).",
)
@click.pass_obj
def submit(app: AppContext, row: int, sheet_name: str | None) -> None:
    """Process a newly submitted response ROW, as a form trigger would.

    Events for other sheets and for the header row are acknowledged and
    ignored.
    """
    from pantryform.services.intake import IntakeService

    sheet = sheet_name or app.settings.sheets.response_sheet_name
    app.emit(IntakeService(app.workspace).on_submit(sheet, row))
