"""Command: list the distribution guideline table."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pantryform.commands._base import PantryCommand

if TYPE_CHECKING:
    from pantryform.commands._context import AppContext


@click.command(
    cls=PantryCommand,
    examples="""\
  pantryform guidelines
  pantryform -v guidelines
  pantryform --json guidelines""",
)
@click.pass_obj
def guidelines(app: AppContext) -> None:
    """List guideline rules as the recommendation engine reads them."""
    from pantryform.services.guidelines import GuidelineService

    app.emit(GuidelineService(app.workspace).list_rules())
