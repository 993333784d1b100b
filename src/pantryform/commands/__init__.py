"""Subcommand modules for pantryform.

:func:`register_commands` imports each command lazily so
``pantryform --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from pantryform.commands.generate import generate
    from pantryform.commands.guidelines import guidelines
    from pantryform.commands.preview import preview
    from pantryform.commands.submit import submit
    from pantryform.commands.sweep import sweep

    cli.add_command(generate)
    cli.add_command(submit)
    cli.add_command(preview)
    cli.add_command(sweep)
    cli.add_command(guidelines)
