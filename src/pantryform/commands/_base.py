"""Click classes shared by every pantryform command.

Each command carries a short block of sample invocations (``examples=``).
They are not part of ``--help``; ``pantryform generate --examples``
prints them instead.
"""

from __future__ import annotations

from typing import Any

import click


def _attach_examples(cmd: click.Command, examples: str | None) -> None:
    """Give *cmd* an eager ``--examples`` flag when it has examples."""
    if not examples:
        return
    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=_print_examples,
            help="Show usage examples.",
        )
    )


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class PantryCommand(click.Command):
    """A pantryform subcommand (``generate``, ``sweep``, ...)."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        _attach_examples(self, examples)


class PantryGroup(click.Group):
    """The root ``pantryform`` group; subcommands default to :class:`PantryCommand`."""

    command_class = PantryCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        _attach_examples(self, examples)
