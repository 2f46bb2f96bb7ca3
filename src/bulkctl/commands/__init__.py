"""Subcommand modules for bulkctl.

Provides register_commands() which uses deferred imports to keep
``bulkctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from bulkctl.commands.run import run

    cli.add_command(run)
