"""ethroute check-deps command implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ..exceptions import CommandFailureError
from ..utils import missing_commands
from .apply import required_commands

if TYPE_CHECKING:
    from ..cli_types import CheckDepsArgs


def cmd_check_deps(args: CheckDepsArgs) -> None:
    """Report which required system commands are available."""
    commands = required_commands(args.auto_detect)
    missing = set(missing_commands(commands))
    for cmd in commands:
        if cmd in missing:
            print(click.style(f"MISSING {cmd}", fg="red"))
        else:
            print(click.style(f"OK {cmd}", fg="green"))
    if missing:
        raise CommandFailureError
