"""ethroute show-state command implementation."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ..state import StateStore
from ..utils import default_state_path

if TYPE_CHECKING:
    from ..cli_types import ShowStateArgs


def cmd_show_state(args: ShowStateArgs) -> None:
    """Print recorded endpoints, one per endpoint (last record wins)."""
    path = Path(args.state_file) if args.state_file else default_state_path(Path(args.config_dir))
    entries = StateStore(path).latest()

    if args.json:
        print(json.dumps([asdict(e) for e in entries], indent=2, sort_keys=True))
        return

    if not entries:
        print(f"No recorded endpoints in {path}")
        return

    width = max(len(e.endpoint) for e in entries)
    for e in entries:
        gateway = e.gateway or "-"
        print(f"{e.endpoint:<{width}}  {e.address:<15}  via {gateway}")
    print(f"\n{click.style('State file:', fg='cyan')} {path}")
