"""ethroute interfaces command implementation."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from ..interfaces import SystemInterfaces, active_interfaces, select_interface

if TYPE_CHECKING:
    from ..cli_types import InterfacesArgs


def cmd_interfaces(args: InterfacesArgs) -> None:
    """List active interfaces of a hardware port type."""
    active = active_interfaces(SystemInterfaces(timeout_s=args.command_timeout), args.hardware_port)
    selected = select_interface(active)

    if args.json:
        summary = {
            "hardware_port": args.hardware_port,
            "active": active,
            "selected": selected,
        }
        print(json.dumps(summary, indent=2, sort_keys=True))
        return

    if not active:
        print(click.style(f"No active {args.hardware_port} interface found.", fg="red"))
        return
    for device in active:
        marker = "*" if device == selected else " "
        print(f"{marker} {device}")
