"""ethroute apply command implementation."""

from __future__ import annotations

import json
from contextlib import nullcontext
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ..config import load_config
from ..constants import INTERFACE_COMMANDS, ROUTE_COMMANDS
from ..exceptions import UserError
from ..hosts import HostsFile
from ..interfaces import SystemInterfaces
from ..notify import send_notification
from ..reconcile import Decision, Reconciler, RunOptions, RunReport
from ..resolver import NameResolver
from ..routes import SystemRoutingTable
from ..state import StateStore
from ..sudo import SudoKeepAlive, prime_sudo
from ..utils import (
    default_audit_log_path,
    default_state_path,
    format_elapsed_time,
    is_root,
    missing_commands,
)

if TYPE_CHECKING:
    from ..cli_types import ApplyArgs


def required_commands(auto_detect: bool) -> tuple[str, ...]:
    """Return the system commands an apply run shells out to."""
    if auto_detect:
        return ROUTE_COMMANDS + INTERFACE_COMMANDS
    return ROUTE_COMMANDS


def format_decision(d: Decision) -> str:
    """Format a single decision as a styled status line."""
    label = d.endpoint or "-"
    if d.outcome == "failed":
        return click.style(f"FAIL {label} {d.step}: {d.detail}", fg="red")
    if d.outcome == "added":
        return click.style(f"OK {label} {d.step} added: {d.detail}", fg="green")
    if d.outcome == "would_add":
        return click.style(f"DRY RUN: would add {d.step} for {label}: {d.detail}", fg="yellow")
    if d.outcome == "exists":
        return click.style(f"SKIP {label} {d.step} already present", fg="yellow")
    if d.outcome == "skipped":
        return click.style(f"SKIP {label} {d.step}: {d.detail}", fg="yellow")
    if d.outcome == "warning":
        return click.style(f"WARNING: {d.detail}", fg="yellow")
    if d.outcome == "reset":
        return click.style(f"State reset ({d.detail})", fg="cyan")
    if d.outcome == "would_reset":
        return click.style(f"DRY RUN: would reset state ({d.detail})", fg="yellow")
    if d.step == "interface":
        return f"{click.style('Interface:', fg='cyan')} {d.detail}"
    if d.step == "state":
        return f"{click.style('State:', fg='cyan')} {d.detail}"
    if d.step == "gateway":
        return f"{click.style(label, fg='blue')} gateway {d.detail}"
    return f"{click.style(label, fg='blue')} -> {d.detail}"


def summary_line(report: RunReport) -> str:
    total = len(dict.fromkeys(report.declared))
    failed = len(report.failed_endpoints)
    return (
        "Summary: "
        f"declared={total} resolved={len(report.resolved)} "
        f"changes={len(report.changes)} failed={failed} "
        f"duration={format_elapsed_time(report.duration_s)}"
    )


def notification_message(report: RunReport) -> str:
    prefix = "Dry run" if report.dry_run else "Route setup"
    failed = len(report.failed_endpoints)
    if failed:
        return f"{prefix} completed with {failed} failed endpoint(s)."
    return f"{prefix} completed successfully."


def cmd_apply(args: ApplyArgs) -> None:
    """Reconcile hosts entries and host routes with the configured endpoints."""
    config_dir = Path(args.config_dir)
    config = load_config(config_dir)

    missing = missing_commands(required_commands(args.auto_detect))
    if missing:
        raise UserError(f"Missing dependencies: {' '.join(missing)}")

    state_path = Path(args.state_file) if args.state_file else default_state_path(config_dir)
    audit_log = Path(args.audit_log) if args.audit_log else default_audit_log_path()
    use_sudo = not is_root()

    if not args.json:
        if args.dry_run:
            print(click.style("DRY RUN: no changes will be made.", fg="yellow"))
        print(f"{click.style('MAC address:', fg='cyan')} {config.mac_address}")
        print(f"{click.style('Endpoints:', fg='cyan')}")
        for i, endpoint in enumerate(config.endpoints, start=1):
            print(f"  {i}. {endpoint}")
        print(f"{click.style('State file:', fg='cyan')} {state_path}")

    options = RunOptions(
        dry_run=args.dry_run,
        auto_detect=args.auto_detect,
        ignore_state=args.ignore_state,
        hardware_type=args.hardware_port,
    )
    reconciler = Reconciler(
        config,
        options,
        store=StateStore(state_path, dry_run=args.dry_run),
        resolver=NameResolver(timeout_s=args.dns_timeout),
        routes=SystemRoutingTable(use_sudo=use_sudo, timeout_s=args.command_timeout),
        overrides=HostsFile(Path(args.hosts_file), use_sudo=use_sudo, timeout_s=args.command_timeout),
        interfaces=SystemInterfaces(timeout_s=args.command_timeout) if args.auto_detect else None,
        audit_log=audit_log,
        on_decision=None if args.json else lambda d: print(format_decision(d)),
    )

    needs_sudo = use_sudo and not args.dry_run
    if needs_sudo:
        prime_sudo()
    with SudoKeepAlive() if needs_sudo else nullcontext():
        report = reconciler.run()

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        print()
        print(summary_line(report))
        if not args.dry_run:
            print(f"Audit log: {audit_log}")

    if args.notify:
        send_notification(notification_message(report))
