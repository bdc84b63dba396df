"""ethroute CLI using Click."""

from __future__ import annotations

import logging
import sys
from importlib.metadata import version

import click

from .cli_types import ApplyArgs, CheckDepsArgs, InterfacesArgs, ShowStateArgs
from .commands import cmd_apply, cmd_check_deps, cmd_interfaces, cmd_show_state
from .constants import (
    DEFAULT_COMMAND_TIMEOUT_S,
    DEFAULT_CONFIG_DIR,
    DEFAULT_DNS_TIMEOUT_S,
    DEFAULT_HARDWARE_PORT,
    DEFAULT_HOSTS_PATH,
)
from .exceptions import CommandFailureError, EthRouteError, UserError

# Module logger
logger = logging.getLogger("ethroute")


def setup_logging(debug: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)
    if any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
        for h in logger.handlers
    ):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)


def config_options(func):
    """Decorator to add the configuration location options."""
    func = click.option(
        "--state-file",
        type=click.Path(dir_okay=False),
        help="Path to the state file (default: CONFIG_DIR/state.conf).",
    )(func)
    func = click.option(
        "--config-dir",
        type=click.Path(file_okay=False),
        default=DEFAULT_CONFIG_DIR,
        show_default=True,
        help="Directory holding domains.conf and mac_address.conf.",
    )(func)
    return func


def json_option(func):
    return click.option(
        "--json",
        "json_output",
        is_flag=True,
        help="Emit machine-readable JSON to stdout.",
    )(func)


def hardware_options(func):
    """Decorator to add interface discovery options."""
    func = click.option(
        "--command-timeout",
        type=int,
        default=DEFAULT_COMMAND_TIMEOUT_S,
        show_default=True,
        help="Timeout in seconds for each system command.",
    )(func)
    func = click.option(
        "--hardware-port",
        default=DEFAULT_HARDWARE_PORT,
        show_default=True,
        help="Hardware port type to auto-detect interfaces of.",
    )(func)
    return func


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=version("ethroute"), prog_name="ethroute")
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Enable debug logging to stderr.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """ethroute: route selected domains and addresses over a physical interface."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    setup_logging(debug=debug)


@cli.command("apply")
@config_options
@hardware_options
@json_option
@click.option(
    "--auto-detect",
    is_flag=True,
    help="Bind routes to the active interface instead of gateway + MAC address.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would change without touching hosts, routes or state.",
)
@click.option(
    "--ignore-state",
    is_flag=True,
    help="Reset recorded state and resolve every endpoint again.",
)
@click.option(
    "--hosts-file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_HOSTS_PATH,
    show_default=True,
    help="Name-resolution override file to append to.",
)
@click.option(
    "--dns-timeout",
    type=float,
    default=DEFAULT_DNS_TIMEOUT_S,
    show_default=True,
    help="DNS lookup timeout in seconds.",
)
@click.option(
    "--audit-log",
    type=click.Path(),
    help="Path to local JSONL audit log (default: ~/.ethroute/audit.jsonl).",
)
@click.option(
    "--no-notify",
    is_flag=True,
    help="Do not send a desktop notification when the run completes.",
)
def apply(
    config_dir: str,
    state_file: str | None,
    hardware_port: str,
    command_timeout: int,
    json_output: bool,
    auto_detect: bool,
    dry_run: bool,
    ignore_state: bool,
    hosts_file: str,
    dns_timeout: float,
    audit_log: str | None,
    no_notify: bool,
):
    """Add hosts entries and host routes for the configured endpoints.

    Endpoints already recorded in the state file are not resolved again, but
    their hosts entries and routes are re-checked and restored if missing.
    """
    args = ApplyArgs(
        config_dir=config_dir,
        state_file=state_file,
        auto_detect=auto_detect,
        dry_run=dry_run,
        ignore_state=ignore_state,
        hardware_port=hardware_port,
        hosts_file=hosts_file,
        dns_timeout=dns_timeout,
        command_timeout=command_timeout,
        audit_log=audit_log,
        notify=not no_notify,
        json=json_output,
    )
    cmd_apply(args)


@cli.command("show-state")
@config_options
@json_option
def show_state(config_dir: str, state_file: str | None, json_output: bool):
    """Show endpoints recorded in the state file."""
    args = ShowStateArgs(config_dir=config_dir, state_file=state_file, json=json_output)
    cmd_show_state(args)


@cli.command("interfaces")
@hardware_options
@json_option
def interfaces(hardware_port: str, command_timeout: int, json_output: bool):
    """List active interfaces; '*' marks the one --auto-detect would use."""
    args = InterfacesArgs(
        hardware_port=hardware_port,
        command_timeout=command_timeout,
        json=json_output,
    )
    cmd_interfaces(args)


@cli.command("check-deps")
@click.option(
    "--auto-detect",
    is_flag=True,
    help="Also check the commands interface auto-detection needs.",
)
def check_deps(auto_detect: bool):
    """Check that the required system commands are installed."""
    cmd_check_deps(CheckDepsArgs(auto_detect=auto_detect))


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except CommandFailureError as e:
        # Command already printed its error message, just exit
        sys.exit(e.rc)
    except UserError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(e.rc)
    except EthRouteError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(2)
    except KeyboardInterrupt:
        click.echo("ERROR: Interrupted", err=True)
        sys.exit(130)
