"""Type definitions for CLI command arguments."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApplyArgs:
    """Arguments for apply command."""

    config_dir: str
    state_file: str | None
    auto_detect: bool
    dry_run: bool
    ignore_state: bool
    hardware_port: str
    hosts_file: str
    dns_timeout: float
    command_timeout: int
    audit_log: str | None
    notify: bool
    json: bool


@dataclass
class ShowStateArgs:
    """Arguments for show-state command."""

    config_dir: str
    state_file: str | None
    json: bool


@dataclass
class InterfacesArgs:
    """Arguments for interfaces command."""

    hardware_port: str
    command_timeout: int
    json: bool


@dataclass
class CheckDepsArgs:
    """Arguments for check-deps command."""

    auto_detect: bool
