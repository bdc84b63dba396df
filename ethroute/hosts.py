"""Hosts-file (name-resolution override table) handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

from .constants import DEFAULT_COMMAND_TIMEOUT_S, DEFAULT_HOSTS_PATH
from .exceptions import EthRouteError
from .shell import privileged, run_command

logger = logging.getLogger("ethroute")

OverrideOutcome = Literal["exists", "added", "would_add"]


@dataclass(frozen=True)
class HostsRecord:
    """One non-comment hosts line: an address and the names mapped to it."""

    address: str
    names: tuple[str, ...]


class OverrideTable(Protocol):
    """Port onto the system name-resolution override table."""

    def has_entry(self, endpoint: str) -> bool: ...

    def append(self, address: str, endpoint: str) -> None: ...


def parse_hosts(text: str) -> list[HostsRecord]:
    """Parse hosts-file text into records, dropping comments and blank lines."""
    records: list[HostsRecord] = []
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        records.append(HostsRecord(address=parts[0], names=tuple(parts[1:])))
    return records


def format_hosts_line(address: str, endpoint: str) -> str:
    return f"{address} {endpoint}\n"


class HostsFile:
    """OverrideTable backed by a hosts file such as /etc/hosts."""

    def __init__(
        self,
        path: Path = Path(DEFAULT_HOSTS_PATH),
        *,
        use_sudo: bool,
        timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S,
    ):
        self.path = path
        self.use_sudo = use_sudo
        self.timeout_s = timeout_s

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return ""
        except OSError as e:
            raise EthRouteError(f"Reading {self.path} failed: {e}") from e

    def records(self) -> list[HostsRecord]:
        return parse_hosts(self.read_text())

    def has_entry(self, endpoint: str) -> bool:
        # hosts names are case-insensitive
        wanted = endpoint.lower()
        return any(
            wanted in (name.lower() for name in record.names) for record in self.records()
        )

    def append(self, address: str, endpoint: str) -> None:
        current = self.read_text()
        line = format_hosts_line(address, endpoint)
        if current and not current.endswith("\n"):
            line = "\n" + line
        if not self.use_sudo:
            try:
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as e:
                raise EthRouteError(f"Appending to {self.path} failed: {e}") from e
            return
        cmd = privileged(["tee", "-a", str(self.path)], use_sudo=True)
        rc, _out, err = run_command(cmd, input_bytes=line.encode("utf-8"), timeout_s=self.timeout_s)
        if rc != 0:
            raise EthRouteError(f"Appending to {self.path} failed (rc={rc}): {err.strip()}")


def ensure_override(
    table: OverrideTable, address: str, endpoint: str, *, dry_run: bool
) -> OverrideOutcome:
    """Map endpoint to address unless some record already names endpoint.

    Raises:
        EthRouteError: if the write fails
    """
    if table.has_entry(endpoint):
        return "exists"
    if dry_run:
        return "would_add"
    table.append(address, endpoint)
    return "added"
