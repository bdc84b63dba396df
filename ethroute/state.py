"""Persisted record of provisioned endpoints.

One record per line, `endpoint|address|gateway`, append-only and meant to be
human-editable. Blank lines and `#` comments are ignored. An endpoint may
appear more than once after a manual edit; the last record wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import STATE_FIELD_SEP
from .exceptions import EthRouteError
from .utils import ensure_parent_dir, is_ipv4_literal

logger = logging.getLogger("ethroute")


@dataclass(frozen=True)
class ResolvedEntry:
    """An endpoint together with the address and gateway it resolved to."""

    endpoint: str
    address: str
    gateway: Optional[str] = None

    def to_line(self) -> str:
        return STATE_FIELD_SEP.join((self.endpoint, self.address, self.gateway or "")) + "\n"

    @classmethod
    def from_line(cls, line: str) -> Optional[ResolvedEntry]:
        """Parse one record; return None for lines that are not valid records."""
        parts = [p.strip() for p in line.split(STATE_FIELD_SEP)]
        if len(parts) != 3:
            return None
        endpoint, address, gateway = parts
        if not endpoint or not is_ipv4_literal(address):
            return None
        return cls(endpoint=endpoint, address=address, gateway=gateway or None)


class StateStore:
    """File-backed ordered sequence of ResolvedEntry.

    With dry_run set, append() and reset() only report what they would do.
    """

    def __init__(self, path: Path, *, dry_run: bool = False):
        self.path = path
        self.dry_run = dry_run

    def load(self) -> list[ResolvedEntry]:
        """Return every valid record in file order. A missing file is empty."""
        entries: list[ResolvedEntry] = []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                for lineno, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    entry = ResolvedEntry.from_line(line)
                    if entry is None:
                        logger.warning("%s:%d: ignoring malformed record %r", self.path, lineno, line)
                        continue
                    entries.append(entry)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise EthRouteError(f"Reading {self.path} failed: {e}") from e
        return entries

    def has_content(self) -> bool:
        """Return True if the file holds any non-blank line, valid or not."""
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return False
        except OSError as e:
            raise EthRouteError(f"Reading {self.path} failed: {e}") from e
        return any(line.strip() for line in text.splitlines())

    def latest(self) -> list[ResolvedEntry]:
        """Return one entry per endpoint (last record wins), in first-seen order."""
        by_endpoint: dict[str, ResolvedEntry] = {}
        for entry in self.load():
            by_endpoint[entry.endpoint] = entry
        return list(by_endpoint.values())

    def endpoints(self) -> set[str]:
        return {entry.endpoint for entry in self.load()}

    def contains(self, endpoint: str) -> bool:
        return endpoint in self.endpoints()

    def append(self, entry: ResolvedEntry) -> bool:
        """Record entry durably. Return True if written, False under dry run."""
        if self.dry_run:
            logger.debug("DRY RUN: would record %s", entry.to_line().strip())
            return False
        try:
            ensure_parent_dir(self.path)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(entry.to_line())
                f.flush()
        except OSError as e:
            raise EthRouteError(f"Appending to {self.path} failed: {e}") from e
        return True

    def reset(self) -> bool:
        """Truncate the store. Return True if truncated, False under dry run."""
        if self.dry_run:
            logger.debug("DRY RUN: would reset %s", self.path)
            return False
        try:
            ensure_parent_dir(self.path)
            self.path.write_text("", encoding="utf-8")
        except OSError as e:
            raise EthRouteError(f"Resetting {self.path} failed: {e}") from e
        return True
