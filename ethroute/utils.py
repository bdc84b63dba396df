"""ethroute utility functions."""

from __future__ import annotations

import datetime as dt
import os
import re
import shutil
from collections.abc import Iterable
from pathlib import Path

from .constants import AUDIT_DIR_NAME, AUDIT_FILE_NAME, STATE_FILE_NAME
from .exceptions import ConfigMissingError

_IPV4_SHAPE_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")


def utc_now_iso() -> str:
    """Return current UTC time in ISO format without microseconds."""
    return dt.datetime.now(dt.UTC).replace(microsecond=0).isoformat()


def format_elapsed_time(seconds: float) -> str:
    """Format elapsed time in human-readable format.

    Args:
        seconds: Elapsed time in seconds

    Returns:
        Formatted string like "1m25s", "45s", or "1h05m30s"
    """
    total_seconds = int(seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        return f"{hours}h{minutes:02d}m{secs:02d}s"
    if minutes:
        return f"{minutes}m{secs:02d}s"
    return f"{secs}s"


def ensure_parent_dir(p: Path) -> None:
    """Create parent directory of path if it doesn't exist."""
    p.parent.mkdir(parents=True, exist_ok=True)


def infer_actor() -> str:
    """Infer the actor (user) performing the operation."""
    return (
        os.environ.get("ETHROUTE_ACTOR")
        or os.environ.get("SUDO_USER")
        or os.environ.get("USER")
        or "unknown"
    )


def default_audit_log_path() -> Path:
    """Return default path for audit log file."""
    home = Path(os.path.expanduser("~"))
    return home / AUDIT_DIR_NAME / AUDIT_FILE_NAME


def is_ipv4_literal(text: str) -> bool:
    """Return True if text has the dotted-quad shape (four digit groups)."""
    return _IPV4_SHAPE_RE.match(text) is not None


def strip_port(endpoint: str) -> str:
    """Drop everything from the first colon onwards."""
    return endpoint.split(":", 1)[0]


def is_literal_endpoint(endpoint: str) -> bool:
    """Return True for `10.0.0.5` and `10.0.0.5:8443` style endpoints."""
    return is_ipv4_literal(strip_port(endpoint))


def parse_config_lines(file_path: Path) -> list[str]:
    """Parse a line-oriented config file. Ignore comments (#) and blank lines."""
    if not (file_path.exists() and file_path.is_file()):
        raise ConfigMissingError(f"Configuration file not found: {file_path}")
    values = []
    with file_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            values.append(line)
    return values


def missing_commands(commands: Iterable[str]) -> list[str]:
    """Return the subset of commands that are not found on PATH."""
    return [cmd for cmd in commands if shutil.which(cmd) is None]


def is_root() -> bool:
    """Return True when running with an effective uid of 0."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def default_state_path(config_dir: Path) -> Path:
    """Return the state store path used when none is given explicitly."""
    return config_dir / STATE_FILE_NAME
