"""Subprocess execution for the local system commands ethroute drives."""

from __future__ import annotations

import logging
import subprocess
import time
from typing import Optional, Sequence, Tuple

from .constants import COMMAND_TIMEOUT_EXIT_CODE, DEFAULT_COMMAND_TIMEOUT_S
from .exceptions import CommandNotFoundError

logger = logging.getLogger("ethroute")


def run_command(
    cmd: Sequence[str],
    *,
    input_bytes: Optional[bytes] = None,
    timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S,
) -> Tuple[int, str, str]:
    """
    Executes cmd without a shell.

    Returns (returncode, stdout, stderr). Does NOT raise on non-zero rc.
    """
    logger.debug("Running: %s", " ".join(cmd))

    start_time = time.time()
    try:
        p = subprocess.run(
            list(cmd),
            input=input_bytes,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout_s,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        elapsed = time.time() - start_time
        logger.debug("%s timed out after %.2fs", cmd[0], elapsed)
        return (
            COMMAND_TIMEOUT_EXIT_CODE,
            e.stdout.decode("utf-8", "replace") if e.stdout else "",
            e.stderr.decode("utf-8", "replace") if e.stderr else f"{cmd[0]} timeout",
        )
    except FileNotFoundError:
        raise CommandNotFoundError(f"{cmd[0]} binary not found on PATH.")

    elapsed = time.time() - start_time
    logger.debug("%s completed in %.2fs (rc=%d)", cmd[0], elapsed, p.returncode)
    return (
        p.returncode,
        p.stdout.decode("utf-8", "replace"),
        p.stderr.decode("utf-8", "replace"),
    )


def privileged(cmd: Sequence[str], *, use_sudo: bool) -> list[str]:
    """Prefix cmd with non-interactive sudo when required."""
    if use_sudo:
        return ["sudo", "-n", *cmd]
    return list(cmd)
