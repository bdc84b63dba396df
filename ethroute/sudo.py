"""Administrative credential priming and keep-alive."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Callable, Optional

from .constants import SUDO_KEEPALIVE_INTERVAL_S
from .exceptions import UserError

logger = logging.getLogger("ethroute")


def prime_sudo() -> None:
    """Prompt for the sudo password once so later `sudo -n` calls succeed."""
    try:
        rc = subprocess.run(["sudo", "-v"], check=False).returncode
    except FileNotFoundError:
        raise UserError("sudo binary not found on PATH.")
    if rc != 0:
        raise UserError("Could not obtain administrative privileges (sudo -v failed).")


def refresh_sudo() -> None:
    """Refresh the cached sudo timestamp without prompting."""
    subprocess.run(
        ["sudo", "-n", "true"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    )


class SudoKeepAlive:
    """Periodically refresh sudo credentials for the lifetime of a `with` block.

    The refresher runs in a daemon thread so it never outlives the process.
    """

    def __init__(
        self,
        interval_s: float = SUDO_KEEPALIVE_INTERVAL_S,
        refresh: Optional[Callable[[], None]] = None,
    ):
        self.interval_s = interval_s
        self._refresh = refresh or refresh_sudo
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_s):
            try:
                self._refresh()
            except OSError as e:
                logger.debug("sudo refresh failed: %s", e)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="sudo-keepalive", daemon=True)
        self._thread.start()
        logger.debug("sudo keep-alive started (every %.0fs)", self.interval_s)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=self.interval_s)
        self._thread = None
        logger.debug("sudo keep-alive stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> SudoKeepAlive:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
