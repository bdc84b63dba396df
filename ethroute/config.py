"""Loading of the declared endpoints and link-layer address."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .constants import DOMAINS_FILE_NAME, MAC_ADDRESS_FILE_NAME
from .exceptions import ConfigMissingError
from .utils import parse_config_lines

logger = logging.getLogger("ethroute")


@dataclass(frozen=True)
class RouteConfig:
    """Declared intent for one run."""

    endpoints: tuple[str, ...]
    mac_address: str


def load_endpoints(path: Path) -> list[str]:
    """Return declared endpoints in file order."""
    endpoints = parse_config_lines(path)
    if not endpoints:
        raise ConfigMissingError(f"No domains or IP addresses found in {path}")
    return endpoints


def load_mac_address(path: Path) -> str:
    """Return the first MAC address line, whitespace stripped."""
    lines = parse_config_lines(path)
    if not lines:
        raise ConfigMissingError(f"No MAC address found in {path}")
    if len(lines) > 1:
        logger.warning("%s has %d entries; using the first", path, len(lines))
    return lines[0]


def load_config(config_dir: Path) -> RouteConfig:
    """Load both configuration files from config_dir.

    Raises:
        ConfigMissingError: if either file is missing or empty
    """
    mac_address = load_mac_address(config_dir / MAC_ADDRESS_FILE_NAME)
    endpoints = load_endpoints(config_dir / DOMAINS_FILE_NAME)
    logger.debug("Loaded %d endpoint(s) and MAC %s from %s", len(endpoints), mac_address, config_dir)
    return RouteConfig(endpoints=tuple(endpoints), mac_address=mac_address)
