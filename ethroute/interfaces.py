"""Hardware port enumeration and active interface selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .constants import DEFAULT_COMMAND_TIMEOUT_S, LINK_STATUS_ACTIVE
from .exceptions import EthRouteError
from .shell import run_command

logger = logging.getLogger("ethroute")


@dataclass(frozen=True)
class HardwarePort:
    """One block of `networksetup -listallhardwareports` output."""

    name: str
    device: str
    address: str = ""


class InterfaceSource(Protocol):
    """Port onto the OS listing of physical network ports."""

    def hardware_ports(self) -> list[HardwarePort]: ...

    def link_status(self, device: str) -> Optional[str]: ...


def parse_hardware_ports(output: str) -> list[HardwarePort]:
    """Parse `networksetup -listallhardwareports` into ports, in listing order."""
    ports: list[HardwarePort] = []
    current: dict[str, str] = {}

    def flush() -> None:
        if current.get("Hardware Port") and current.get("Device"):
            ports.append(
                HardwarePort(
                    name=current["Hardware Port"],
                    device=current["Device"],
                    address=current.get("Ethernet Address", ""),
                )
            )
        current.clear()

    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        if key == "Hardware Port":
            flush()
        current[key] = value.strip()
    flush()
    return ports


def parse_link_status(output: str) -> Optional[str]:
    """Return the `status:` value from `ifconfig <device>` output."""
    for line in output.splitlines():
        key, sep, value = line.strip().partition(":")
        if sep and key == "status":
            return value.strip()
    return None


class SystemInterfaces:
    """InterfaceSource backed by `networksetup` and `ifconfig`."""

    def __init__(self, timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S):
        self.timeout_s = timeout_s

    def hardware_ports(self) -> list[HardwarePort]:
        rc, out, err = run_command(
            ["networksetup", "-listallhardwareports"], timeout_s=self.timeout_s
        )
        if rc != 0:
            raise EthRouteError(f"networksetup failed (rc={rc}): {err.strip()}")
        return parse_hardware_ports(out)

    def link_status(self, device: str) -> Optional[str]:
        rc, out, _err = run_command(["ifconfig", device], timeout_s=self.timeout_s)
        if rc != 0:
            logger.debug("ifconfig %s failed (rc=%d)", device, rc)
            return None
        return parse_link_status(out)


def active_interfaces(source: InterfaceSource, hardware_type: str) -> list[str]:
    """Return devices of hardware_type whose link is active, in listing order."""
    devices = [p.device for p in source.hardware_ports() if p.name.startswith(hardware_type)]
    logger.debug("%s ports: %s", hardware_type, devices)
    return [d for d in devices if source.link_status(d) == LINK_STATUS_ACTIVE]


def select_interface(interfaces: list[str]) -> Optional[str]:
    """Pick the first interface in enumeration order."""
    if not interfaces:
        return None
    if len(interfaces) > 1:
        logger.debug(
            "Multiple active interfaces found (%s); using %s",
            ", ".join(interfaces),
            interfaces[0],
        )
    return interfaces[0]
