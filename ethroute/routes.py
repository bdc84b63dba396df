"""Kernel routing table inspection and host-route provisioning."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Protocol

from .constants import DEFAULT_COMMAND_TIMEOUT_S
from .exceptions import EthRouteError, GatewayResolutionFailedError
from .shell import privileged, run_command
from .utils import is_ipv4_literal

logger = logging.getLogger("ethroute")

RouteOutcome = Literal["exists", "added", "would_add"]


@dataclass(frozen=True)
class RouteEntry:
    """One row of `netstat -rn` output."""

    destination: str
    gateway: str

    @property
    def destination_host(self) -> str:
        # "10.0.0.5/32" is a host route for 10.0.0.5
        dest, sep, prefix = self.destination.partition("/")
        if sep and prefix == "32":
            return dest
        return self.destination

    def references(self, address: str) -> bool:
        return address in (self.destination_host, self.gateway)


class RoutingTable(Protocol):
    """Port onto the system routing table."""

    def route_exists(self, address: str) -> bool: ...

    def gateway_for(self, address: str) -> str: ...

    def add_interface_route(self, address: str, interface: str) -> None: ...

    def add_gateway_route(self, address: str, gateway: str, link_address: str) -> None: ...


def parse_netstat_routes(output: str) -> list[RouteEntry]:
    """Parse IPv4 rows from `netstat -rn`.

    Handles both the BSD/macOS layout (`Internet:` / `Internet6:` sections) and
    the Linux `Kernel IP routing table` layout. IPv6 sections are ignored.
    """
    entries: list[RouteEntry] = []
    in_ipv6 = False
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("Internet6"):
            in_ipv6 = True
            continue
        if line.startswith("Internet"):
            in_ipv6 = False
            continue
        if in_ipv6 or line.startswith(("Destination", "Routing tables", "Kernel")):
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        if parts[0] != "default" and not parts[0][0].isdigit():
            continue
        entries.append(RouteEntry(destination=parts[0], gateway=parts[1]))
    return entries


def parse_route_get_gateway(output: str) -> Optional[str]:
    """Return the `gateway:` value from `route -n get` output if it is IPv4."""
    for line in output.splitlines():
        key, sep, value = line.strip().partition(":")
        if sep and key.strip() == "gateway":
            gateway = value.strip()
            if is_ipv4_literal(gateway):
                return gateway
            logger.debug("Ignoring non-IPv4 gateway %r", gateway)
            return None
    return None


class SystemRoutingTable:
    """RoutingTable backed by `netstat` and `route`."""

    def __init__(self, *, use_sudo: bool, timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S):
        self.use_sudo = use_sudo
        self.timeout_s = timeout_s

    def entries(self) -> list[RouteEntry]:
        rc, out, err = run_command(["netstat", "-rn"], timeout_s=self.timeout_s)
        if rc != 0:
            raise EthRouteError(f"netstat -rn failed (rc={rc}): {err.strip()}")
        return parse_netstat_routes(out)

    def route_exists(self, address: str) -> bool:
        return any(entry.references(address) for entry in self.entries())

    def gateway_for(self, address: str) -> str:
        rc, out, err = run_command(["route", "-n", "get", address], timeout_s=self.timeout_s)
        if rc != 0:
            logger.debug("route -n get %s failed (rc=%d): %s", address, rc, err.strip())
            raise GatewayResolutionFailedError(address)
        gateway = parse_route_get_gateway(out)
        if gateway is None:
            raise GatewayResolutionFailedError(address)
        return gateway

    def _add(self, args: list[str]) -> None:
        cmd = privileged(["route", *args], use_sudo=self.use_sudo)
        rc, _out, err = run_command(cmd, timeout_s=self.timeout_s)
        if rc != 0:
            raise EthRouteError(f"route {' '.join(args)} failed (rc={rc}): {err.strip()}")

    def add_interface_route(self, address: str, interface: str) -> None:
        self._add(["-n", "add", "-host", address, "-interface", interface])

    def add_gateway_route(self, address: str, gateway: str, link_address: str) -> None:
        self._add(["add", "-host", address, gateway, "-link", link_address])


def ensure_route(
    table: RoutingTable,
    address: str,
    *,
    gateway: Optional[str],
    interface: Optional[str],
    link_address: Optional[str],
    dry_run: bool,
) -> RouteOutcome:
    """Install a host route for address unless one already exists.

    With an interface the route is bound to it directly; otherwise it goes via
    gateway using link_address as the next-hop identifier.

    Raises:
        EthRouteError: if the route command fails
    """
    if table.route_exists(address):
        return "exists"
    if interface is None and (not gateway or not link_address):
        raise EthRouteError(f"No gateway/link address to route {address} through")
    if dry_run:
        return "would_add"
    if interface is not None:
        table.add_interface_route(address, interface)
    else:
        table.add_gateway_route(address, gateway, link_address)
    return "added"
