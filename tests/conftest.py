"""Shared pytest fixtures for ethroute tests."""

from __future__ import annotations

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from ethroute.cli_types import ApplyArgs
from ethroute.config import RouteConfig
from ethroute.exceptions import (
    EthRouteError,
    GatewayResolutionFailedError,
    ResolutionFailedError,
)
from ethroute.hosts import HostsFile
from ethroute.interfaces import HardwarePort
from ethroute.resolver import NameResolver
from ethroute.state import StateStore

SAMPLE_HOSTS = """##
# Host Database
##
127.0.0.1\tlocalhost
255.255.255.255\tbroadcasthost
::1             localhost
10.9.9.9 unrelated.example.org
"""


class FakeResolver(NameResolver):
    """NameResolver whose DNS answers come from a dict."""

    def __init__(self, answers: dict[str, list[str]] | None = None):
        super().__init__()
        self.answers = answers or {}
        self.lookups: list[str] = []

    def lookup(self, name: str) -> list[str]:
        self.lookups.append(name)
        if name not in self.answers:
            raise ResolutionFailedError(name, "NXDOMAIN")
        return list(self.answers[name])


class FakeRoutingTable:
    """In-memory RoutingTable."""

    def __init__(
        self,
        gateways: dict[str, str] | None = None,
        default_gateway: str | None = "192.168.1.1",
        existing: dict[str, str] | None = None,
    ):
        self.gateways = gateways or {}
        self.default_gateway = default_gateway
        self.routes: dict[str, str] = dict(existing or {})
        self.add_calls: list[tuple[str, ...]] = []
        self.fail_for: set[str] = set()

    def route_exists(self, address: str) -> bool:
        return address in self.routes

    def gateway_for(self, address: str) -> str:
        gateway = self.gateways.get(address, self.default_gateway)
        if gateway is None:
            raise GatewayResolutionFailedError(address)
        return gateway

    def _check(self, address: str) -> None:
        if address in self.fail_for:
            raise EthRouteError(f"route add {address} failed (rc=1): File exists")

    def add_interface_route(self, address: str, interface: str) -> None:
        self.add_calls.append(("interface", address, interface))
        self._check(address)
        self.routes[address] = f"interface {interface}"

    def add_gateway_route(self, address: str, gateway: str, link_address: str) -> None:
        self.add_calls.append(("gateway", address, gateway, link_address))
        self._check(address)
        self.routes[address] = f"{gateway} link {link_address}"


class FakeInterfaces:
    """In-memory InterfaceSource."""

    def __init__(self, ports: list[HardwarePort], status: dict[str, str]):
        self.ports = ports
        self.status = status

    def hardware_ports(self) -> list[HardwarePort]:
        return list(self.ports)

    def link_status(self, device: str) -> str | None:
        return self.status.get(device)


@pytest.fixture
def tmp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def config_dir(tmp_dir: Path) -> Path:
    """Create a config directory with sample domains and MAC address."""
    d = tmp_dir / "config"
    d.mkdir()
    (d / "domains.conf").write_text(
        "# routed over ethernet\nintranet.example.com\n\n10.0.0.5:8443\n"
    )
    (d / "mac_address.conf").write_text("aa:bb:cc:dd:ee:ff\n")
    return d


@pytest.fixture
def hosts_path(tmp_dir: Path) -> Path:
    """Create a hosts file with unrelated pre-existing entries."""
    path = tmp_dir / "hosts"
    path.write_text(SAMPLE_HOSTS)
    return path


@pytest.fixture
def hosts_file(hosts_path: Path) -> HostsFile:
    return HostsFile(hosts_path, use_sudo=False)


@pytest.fixture
def state_store(tmp_dir: Path) -> StateStore:
    return StateStore(tmp_dir / "state.conf")


@pytest.fixture
def route_config() -> RouteConfig:
    return RouteConfig(
        endpoints=("intranet.example.com", "10.0.0.5:8443"),
        mac_address="aa:bb:cc:dd:ee:ff",
    )


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver({"intranet.example.com": ["10.0.0.7"]})


@pytest.fixture
def routing_table() -> FakeRoutingTable:
    return FakeRoutingTable()


@pytest.fixture
def apply_args(config_dir: Path, tmp_dir: Path, hosts_path: Path) -> ApplyArgs:
    """Create Args object for apply command."""
    return ApplyArgs(
        config_dir=str(config_dir),
        state_file=None,
        auto_detect=False,
        dry_run=False,
        ignore_state=False,
        hardware_port="Ethernet",
        hosts_file=str(hosts_path),
        dns_timeout=5.0,
        command_timeout=10,
        audit_log=str(tmp_dir / ".ethroute" / "audit.jsonl"),
        notify=False,
        json=False,
    )
