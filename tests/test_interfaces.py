"""Tests for ethroute/interfaces.py - interface discovery and selection."""

from __future__ import annotations

import logging

import pytest
from conftest import FakeInterfaces
from ethroute.exceptions import EthRouteError
from ethroute.interfaces import (
    HardwarePort,
    SystemInterfaces,
    active_interfaces,
    parse_hardware_ports,
    parse_link_status,
    select_interface,
)

HARDWARE_PORTS = """
Hardware Port: Ethernet
Device: en5
Ethernet Address: 00:e0:4c:68:00:01

Hardware Port: Wi-Fi
Device: en0
Ethernet Address: 3c:22:fb:00:00:02

Hardware Port: Thunderbolt Bridge
Device: bridge0
Ethernet Address: N/A

Hardware Port: Ethernet
Device: en7
Ethernet Address: 00:e0:4c:68:00:03

VLAN Configurations
===================
"""

IFCONFIG_ACTIVE = """en5: flags=8863<UP,BROADCAST,SMART,RUNNING,SIMPLEX,MULTICAST> mtu 1500
\toptions=6467<RXCSUM,TXCSUM,VLAN_MTU,TSO4,TSO6,CHANNEL_IO,PARTIAL_CSUM,ZEROINVERT_CSUM>
\tether 00:e0:4c:68:00:01
\tinet 192.168.2.20 netmask 0xffffff00 broadcast 192.168.2.255
\tmedia: autoselect (1000baseT <full-duplex>)
\tstatus: active
"""


class TestParseHardwarePorts:
    """Tests for parse_hardware_ports function."""

    def test_ports_in_listing_order(self):
        ports = parse_hardware_ports(HARDWARE_PORTS)
        assert [p.device for p in ports] == ["en5", "en0", "bridge0", "en7"]
        assert ports[0] == HardwarePort("Ethernet", "en5", "00:e0:4c:68:00:01")

    def test_empty_output(self):
        assert parse_hardware_ports("") == []


class TestParseLinkStatus:
    """Tests for parse_link_status function."""

    def test_active(self):
        assert parse_link_status(IFCONFIG_ACTIVE) == "active"

    def test_inactive(self):
        assert parse_link_status("en7: flags=8822\n\tstatus: inactive\n") == "inactive"

    def test_no_status_line(self):
        assert parse_link_status("lo0: flags=8049<UP,LOOPBACK,RUNNING,MULTICAST>\n") is None


class TestActiveInterfaces:
    """Tests for active_interfaces and select_interface."""

    def test_filters_by_type_and_status(self):
        source = FakeInterfaces(
            parse_hardware_ports(HARDWARE_PORTS),
            {"en5": "inactive", "en0": "active", "en7": "active"},
        )
        assert active_interfaces(source, "Ethernet") == ["en7"]

    def test_none_active_is_empty_not_error(self):
        source = FakeInterfaces(parse_hardware_ports(HARDWARE_PORTS), {})
        assert active_interfaces(source, "Ethernet") == []

    def test_tie_break_is_first(self, caplog):
        """en5 and en7 active in that order: en5 every time, noted at debug level."""
        source = FakeInterfaces(
            parse_hardware_ports(HARDWARE_PORTS), {"en5": "active", "en7": "active"}
        )
        for _ in range(3):
            caplog.clear()
            with caplog.at_level(logging.DEBUG, logger="ethroute"):
                assert select_interface(active_interfaces(source, "Ethernet")) == "en5"
            assert "Multiple active interfaces" in caplog.text

    def test_selector_does_not_warn(self, caplog):
        """The caller surfaces the tie; the selector itself stays quiet."""
        with caplog.at_level(logging.WARNING, logger="ethroute"):
            assert select_interface(["en5", "en7"]) == "en5"
            assert select_interface(["en7"]) == "en7"
        assert caplog.text == ""

    def test_select_empty(self):
        assert select_interface([]) is None


class TestSystemInterfaces:
    """Tests for SystemInterfaces with mocked commands."""

    def test_hardware_ports(self, mocker):
        mock_run = mocker.patch(
            "ethroute.interfaces.run_command", return_value=(0, HARDWARE_PORTS, "")
        )
        ports = SystemInterfaces().hardware_ports()
        assert len(ports) == 4
        assert mock_run.call_args[0][0] == ["networksetup", "-listallhardwareports"]

    def test_hardware_ports_failure(self, mocker):
        mocker.patch("ethroute.interfaces.run_command", return_value=(1, "", "nope"))
        with pytest.raises(EthRouteError):
            SystemInterfaces().hardware_ports()

    def test_link_status(self, mocker):
        mock_run = mocker.patch(
            "ethroute.interfaces.run_command", return_value=(0, IFCONFIG_ACTIVE, "")
        )
        assert SystemInterfaces().link_status("en5") == "active"
        assert mock_run.call_args[0][0] == ["ifconfig", "en5"]

    def test_link_status_unknown_device(self, mocker):
        mocker.patch(
            "ethroute.interfaces.run_command",
            return_value=(1, "", "ifconfig: interface en9 does not exist"),
        )
        assert SystemInterfaces().link_status("en9") is None
