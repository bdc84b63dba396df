"""ethroute constants."""

from __future__ import annotations

# Configuration layout
DEFAULT_CONFIG_DIR = "./config"
DOMAINS_FILE_NAME = "domains.conf"
MAC_ADDRESS_FILE_NAME = "mac_address.conf"
STATE_FILE_NAME = "state.conf"

# System tables
DEFAULT_HOSTS_PATH = "/etc/hosts"
DEFAULT_HARDWARE_PORT = "Ethernet"
LINK_STATUS_ACTIVE = "active"

# State record layout: endpoint|address|gateway
STATE_FIELD_SEP = "|"

# Local audit trail
AUDIT_DIR_NAME = ".ethroute"
AUDIT_FILE_NAME = "audit.jsonl"

# Timeouts (seconds)
DEFAULT_DNS_TIMEOUT_S = 5.0
DEFAULT_COMMAND_TIMEOUT_S = 10
COMMAND_TIMEOUT_EXIT_CODE = 124
SUDO_KEEPALIVE_INTERVAL_S = 60.0

NOTIFICATION_TITLE = "Ethernet Route Setup"
APP_NAME = "ethroute"

# System commands the run shells out to
ROUTE_COMMANDS = ("route", "netstat", "sudo")
INTERFACE_COMMANDS = ("networksetup", "ifconfig")
