"""ethroute exception classes."""

from __future__ import annotations


class EthRouteError(RuntimeError):
    """Base exception for ethroute errors."""


class UserError(EthRouteError):
    """Errors that should be shown to user without traceback."""

    def __init__(self, message: str, rc: int = 2):
        super().__init__(message)
        self.rc = rc


class CommandFailureError(EthRouteError):
    """Command failed - error message already printed, just need to exit."""

    def __init__(self, rc: int = 1):
        super().__init__("")
        self.rc = rc


class ConfigMissingError(UserError):
    """A required configuration file or value is absent."""


class NoActiveInterfaceError(UserError):
    """Auto-detect was requested but no interface of the port type is active."""


class CommandNotFoundError(EthRouteError):
    """A required system binary is not on PATH."""


class ResolutionFailedError(EthRouteError):
    """An endpoint could not be resolved to an IPv4 address."""

    def __init__(self, endpoint: str, reason: str = "no IPv4 answer"):
        super().__init__(f"Failed to resolve {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class GatewayResolutionFailedError(EthRouteError):
    """The kernel offered no gateway for a resolved address."""

    def __init__(self, address: str):
        super().__init__(f"No gateway found for {address}")
        self.address = address
