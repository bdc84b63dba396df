"""Endpoint to IPv4 address resolution."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import dns.exception
import dns.resolver

from .constants import DEFAULT_DNS_TIMEOUT_S
from .exceptions import ResolutionFailedError
from .utils import is_ipv4_literal, strip_port

logger = logging.getLogger("ethroute")


class NameResolver:
    """Resolve endpoints to a single IPv4 address.

    Literal addresses (optionally with a `:port` suffix) are returned without
    touching the network. Anything else is looked up as an A record and the
    first dotted-quad answer wins. A failed lookup is final; there are no
    retries.
    """

    def __init__(
        self,
        timeout_s: float = DEFAULT_DNS_TIMEOUT_S,
        resolver: Optional[dns.resolver.Resolver] = None,
    ):
        self.timeout_s = timeout_s
        self._resolver = resolver

    @property
    def resolver(self) -> dns.resolver.Resolver:
        if self._resolver is None:
            self._resolver = dns.resolver.Resolver()
            self._resolver.lifetime = self.timeout_s
        return self._resolver

    def lookup(self, name: str) -> list[str]:
        """Return A-record answers for name as strings, in answer order."""
        try:
            answer = self.resolver.resolve(name, "A")
        except dns.exception.DNSException as e:
            raise ResolutionFailedError(name, type(e).__name__) from e
        addresses = [rdata.to_text() for rdata in answer]
        logger.debug("DNS %s -> %s", name, addresses)
        return addresses

    def resolve(self, endpoint: str) -> str:
        """Return the IPv4 address endpoint refers to.

        Raises:
            ResolutionFailedError: if the lookup fails or has no IPv4 answer
        """
        host = strip_port(endpoint)
        if is_ipv4_literal(host):
            return host
        for address in self.lookup(endpoint):
            if is_ipv4_literal(address):
                return address
        raise ResolutionFailedError(endpoint)


class EndpointResolver(Protocol):
    """Anything that turns an endpoint into an IPv4 address."""

    def resolve(self, endpoint: str) -> str: ...
