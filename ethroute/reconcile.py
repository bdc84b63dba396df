"""Reconciliation of declared endpoints against recorded and applied state.

A run goes through these stages:

1. Optionally pick the active interface to bind routes to (auto-detect).
2. Decide what needs resolving: every declared endpoint when the state store
   is empty or being ignored, otherwise only the endpoints it does not know.
3. Resolve each of those to an address and gateway, recording successes.
4. Replay every recorded entry through the hosts writer and the route
   provisioner. Both are idempotent, so entries applied on earlier runs are
   re-verified rather than re-applied.

Per-endpoint failures are reported and skipped; they never abort the run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from .audit import append_jsonl, audit_record
from .config import RouteConfig
from .constants import DEFAULT_HARDWARE_PORT
from .exceptions import (
    EthRouteError,
    GatewayResolutionFailedError,
    NoActiveInterfaceError,
    ResolutionFailedError,
)
from .hosts import OverrideTable, ensure_override
from .interfaces import InterfaceSource, active_interfaces, select_interface
from .resolver import EndpointResolver
from .routes import RoutingTable, ensure_route
from .state import ResolvedEntry, StateStore
from .utils import is_literal_endpoint

logger = logging.getLogger("ethroute")

CHANGED_OUTCOMES = ("added", "would_add")


@dataclass
class RunOptions:
    """Run-mode flags."""

    dry_run: bool = False
    auto_detect: bool = False
    ignore_state: bool = False
    hardware_type: str = DEFAULT_HARDWARE_PORT


@dataclass
class Decision:
    """A single reported step for one endpoint.

    step is one of: interface, state, resolve, gateway, hosts, route.
    outcome is one of: ok, added, would_add, exists, skipped, failed, warning,
    reset, would_reset.
    """

    endpoint: Optional[str]
    step: str
    outcome: str
    detail: str = ""


@dataclass
class RunReport:
    """Everything a run decided, in order."""

    dry_run: bool
    interface: Optional[str] = None
    declared: list[str] = field(default_factory=list)
    resolved: list[ResolvedEntry] = field(default_factory=list)
    replayed: list[ResolvedEntry] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)
    duration_s: float = 0.0

    def outcomes(self, step: str) -> dict[str, str]:
        """Map endpoint -> outcome for one step."""
        return {d.endpoint: d.outcome for d in self.decisions if d.step == step and d.endpoint}

    @property
    def failed_endpoints(self) -> list[str]:
        seen: dict[str, None] = {}
        for d in self.decisions:
            if d.outcome == "failed" and d.endpoint:
                seen[d.endpoint] = None
        return list(seen)

    @property
    def changes(self) -> list[Decision]:
        return [d for d in self.decisions if d.outcome in CHANGED_OUTCOMES]

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "interface": self.interface,
            "declared": self.declared,
            "resolved": [asdict(e) for e in self.resolved],
            "replayed": [asdict(e) for e in self.replayed],
            "decisions": [asdict(d) for d in self.decisions],
            "failed": self.failed_endpoints,
            "duration_s": round(self.duration_s, 3),
        }


class Reconciler:
    """Converge the hosts file and routing table to the declared endpoints."""

    def __init__(
        self,
        config: RouteConfig,
        options: RunOptions,
        *,
        store: StateStore,
        resolver: EndpointResolver,
        routes: RoutingTable,
        overrides: OverrideTable,
        interfaces: Optional[InterfaceSource] = None,
        audit_log: Optional[Path] = None,
        on_decision: Optional[Callable[[Decision], None]] = None,
    ):
        if options.auto_detect and interfaces is None:
            raise ValueError("auto_detect requires an InterfaceSource")
        self.config = config
        self.options = options
        self.store = store
        self.resolver = resolver
        self.routes = routes
        self.overrides = overrides
        self.interfaces = interfaces
        self.audit_log = audit_log
        self.on_decision = on_decision
        self.report = RunReport(dry_run=options.dry_run)
        # dry-run additions, so later entries see them as already present
        self._would_route: set[str] = set()
        self._would_override: set[str] = set()

    def _decide(self, endpoint: Optional[str], step: str, outcome: str, detail: str = "") -> None:
        decision = Decision(endpoint=endpoint, step=step, outcome=outcome, detail=detail)
        self.report.decisions.append(decision)
        logger.debug("%s %s: %s %s", endpoint or "-", step, outcome, detail)
        if self.on_decision is not None:
            self.on_decision(decision)

    def _audit(
        self,
        action: str,
        endpoint: Optional[str],
        ok: bool,
        error: Optional[str] = None,
        **params: Any,
    ) -> None:
        if self.audit_log is None or self.options.dry_run:
            return
        append_jsonl(
            self.audit_log,
            audit_record(action, endpoint=endpoint, ok=ok, parameters=params, error=error),
        )

    def detect_interface(self) -> str:
        """Return the interface to bind routes to.

        Raises:
            NoActiveInterfaceError: if no port of the hardware type is active
        """
        assert self.interfaces is not None
        hardware_type = self.options.hardware_type
        active = active_interfaces(self.interfaces, hardware_type)
        interface = select_interface(active)
        if interface is None:
            raise NoActiveInterfaceError(f"No active {hardware_type} interface found.")
        if len(active) > 1:
            self._decide(
                None,
                "interface",
                "warning",
                f"Multiple active {hardware_type} interfaces ({', '.join(active)}); using {interface}",
            )
        self._decide(None, "interface", "ok", interface)
        return interface

    def resolve_entry(self, endpoint: str) -> Optional[ResolvedEntry]:
        """Resolve endpoint to an address and gateway, or None on failure."""
        try:
            address = self.resolver.resolve(endpoint)
        except ResolutionFailedError as e:
            self._decide(endpoint, "resolve", "failed", e.reason)
            return None
        self._decide(endpoint, "resolve", "ok", address)

        try:
            gateway = self.routes.gateway_for(address)
        except GatewayResolutionFailedError as e:
            self._decide(endpoint, "gateway", "failed", str(e))
            return None
        self._decide(endpoint, "gateway", "ok", gateway)
        return ResolvedEntry(endpoint=endpoint, address=address, gateway=gateway)

    def plan(self) -> tuple[list[str], list[ResolvedEntry]]:
        """Return (endpoints to resolve, already recorded entries to keep)."""
        declared = list(dict.fromkeys(self.config.endpoints))
        stored = self.store.load()
        if not self.options.ignore_state and not stored and self.store.has_content():
            self._decide(
                None,
                "state",
                "warning",
                f"{self.store.path} has no valid records; leaving it untouched",
            )
            return declared, []
        if self.options.ignore_state or not stored:
            reason = "ignoring existing state" if self.options.ignore_state else "no existing state"
            if self.store.reset():
                self._audit("state.reset", None, True, path=str(self.store.path))
                self._decide(None, "state", "reset", reason)
            else:
                self._decide(None, "state", "would_reset", reason)
            return declared, []

        known = {entry.endpoint for entry in stored}
        new = [endpoint for endpoint in declared if endpoint not in known]
        self._decide(None, "state", "ok", f"{len(known)} recorded, {len(new)} new")
        return new, self.store.latest()

    def apply_override(self, entry: ResolvedEntry) -> None:
        if is_literal_endpoint(entry.endpoint):
            self._decide(entry.endpoint, "hosts", "skipped", "literal address")
            return
        name = entry.endpoint.lower()
        try:
            if name in self._would_override:
                outcome = "exists"
            else:
                outcome = ensure_override(
                    self.overrides, entry.address, entry.endpoint, dry_run=self.options.dry_run
                )
        except EthRouteError as e:
            self._decide(entry.endpoint, "hosts", "failed", str(e))
            self._audit("hosts.append", entry.endpoint, False, error=str(e), address=entry.address)
            return
        if outcome == "would_add":
            self._would_override.add(name)
        self._decide(entry.endpoint, "hosts", outcome, f"{entry.address} {entry.endpoint}")
        if outcome == "added":
            self._audit("hosts.append", entry.endpoint, True, address=entry.address)

    def apply_route(self, entry: ResolvedEntry, interface: Optional[str]) -> None:
        via = (
            f"interface {interface}"
            if interface
            else f"gateway {entry.gateway} with MAC {self.config.mac_address}"
        )
        params = {
            "address": entry.address,
            "gateway": entry.gateway,
            "interface": interface,
            "link_address": None if interface else self.config.mac_address,
        }
        try:
            if entry.address in self._would_route:
                outcome = "exists"
            else:
                outcome = ensure_route(
                    self.routes,
                    entry.address,
                    gateway=entry.gateway,
                    interface=interface,
                    link_address=self.config.mac_address,
                    dry_run=self.options.dry_run,
                )
        except EthRouteError as e:
            self._decide(entry.endpoint, "route", "failed", str(e))
            self._audit("route.add", entry.endpoint, False, error=str(e), **params)
            return
        if outcome == "would_add":
            self._would_route.add(entry.address)
        detail = f"{entry.address} via {via}" if outcome != "exists" else entry.address
        self._decide(entry.endpoint, "route", outcome, detail)
        if outcome == "added":
            self._audit("route.add", entry.endpoint, True, **params)

    def run(self) -> RunReport:
        """Run one reconciliation pass and return its report.

        Raises:
            NoActiveInterfaceError: under auto-detect with no active interface
        """
        start = time.monotonic()
        report = self.report
        report.declared = list(self.config.endpoints)

        interface = self.detect_interface() if self.options.auto_detect else None
        report.interface = interface

        to_resolve, recorded = self.plan()
        for endpoint in to_resolve:
            entry = self.resolve_entry(endpoint)
            if entry is None:
                continue
            try:
                self.store.append(entry)
            except EthRouteError as e:
                # still provisioned below; retried as new on the next run
                self._decide(endpoint, "state", "failed", str(e))
            else:
                self._decide(
                    endpoint,
                    "state",
                    "added" if not self.options.dry_run else "would_add",
                    entry.to_line().strip(),
                )
            report.resolved.append(entry)

        report.replayed = recorded + report.resolved
        for entry in report.replayed:
            self.apply_override(entry)
            self.apply_route(entry, interface)

        report.duration_s = time.monotonic() - start
        return report
