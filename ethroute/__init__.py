"""
ethroute - Route selected domains and addresses over a physical interface.

Design goals:
- Only touch what is declared: hosts entries and host routes are appended,
  never removed, and always checked for before being added.
- Remember what was resolved so repeated runs only resolve new endpoints.
- Every decision is printed; --dry-run shows them without applying any.
"""

from __future__ import annotations

from .cli import main
from .exceptions import EthRouteError, UserError
from .reconcile import Reconciler, RunOptions, RunReport
from .state import ResolvedEntry, StateStore

__all__ = [
    "EthRouteError",
    "Reconciler",
    "ResolvedEntry",
    "RunOptions",
    "RunReport",
    "StateStore",
    "UserError",
    "main",
]
