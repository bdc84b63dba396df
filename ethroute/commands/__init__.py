"""ethroute command implementations."""

from __future__ import annotations

from .apply import cmd_apply
from .deps import cmd_check_deps
from .interfaces import cmd_interfaces
from .state import cmd_show_state

__all__ = [
    "cmd_apply",
    "cmd_check_deps",
    "cmd_interfaces",
    "cmd_show_state",
]
