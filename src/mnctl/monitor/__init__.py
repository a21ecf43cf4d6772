"""Daemon monitoring."""

from mnctl.monitor.supervisor import Supervisor, SupervisorState

__all__ = ["Supervisor", "SupervisorState"]
