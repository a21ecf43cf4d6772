"""Daemon supervision: start check, optional auto-start, heartbeat polling."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Optional

from mnctl.config.models import DEFAULT_REFRESH_SECONDS
from mnctl.core.errors import DaemonNotRunningError, MnctlError
from mnctl.core.logging import get_logger
from mnctl.core.subprocess_runner import DaemonProcess
from mnctl.plugins.coins import PathOverrides
from mnctl.registry import CoinRegistry

LOGGER = get_logger(__name__)


class SupervisorState(str, Enum):
    """Lifecycle of a Supervisor."""

    INIT = "init"
    AWAITING_DAEMON = "awaiting_daemon"
    POLLING = "polling"
    ABORTED = "aborted"


class Supervisor:
    """Keeps an eye on one coin's daemon.

    `start()` probes the daemon once. If it is down, the supervisor either
    gives up (DaemonNotRunningError) or, with `auto_start`, launches it. It
    then polls `getinfo` every `interval` seconds until cancelled. Polls are
    synchronous, so they never overlap.

    If the supervisor launched the daemon itself and the daemon never
    answered a poll, the child is terminated when polling ends.
    """

    def __init__(
        self,
        registry: CoinRegistry,
        coin: str,
        *,
        interval: float = DEFAULT_REFRESH_SECONDS,
        auto_start: bool = False,
        overrides: Optional[PathOverrides] = None,
        cancel_event: Optional[threading.Event] = None,
        max_ticks: Optional[int] = None,
    ) -> None:
        if not 0 < interval <= threading.TIMEOUT_MAX:
            raise ValueError(
                f"Polling interval must be between 0 and {threading.TIMEOUT_MAX:g}s, got {interval}"
            )
        self.registry = registry
        self.coin = coin
        self.interval = interval
        self.auto_start = auto_start
        self.overrides = overrides
        self.max_ticks = max_ticks
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()

        self.state = SupervisorState.INIT
        self.heartbeats = 0
        self.failures = 0
        self.daemon: Optional[DaemonProcess] = None
        self._daemon_answered = False
        self._last_error: Optional[MnctlError] = None

    def stop(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def _probe(self) -> bool:
        try:
            self.registry.dispatch(self.coin, "getinfo", {"quiet": True}, self.overrides)
        except MnctlError as e:
            LOGGER.debug(f"getinfo failed for {self.coin}: {e}")
            self._last_error = e
            return False
        return True

    def start(self) -> None:
        """Check the daemon, start it if allowed, then poll until cancelled.

        Raises:
            DaemonNotRunningError: The daemon is down and auto-start is off.
            DaemonStartFailedError: The daemon could not be launched.
        """
        self.state = SupervisorState.INIT
        self._last_error = None

        if self._probe():
            LOGGER.info(f"{self.coin} daemon is running")
            self._daemon_answered = True
        elif not self.auto_start:
            self.state = SupervisorState.ABORTED
            raise DaemonNotRunningError(
                f"{self.coin} daemon is not running ({self._last_error}), "
                "use monitor --start to launch it"
            )
        else:
            self.state = SupervisorState.AWAITING_DAEMON
            LOGGER.warning(f"{self.coin} daemon is not running, starting it")
            plugin = self.registry.refresh(self.coin, self.overrides)
            try:
                self.daemon = plugin.start_daemon()
            except MnctlError:
                self.state = SupervisorState.ABORTED
                raise

        self.state = SupervisorState.POLLING
        self.run()

    def run(self) -> None:
        """Poll until cancelled or `max_ticks` polls have been made."""
        ticks = 0
        try:
            while not self.cancel_event.is_set():
                if self.max_ticks is not None and ticks >= self.max_ticks:
                    break
                if self.cancel_event.wait(self.interval):
                    break
                ticks += 1
                self.tick()
        finally:
            self._release_daemon()

    def tick(self) -> bool:
        """Poll the daemon once."""
        if self._probe():
            self.heartbeats += 1
            self._daemon_answered = True
            LOGGER.info(f"{self.coin} heartbeat #{self.heartbeats}")
            return True
        self.failures += 1
        LOGGER.warning(f"{self.coin} daemon down? ({self._last_error})")
        return False

    def _release_daemon(self) -> None:
        if self.daemon is None or self._daemon_answered:
            return
        if self.daemon.running:
            LOGGER.warning(f"{self.coin} daemon never answered, stopping it")
            self.daemon.terminate()
