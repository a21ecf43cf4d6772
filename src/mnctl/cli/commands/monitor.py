"""Monitor command implementation."""

from __future__ import annotations

import logging
import signal
import threading
from argparse import Namespace
from typing import Any, Dict, Optional

from mnctl.bootstrap.paths import MnctlPaths
from mnctl.cli.commands import Command
from mnctl.cli.commands.coin import path_overrides
from mnctl.cli.exit_codes import EXIT_SUCCESS
from mnctl.config.loader import ConfigError
from mnctl.config.models import MnctlSettings, parse_duration
from mnctl.core.logging import add_file_handler, get_logger
from mnctl.monitor import Supervisor
from mnctl.registry import CoinRegistry

LOGGER = get_logger(__name__)

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class MonitorCommand(Command):
    """Watches a coin daemon until interrupted."""

    def __init__(
        self,
        registry: CoinRegistry,
        paths: Optional[MnctlPaths] = None,
        cancel_event: Optional[threading.Event] = None,
        max_ticks: Optional[int] = None,
    ):
        self._registry = registry
        self._paths = paths
        self._cancel_event = cancel_event or threading.Event()
        self._max_ticks = max_ticks

    @property
    def name(self) -> str:
        return "monitor"

    def _interval(self, args: Namespace, settings: MnctlSettings) -> float:
        refresh = getattr(args, "refresh", None)
        if refresh is None:
            interval = settings.monitor.refresh
        else:
            try:
                interval = parse_duration(refresh)
            except ValueError as e:
                raise ConfigError(f"Invalid --refresh: {e}") from e
        # Event.wait overflows above this
        if interval > threading.TIMEOUT_MAX:
            raise ConfigError(f"Refresh interval too long: {interval:g}s")
        return interval

    def _install_signal_handlers(self) -> Dict[int, Any]:
        if threading.current_thread() is not threading.main_thread():
            return {}

        def handle(signum, frame):
            LOGGER.info(f"Received signal {signum}, stopping monitor")
            self._cancel_event.set()

        previous = {}
        for sig in _STOP_SIGNALS:
            previous[sig] = signal.signal(sig, handle)
        return previous

    def execute(self, args: Namespace, settings: Optional[MnctlSettings] = None) -> int:
        """Run the supervisor in the foreground until cancelled.

        Raises:
            ConfigError: --refresh is not a valid duration.
            SupervisorError: The daemon is down and cannot be started.
        """
        settings = settings or MnctlSettings()
        interval = self._interval(args, settings)
        start = getattr(args, "start", None)
        auto_start = settings.monitor.start if start is None else bool(start)

        # Validate the coin before touching the log directory
        self._registry.lookup(settings.coin)

        paths = self._paths or MnctlPaths.default()
        paths.ensure_directories()
        log_file = paths.monitor_log(settings.coin)
        root_level = logging.getLogger().level
        file_handler = add_file_handler(log_file)
        previous = self._install_signal_handlers()

        supervisor = Supervisor(
            self._registry,
            settings.coin,
            interval=interval,
            auto_start=auto_start,
            overrides=path_overrides(settings),
            cancel_event=self._cancel_event,
            max_ticks=self._max_ticks,
        )
        print(f"Monitoring {settings.coin} every {interval:g}s (log: {log_file})")
        try:
            supervisor.start()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
            logging.getLogger().removeHandler(file_handler)
            file_handler.close()
            logging.getLogger().setLevel(root_level)

        print(f"Stopped monitoring {settings.coin} after {supervisor.heartbeats} heartbeat(s)")
        return EXIT_SUCCESS
