"""Tests for the monitor command."""

from __future__ import annotations

import logging
import signal
from argparse import Namespace
from pathlib import Path

import pytest

from mnctl.bootstrap.paths import MnctlPaths
from mnctl.cli.commands.monitor import MonitorCommand
from mnctl.config.loader import ConfigError
from mnctl.config.models import MnctlSettings, MonitorSettings
from mnctl.core.errors import (
    DaemonNotRunningError,
    TransportUnavailableError,
    UnknownCoinError,
)
from mnctl.registry import CoinRegistry


def _registry(coin) -> CoinRegistry:
    registry = CoinRegistry()
    registry.register(coin)
    return registry


def _down(options):
    raise TransportUnavailableError("connection refused")


class TestMonitorCommand:
    """Tests for MonitorCommand.execute."""

    def test_polls_and_logs_heartbeats(self, fake_coin, tmp_path: Path, capsys) -> None:
        paths = MnctlPaths(tmp_path / "home")
        command = MonitorCommand(_registry(fake_coin), paths=paths, max_ticks=2)
        root_handlers = list(logging.getLogger().handlers)
        sigint = signal.getsignal(signal.SIGINT)

        result = command.execute(
            Namespace(refresh="0.01", start=None), MnctlSettings(coin="fake")
        )

        assert result == 0
        log_text = paths.monitor_log("fake").read_text(encoding="utf-8")
        assert "fake heartbeat #2" in log_text
        assert paths.config_dir.is_dir()
        assert "after 2 heartbeat(s)" in capsys.readouterr().out
        assert logging.getLogger().handlers == root_handlers
        assert signal.getsignal(signal.SIGINT) is sigint

    def test_invalid_refresh(self, fake_coin, tmp_path: Path) -> None:
        command = MonitorCommand(_registry(fake_coin), paths=MnctlPaths(tmp_path))

        with pytest.raises(ConfigError):
            command.execute(Namespace(refresh="soon", start=None), MnctlSettings(coin="fake"))

    @pytest.mark.parametrize("refresh", ["inf", "nan", "1e12"])
    def test_unusable_refresh(self, fake_coin, tmp_path: Path, refresh) -> None:
        command = MonitorCommand(_registry(fake_coin), paths=MnctlPaths(tmp_path))

        with pytest.raises(ConfigError):
            command.execute(Namespace(refresh=refresh, start=None), MnctlSettings(coin="fake"))

    def test_unknown_coin_leaves_no_log(self, fake_coin, tmp_path: Path) -> None:
        paths = MnctlPaths(tmp_path / "home")
        command = MonitorCommand(_registry(fake_coin), paths=paths)

        with pytest.raises(UnknownCoinError):
            command.execute(Namespace(refresh=None, start=None), MnctlSettings(coin="doge"))

        assert not paths.logs_dir.exists()

    def test_down_daemon_without_start(self, fake_coin_class, tmp_path: Path) -> None:
        command = MonitorCommand(
            _registry(fake_coin_class(getinfo=_down)), paths=MnctlPaths(tmp_path)
        )
        root_handlers = list(logging.getLogger().handlers)

        with pytest.raises(DaemonNotRunningError):
            command.execute(Namespace(refresh="1", start=False), MnctlSettings(coin="fake"))

        assert logging.getLogger().handlers == root_handlers

    def test_start_flag_overrides_settings(self, fake_coin_class, tmp_path: Path) -> None:
        coin = fake_coin_class(getinfo=_down)
        command = MonitorCommand(_registry(coin), paths=MnctlPaths(tmp_path), max_ticks=1)
        settings = MnctlSettings(coin="fake", monitor=MonitorSettings(start=True))

        with pytest.raises(DaemonNotRunningError):
            command.execute(Namespace(refresh="1", start=False), settings)
