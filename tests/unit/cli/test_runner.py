"""Tests for CLI runner."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mnctl.bootstrap.paths import MnctlPaths
from mnctl.cli import main
from mnctl.cli.exit_codes import (
    EXIT_ACQUISITION_FAILURE,
    EXIT_DAEMON_ERROR,
    EXIT_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from mnctl.cli.runner import CLIRunner, args_to_overrides, get_version
from mnctl.core.errors import (
    ConfigureError,
    FetchFailedError,
    MnctlError,
    RPCCallError,
)
from mnctl.registry import CoinRegistry


@pytest.fixture
def coin(fake_coin_class, tmp_path: Path):
    return fake_coin_class(home=tmp_path / "coin")


@pytest.fixture
def runner(coin, tmp_path: Path) -> CLIRunner:
    registry = CoinRegistry()
    registry.register(coin)
    return CLIRunner(registry=registry, paths=MnctlPaths(tmp_path / "home"))


class TestGetVersion:
    """Tests for get_version function."""

    def test_get_version_from_metadata(self) -> None:
        with patch("mnctl.cli.runner.version", return_value="1.2.3"):
            assert get_version() == "1.2.3"

    def test_get_version_fallback(self) -> None:
        from importlib.metadata import PackageNotFoundError

        from mnctl import __version__

        with patch("mnctl.cli.runner.version", side_effect=PackageNotFoundError("mnctl")):
            assert get_version() == __version__


class TestHelpAndVersion:
    """Tests for commands that need no coin."""

    def test_argparse_help(self, runner: CLIRunner, capsys) -> None:
        assert runner.run(["--help"]) == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()

    def test_bad_usage(self, runner: CLIRunner) -> None:
        assert runner.run(["--no-such-flag"]) == EXIT_INVALID_USAGE

    def test_unknown_command(self, runner: CLIRunner) -> None:
        assert runner.run(["explode"]) == EXIT_INVALID_USAGE

    @pytest.mark.parametrize("argv", [["--version"], ["version"]])
    def test_version(self, runner: CLIRunner, argv, capsys) -> None:
        with patch("mnctl.cli.runner.version", return_value="9.9.9"):
            result = CLIRunner(registry=CoinRegistry()).run(argv)

        assert result == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "9.9.9"

    @pytest.mark.parametrize("argv", [[], ["help"]])
    def test_manual(self, runner: CLIRunner, argv, capsys) -> None:
        assert runner.run(argv) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert out.startswith("mnctl ")
        assert "COMMANDS" in out


class TestList:
    """Tests for the list command."""

    def test_lists_registered_coins(self, runner: CLIRunner, capsys) -> None:
        assert runner.run(["list"]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "Registered coins:" in out
        assert "1. fake (daemon faked, rpc port 12001)" in out

    def test_empty_registry(self, tmp_path: Path, capsys) -> None:
        runner = CLIRunner(registry=CoinRegistry(), paths=MnctlPaths(tmp_path))

        assert runner.run(["list"]) == EXIT_SUCCESS
        assert "No coins registered!" in capsys.readouterr().out


class TestCoinCommands:
    """Tests for dispatching coin commands."""

    def test_coin_before_command(self, runner: CLIRunner, coin) -> None:
        assert runner.run(["--coin", "fake", "info"]) == EXIT_SUCCESS
        assert coin.calls[0] == ("info", {})

    def test_coin_after_command(self, runner: CLIRunner, coin) -> None:
        result = runner.run(
            ["configure", "--coin", "FAKE", "--ip", "203.0.113.7", "--mnpkey", "KEY"]
        )

        assert result == EXIT_SUCCESS
        assert coin.calls == [("configure", {"ip": "203.0.113.7", "mnprivkey": "KEY"})]

    def test_download_options(self, runner: CLIRunner, coin) -> None:
        runner.run(
            ["--coin", "fake", "download", "--url", "https://x/w.zip", "--type", "zip",
             "--shasum", "ab"]
        )

        assert coin.calls == [
            ("download", {"url": "https://x/w.zip", "compression": "zip", "sha256": "ab"})
        ]

    def test_path_overrides_reach_the_coin(
        self, runner: CLIRunner, coin, tmp_path: Path
    ) -> None:
        data = tmp_path / "elsewhere"

        runner.run(["getinfo", "--coin", "fake", "--data", str(data)])

        assert coin.state.paths.data_path == data

    def test_coin_from_settings_file(self, runner: CLIRunner, coin, tmp_path: Path) -> None:
        settings = tmp_path / "home" / "config" / "config.yml"
        settings.parent.mkdir(parents=True)
        settings.write_text("coin: fake\n", encoding="utf-8")

        assert runner.run(["getinfo"]) == EXIT_SUCCESS
        assert coin.calls[0][0] == "getinfo"

    def test_missing_coin(self, runner: CLIRunner, coin, capsys) -> None:
        assert runner.run(["info"]) == EXIT_INVALID_USAGE
        assert "needs a coin" in capsys.readouterr().err
        assert coin.calls == []

    def test_unknown_coin(self, runner: CLIRunner, capsys) -> None:
        assert runner.run(["--coin", "doge", "info"]) == EXIT_INVALID_USAGE
        assert "invalid coin specified (doge)" in capsys.readouterr().err

    def test_missing_config_file(self, runner: CLIRunner, tmp_path: Path) -> None:
        missing = tmp_path / "nope.yml"

        assert runner.run(["--config", str(missing), "list"]) == EXIT_INVALID_USAGE


class TestErrorExitCodes:
    """Tests for mapping coin command errors to exit codes."""

    @pytest.mark.parametrize(
        "command, error, expected",
        [
            ("configure", ConfigureError("configure requires --ip"), EXIT_INVALID_USAGE),
            ("download", FetchFailedError("HTTP 404"), EXIT_ACQUISITION_FAILURE),
            ("getinfo", RPCCallError(-1, "boom"), EXIT_DAEMON_ERROR),
            ("info", MnctlError("odd"), EXIT_FAILURE),
        ],
    )
    def test_exit_code(self, runner: CLIRunner, coin, command, error, expected, capsys) -> None:
        setattr(coin, command, MagicMock(side_effect=error))

        assert runner.run(["--coin", "fake", command]) == expected
        assert capsys.readouterr().err.startswith(f"Error: {error}")


class TestArgsToOverrides:
    """Tests for args_to_overrides."""

    def test_only_given_values(self, runner: CLIRunner) -> None:
        args = runner.parser.parse_args(["--coin", "pivx", "info", "--data", "/d"])

        assert args_to_overrides(args) == {"coin": "pivx", "data": "/d"}


class TestMain:
    """Tests for the console entry point."""

    def test_main_returns_exit_code(self, capsys) -> None:
        with patch("mnctl.cli.runner.version", return_value="0.0.1"):
            assert main(["--version"]) == EXIT_SUCCESS
        assert "0.0.1" in capsys.readouterr().out
