"""Tests for path management functionality."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from mnctl.bootstrap.paths import (
    DEFAULT_HOME_DIR_NAME,
    MnctlPaths,
    ResolvedPaths,
    get_mnctl_home,
    resolve_paths,
)


def _resolve(tmp_path: Path, **overrides) -> ResolvedPaths:
    return resolve_paths(
        default_wallet_path=tmp_path / "pivx",
        default_bin_subpath="pivx-2.2.1/bin",
        default_data_path=tmp_path / ".pivx",
        daemon_bin="pivxd",
        status_bin="pivx-cli",
        config_file="pivx.conf",
        **overrides,
    )


class TestGetMnctlHome:
    """Tests for get_mnctl_home function."""

    def test_returns_default_in_user_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=False):
            os.environ.pop("MNCTL_HOME", None)
            home = get_mnctl_home()
            assert home == tmp_path / DEFAULT_HOME_DIR_NAME

    def test_respects_mnctl_home_env_var(self, tmp_path: Path) -> None:
        custom_home = tmp_path / "custom-mnctl"
        with patch.dict(os.environ, {"MNCTL_HOME": str(custom_home)}):
            assert get_mnctl_home() == custom_home


class TestMnctlPaths:
    """Tests for MnctlPaths class."""

    def test_paths_from_home(self, tmp_path: Path) -> None:
        home = tmp_path / ".mnctl"
        paths = MnctlPaths(home)

        assert paths.config_dir == home / "config"
        assert paths.logs_dir == home / "logs"
        assert paths.settings_file == home / "config" / "config.yml"
        assert paths.monitor_log("pivx") == home / "logs" / "monitor-pivx.log"

    def test_ensure_directories_is_idempotent(self, tmp_path: Path) -> None:
        paths = MnctlPaths(tmp_path / ".mnctl")

        paths.ensure_directories()
        paths.ensure_directories()

        assert paths.config_dir.is_dir()
        assert paths.logs_dir.is_dir()


class TestResolvePaths:
    """Tests for per-coin path resolution."""

    def test_defaults_when_no_overrides(self, tmp_path: Path) -> None:
        paths = _resolve(tmp_path)

        assert paths.wallet_path == tmp_path / "pivx"
        assert paths.bin_path == tmp_path / "pivx" / "pivx-2.2.1" / "bin"
        assert paths.daemon_bin_path == paths.bin_path / "pivxd"
        assert paths.status_bin_path == paths.bin_path / "pivx-cli"
        assert paths.data_path == tmp_path / ".pivx"
        assert paths.config_file_path == tmp_path / ".pivx" / "pivx.conf"

    def test_missing_paths_are_reported_absent(self, tmp_path: Path) -> None:
        paths = _resolve(tmp_path)

        assert paths.is_resolved
        assert not paths.wallet_path_exists
        assert not paths.bin_path_exists
        assert not paths.daemon_bin_exists
        assert not paths.status_bin_exists
        assert not paths.data_path_exists
        assert not paths.config_file_exists
        assert not paths.wallet_installed

    def test_wallet_override_wins(self, tmp_path: Path) -> None:
        paths = _resolve(tmp_path, wallet=str(tmp_path / "custom"))

        assert paths.wallet_path == tmp_path / "custom"
        assert paths.bin_path == tmp_path / "custom" / "pivx-2.2.1" / "bin"
        assert paths.daemon_bin_path == tmp_path / "custom" / "pivx-2.2.1" / "bin" / "pivxd"

    def test_bins_override_wins(self, tmp_path: Path) -> None:
        paths = _resolve(tmp_path, bins="release/bin")

        assert paths.bin_path == tmp_path / "pivx" / "release" / "bin"
        assert paths.status_bin_path == tmp_path / "pivx" / "release" / "bin" / "pivx-cli"

    def test_data_override_wins(self, tmp_path: Path) -> None:
        paths = _resolve(tmp_path, data=str(tmp_path / "chain"))

        assert paths.data_path == tmp_path / "chain"
        assert paths.config_file_path == tmp_path / "chain" / "pivx.conf"

    def test_empty_overrides_mean_default(self, tmp_path: Path) -> None:
        assert _resolve(tmp_path, wallet="", bins="", data="") == _resolve(tmp_path)

    def test_tilde_in_override_is_expanded(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"HOME": str(tmp_path)}):
            paths = _resolve(tmp_path, wallet="~/wallets/pivx")

        assert paths.wallet_path == tmp_path / "wallets" / "pivx"

    def test_existence_flags_distinguish_dirs_and_files(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "pivx" / "pivx-2.2.1" / "bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "pivxd").write_text("#!/bin/sh\n")
        # A directory named like the status binary does not count as the binary
        (bin_dir / "pivx-cli").mkdir()
        (tmp_path / ".pivx").mkdir()
        (tmp_path / ".pivx" / "pivx.conf").write_text("server=1\n")

        paths = _resolve(tmp_path)

        assert paths.wallet_path_exists
        assert paths.bin_path_exists
        assert paths.daemon_bin_exists
        assert not paths.status_bin_exists
        assert paths.data_path_exists
        assert paths.config_file_exists
        assert not paths.wallet_installed

    def test_wallet_installed_when_all_wallet_paths_exist(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "pivx" / "pivx-2.2.1" / "bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "pivxd").write_text("")
        (bin_dir / "pivx-cli").write_text("")

        assert _resolve(tmp_path).wallet_installed

    def test_empty_resolved_paths_is_unresolved(self) -> None:
        assert not ResolvedPaths().is_resolved
