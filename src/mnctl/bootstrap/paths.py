"""Path management for mnctl.

Two concerns live here:

- The ~/.mnctl tool home (settings file and monitor logs).
- Per-coin path resolution: a coin's wallet root, binary directory, daemon
  and status binaries, data directory and config file, computed from the
  coin's defaults and optional user overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional, Union

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".mnctl"

# Environment variable to override home directory
MNCTL_HOME_ENV = "MNCTL_HOME"

PathLike = Union[str, Path]


def get_mnctl_home() -> Path:
    """Get the mnctl home directory path.

    Resolution order:
    1. MNCTL_HOME environment variable (if set)
    2. ~/.mnctl (default)

    Returns:
        Path to the mnctl home directory.
    """
    env_home = os.environ.get(MNCTL_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass
class MnctlPaths:
    """Manages paths within the mnctl home directory.

    Directory structure:
        ~/.mnctl/
            config/config.yml   - Tool settings
            logs/               - Monitor logs
    """

    home: Path

    _CONFIG_DIR: ClassVar[str] = "config"
    _LOGS_DIR: ClassVar[str] = "logs"
    _SETTINGS_FILE: ClassVar[str] = "config.yml"

    @classmethod
    def default(cls) -> "MnctlPaths":
        """Create paths from the default mnctl home."""
        return cls(get_mnctl_home())

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        return self.home / self._LOGS_DIR

    @property
    def settings_file(self) -> Path:
        """Path to the global settings file."""
        return self.config_dir / self._SETTINGS_FILE

    def monitor_log(self, coin_name: str) -> Path:
        """Log file written by the monitor for a coin."""
        return self.logs_dir / f"monitor-{coin_name}.log"

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for directory in (self.home, self.config_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)


def dir_exists(path: Path) -> bool:
    """True if `path` exists and is a directory."""
    try:
        return path.is_dir()
    except OSError:
        return False


def file_exists(path: Path) -> bool:
    """True if `path` exists and is not a directory."""
    try:
        return path.exists() and not path.is_dir()
    except OSError:
        return False


def _effective(override: Optional[PathLike], default: PathLike) -> Path:
    if override is not None and str(override) != "":
        return Path(override).expanduser()
    return Path(default).expanduser()


@dataclass
class ResolvedPaths:
    """Run-time paths for a coin, each with an existence flag.

    Recomputed on every dispatched command; never partially updated.
    """

    wallet_path: Optional[Path] = None
    wallet_path_exists: bool = False
    bin_path: Optional[Path] = None
    bin_path_exists: bool = False
    daemon_bin_path: Optional[Path] = None
    daemon_bin_exists: bool = False
    status_bin_path: Optional[Path] = None
    status_bin_exists: bool = False
    data_path: Optional[Path] = None
    data_path_exists: bool = False
    config_file_path: Optional[Path] = None
    config_file_exists: bool = False

    @property
    def is_resolved(self) -> bool:
        return self.wallet_path is not None

    @property
    def wallet_installed(self) -> bool:
        """True when every wallet path the coin needs is on disk."""
        return (
            self.wallet_path_exists
            and self.bin_path_exists
            and self.daemon_bin_exists
            and self.status_bin_exists
        )


def resolve_paths(
    *,
    default_wallet_path: PathLike,
    default_bin_subpath: PathLike,
    default_data_path: PathLike,
    daemon_bin: str,
    status_bin: str,
    config_file: str,
    wallet: Optional[PathLike] = None,
    bins: Optional[PathLike] = None,
    data: Optional[PathLike] = None,
) -> ResolvedPaths:
    """Resolve a coin's run-time paths.

    A non-empty override always wins over the coin default; an empty or
    missing override means "use the default". Missing paths are reported as
    absent, never raised.

    Args:
        default_wallet_path: Coin default base directory for the wallet.
        default_bin_subpath: Coin default binary directory, relative to the
            wallet base.
        default_data_path: Coin default data directory.
        daemon_bin: Daemon executable name.
        status_bin: Status/CLI executable name.
        config_file: Config file name inside the data directory.
        wallet: Override for the wallet base directory.
        bins: Override for the binary subpath.
        data: Override for the data directory.

    Returns:
        Fully populated ResolvedPaths.
    """
    wallet_path = _effective(wallet, default_wallet_path)
    bin_subpath = bins if bins is not None and str(bins) != "" else default_bin_subpath
    bin_path = wallet_path / Path(bin_subpath)
    daemon_bin_path = bin_path / daemon_bin
    status_bin_path = bin_path / status_bin

    data_path = _effective(data, default_data_path)
    config_file_path = data_path / config_file

    return ResolvedPaths(
        wallet_path=wallet_path,
        wallet_path_exists=dir_exists(wallet_path),
        bin_path=bin_path,
        bin_path_exists=dir_exists(bin_path),
        daemon_bin_path=daemon_bin_path,
        daemon_bin_exists=file_exists(daemon_bin_path),
        status_bin_path=status_bin_path,
        status_bin_exists=file_exists(status_bin_path),
        data_path=data_path,
        data_path_exists=dir_exists(data_path),
        config_file_path=config_file_path,
        config_file_exists=file_exists(config_file_path),
    )
