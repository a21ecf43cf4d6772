from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TextIO

from mnctl.bootstrap.download import DEFAULT_DOWNLOAD_TIMEOUT, ProgressCallback, ProgressReporter
from mnctl.bootstrap.fetcher import (
    BootstrapArtifact,
    WalletArtifact,
    install_bootstrap,
    install_wallet,
)
from mnctl.bootstrap.paths import ResolvedPaths, resolve_paths
from mnctl.bootstrap.platform import get_platform_info
from mnctl.bootstrap.validation import BinaryStatus, validate_binary
from mnctl.config.conf_file import load_conf_file
from mnctl.core.errors import AlreadyInstalledError, DaemonStartFailedError, FetchFailedError
from mnctl.core.logging import get_logger
from mnctl.core.subprocess_runner import DaemonProcess, start_daemon
from mnctl.rpc.client import DEFAULT_RPC_TIMEOUT, RPCClient, RPCResponse

LOGGER = get_logger(__name__)

# Commands every coin must implement, in display order
REQUIRED_HOOKS = ("info", "download", "bootstrap", "configure", "getinfo")

_OK = "[     OK ]"
_MISSING = "[ MISSING ]"


@dataclass(frozen=True)
class CoinDescriptor:
    """Static description of a coin.

    Attributes:
        name: Unique registry key, lower case (e.g. 'pivx').
        port: Peer-to-peer port.
        rpc_port: JSON-RPC port.
        daemon_bin: Daemon executable name.
        status_bin: Status/CLI executable name.
        config_file: Name of the daemon's .conf file inside the data dir.
        default_wallet_path: Base directory the wallet bundle unpacks into.
        default_bin_subpath: Binary directory relative to the wallet base.
        default_data_path: Daemon data directory.
        wallet_artifacts: Wallet bundles keyed by platform ("linux-amd64").
        bootstrap_artifact: Blockchain snapshot, if the coin publishes one.
    """

    name: str
    port: int
    rpc_port: int
    daemon_bin: str
    status_bin: str
    config_file: str
    default_wallet_path: Path
    default_bin_subpath: Path
    default_data_path: Path
    wallet_artifacts: Mapping[str, WalletArtifact] = field(default_factory=dict)
    bootstrap_artifact: Optional[BootstrapArtifact] = None

    def wallet_artifact(self, platform_key: str) -> Optional[WalletArtifact]:
        return self.wallet_artifacts.get(platform_key)


@dataclass(frozen=True)
class PathOverrides:
    """User overrides for a coin's paths; empty means "use the default"."""

    wallet: str = ""
    bins: str = ""
    data: str = ""


@dataclass
class CoinState:
    """Paths and loaded .conf values, replaced as a whole on each dispatch."""

    paths: ResolvedPaths = field(default_factory=ResolvedPaths)
    config: Dict[str, str] = field(default_factory=dict)


class CoinPlugin(ABC):
    """Base class for all coin plugins.

    A coin plugin describes one masternode coin (where its wallet lives, where
    to download it, how to configure and query its daemon) and implements the
    coin commands. The registry refreshes `state` before every command, so
    hooks can rely on it describing the current filesystem.
    """

    def __init__(
        self,
        *,
        rpc_timeout: float = DEFAULT_RPC_TIMEOUT,
        download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        progress: Optional[ProgressCallback] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.state = CoinState()
        self.rpc_timeout = rpc_timeout
        self.download_timeout = download_timeout
        self._progress = progress
        self._output = output

    @property
    @abstractmethod
    def descriptor(self) -> CoinDescriptor:
        """Static coin description."""

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    @property
    def progress(self) -> ProgressCallback:
        return self._progress if self._progress is not None else ProgressReporter(self.output)

    # Commands

    @abstractmethod
    def info(self, options: Mapping[str, Any]) -> Any:
        """Print resolved paths and wallet status."""

    @abstractmethod
    def download(self, options: Mapping[str, Any]) -> Any:
        """Download and install the wallet bundle."""

    @abstractmethod
    def bootstrap(self, options: Mapping[str, Any]) -> Any:
        """Download and install a blockchain snapshot into the data dir."""

    @abstractmethod
    def configure(self, options: Mapping[str, Any]) -> Any:
        """Write the daemon's .conf file."""

    @abstractmethod
    def getinfo(self, options: Mapping[str, Any]) -> Any:
        """Query the running daemon."""

    # State

    def update_state(self, overrides: Optional[PathOverrides] = None) -> CoinState:
        """Re-resolve paths and reload the .conf file."""
        overrides = overrides or PathOverrides()
        desc = self.descriptor
        paths = resolve_paths(
            default_wallet_path=desc.default_wallet_path,
            default_bin_subpath=desc.default_bin_subpath,
            default_data_path=desc.default_data_path,
            daemon_bin=desc.daemon_bin,
            status_bin=desc.status_bin,
            config_file=desc.config_file,
            wallet=overrides.wallet,
            bins=overrides.bins,
            data=overrides.data,
        )
        config: Dict[str, str] = {}
        if paths.config_file_exists and paths.config_file_path is not None:
            config = load_conf_file(paths.config_file_path)
        self.state = CoinState(paths=paths, config=config)
        return self.state

    # Helpers for coin implementations

    def _resolved_paths(self) -> ResolvedPaths:
        if not self.state.paths.is_resolved:
            self.update_state()
        return self.state.paths

    def echo(self, message: str = "") -> None:
        print(message, file=self.output)

    def print_info(self, prefix: str = "") -> None:
        """Print every resolved path with an OK/MISSING marker."""
        paths = self._resolved_paths()
        rows = [
            ("wallet path", paths.wallet_path, paths.wallet_path_exists),
            ("bin path", paths.bin_path, paths.bin_path_exists),
            ("daemon", paths.daemon_bin_path, paths.daemon_bin_exists),
            ("status", paths.status_bin_path, paths.status_bin_exists),
            ("data path", paths.data_path, paths.data_path_exists),
            ("config file", paths.config_file_path, paths.config_file_exists),
        ]
        for label, path, exists in rows:
            marker = _OK if exists else _MISSING
            self.echo(f"{prefix}{marker} {label:<12} {path}")

        for label, path in (("daemon", paths.daemon_bin_path), ("status", paths.status_bin_path)):
            if validate_binary(path) is BinaryStatus.NOT_EXECUTABLE:
                self.echo(f"{prefix}warning: {label} binary {path} is not executable")

    def download_wallet(
        self,
        url: Optional[str] = None,
        compression: Optional[str] = None,
        sha256: Optional[str] = None,
    ) -> Path:
        """Install the wallet bundle into the wallet path.

        The artifact is the descriptor's bundle for this platform, with any
        non-empty override applied. A URL override without a published
        bundle installs a tar.gz with no checksum unless told otherwise.

        Raises:
            AlreadyInstalledError: The wallet is already installed.
            FetchFailedError: No bundle for this platform and no URL given.
        """
        paths = self._resolved_paths()
        if paths.wallet_installed:
            raise AlreadyInstalledError(
                f"{self.name} wallet already installed at {paths.wallet_path}"
            )

        artifact = self._platform_wallet_artifact()
        if artifact is None:
            if not url:
                raise FetchFailedError(
                    f"No {self.name} wallet published for this platform, use --url"
                )
            artifact = WalletArtifact(url=url)
        artifact = artifact.with_overrides(url=url, compression=compression, sha256=sha256)

        self.echo(f"Downloading {self.name} wallet from {artifact.url}")
        install_wallet(
            artifact,
            paths.wallet_path,
            progress=self.progress,
            timeout=self.download_timeout,
        )
        self.echo(f"Installed {self.name} wallet into {paths.wallet_path}")
        return paths.wallet_path

    def _platform_wallet_artifact(self) -> Optional[WalletArtifact]:
        try:
            key = get_platform_info().key
        except ValueError as e:
            LOGGER.debug(f"Unsupported platform: {e}")
            return None
        return self.descriptor.wallet_artifact(key)

    def download_bootstrap(
        self,
        url: Optional[str] = None,
        compression: Optional[str] = None,
    ) -> Optional[Path]:
        """Install the blockchain snapshot into the data path.

        Returns:
            The data path, or None when the coin has nothing to install.

        Raises:
            AlreadyInstalledError: The data directory already exists.
        """
        paths = self._resolved_paths()
        if paths.data_path_exists:
            raise AlreadyInstalledError(
                f"{self.name} data directory already exists at {paths.data_path}"
            )

        artifact = self.descriptor.bootstrap_artifact
        if artifact is None:
            if not url:
                LOGGER.info(f"{self.name} publishes no bootstrap, nothing to do")
                self.echo(f"No bootstrap available for {self.name}")
                return None
            artifact = BootstrapArtifact(url=url)
        artifact = artifact.with_overrides(url=url, compression=compression)

        self.echo(f"Downloading {self.name} bootstrap from {artifact.url}")
        install_bootstrap(
            artifact,
            paths.data_path,
            progress=self.progress,
            timeout=self.download_timeout,
        )
        self.echo(f"Installed {self.name} bootstrap into {paths.data_path}")
        return paths.data_path

    def rpc_client(self) -> RPCClient:
        return RPCClient.from_config(
            self.state.config, self.descriptor.rpc_port, timeout=self.rpc_timeout
        )

    def rpc_call(self, method: str, params: Optional[List[Any]] = None) -> RPCResponse:
        """Call the daemon with credentials from the loaded .conf."""
        return self.rpc_client().call(method, params)

    def daemon_command(self) -> List[str]:
        """Command line that starts the daemon against the resolved data dir."""
        paths = self._resolved_paths()
        cmd = [str(paths.daemon_bin_path)]
        if paths.data_path is not None:
            cmd.append(f"-datadir={paths.data_path}")
        return cmd

    def start_daemon(self) -> DaemonProcess:
        """Launch the daemon in the background.

        Raises:
            DaemonStartFailedError: The daemon binary is missing or cannot run.
        """
        paths = self._resolved_paths()
        if not paths.daemon_bin_exists:
            raise DaemonStartFailedError(
                f"{self.name} daemon not found at {paths.daemon_bin_path}, run download first"
            )
        return start_daemon(self.daemon_command(), name=self.descriptor.daemon_bin)
