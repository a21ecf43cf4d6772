"""PIVX masternode coin plugin."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping

from mnctl.bootstrap.archive import Compression
from mnctl.bootstrap.fetcher import BootstrapArtifact, WalletArtifact
from mnctl.config.conf_file import random_hex, write_conf_file
from mnctl.core.errors import ConfigureError, RPCCallError
from mnctl.core.logging import get_logger
from mnctl.plugins.coins.base import CoinDescriptor, CoinPlugin

LOGGER = get_logger(__name__)

PIVX_VERSION = "2.2.1"
PIVX_RELEASES = f"https://github.com/PIVX-Project/PIVX/releases/download/v{PIVX_VERSION}"

# Daemon still loading the block index
RPC_IN_WARMUP = -28

PIVX_DESCRIPTOR = CoinDescriptor(
    name="pivx",
    port=51472,
    rpc_port=51473,
    daemon_bin="pivxd",
    status_bin="pivx-cli",
    config_file="pivx.conf",
    default_wallet_path=Path("~/pivx"),
    default_bin_subpath=Path(f"pivx-{PIVX_VERSION}/bin"),
    default_data_path=Path("~/.pivx"),
    wallet_artifacts={
        "linux-amd64": WalletArtifact(
            url=f"{PIVX_RELEASES}/pivx-{PIVX_VERSION}-x86_64-linux-gnu.tar.gz",
            compression=Compression.TAR_GZ,
            sha256="401e238e1989b2efdc6d2ac0af3944f1277b2807f79319ad1366248e870e8fcf",
            version=PIVX_VERSION,
        ),
    },
    bootstrap_artifact=BootstrapArtifact(
        url=f"{PIVX_RELEASES}/pivx-chain-721000-bootstrap.dat.zip",
        compression=Compression.ZIP,
    ),
)


class PIVXCoin(CoinPlugin):
    """PIVX (Private Instant Verified Transaction) masternodes."""

    @property
    def descriptor(self) -> CoinDescriptor:
        return PIVX_DESCRIPTOR

    def info(self, options: Mapping[str, Any]) -> None:
        desc = self.descriptor
        self.echo(f"Coin: {desc.name} (port {desc.port}, rpc {desc.rpc_port})")
        self.print_info("  ")

    def download(self, options: Mapping[str, Any]) -> Path:
        return self.download_wallet(
            url=options.get("url"),
            compression=options.get("compression"),
            sha256=options.get("sha256"),
        )

    def bootstrap(self, options: Mapping[str, Any]):
        return self.download_bootstrap(
            url=options.get("url"),
            compression=options.get("compression"),
        )

    def build_conf(self, ip: str, mnprivkey: str) -> Dict[str, str]:
        """The pivx.conf entries for a masternode at `ip`.

        The masternode lines stay commented out until the operator enables
        them.
        """
        return {
            "rpcuser": random_hex(32),
            "rpcpassword": random_hex(64),
            "rpcallowip": "127.0.0.1",
            "listen": "1",
            "server": "1",
            "daemon": "1",
            "#masternode": "1",
            "maxconnections": "256",
            "bind": "0.0.0.0",
            "externalip": ip,
            "masternodeaddr": f"{ip}:{self.descriptor.port}",
            "#masternodeprivkey": mnprivkey,
        }

    def configure(self, options: Mapping[str, Any]) -> Path:
        ip = (options.get("ip") or "").strip()
        mnprivkey = (options.get("mnprivkey") or "").strip()
        if not ip:
            raise ConfigureError("configure requires --ip")
        if not mnprivkey:
            raise ConfigureError("configure requires --mnprivkey")

        paths = self._resolved_paths()
        conf_path = paths.config_file_path
        if paths.config_file_exists:
            LOGGER.warning(f"Overwriting existing {conf_path}")

        conf_path.parent.mkdir(parents=True, exist_ok=True)
        write_conf_file(conf_path, self.build_conf(ip, mnprivkey))
        self.echo(f"Wrote {conf_path}")
        return conf_path

    def getinfo(self, options: Mapping[str, Any]) -> Any:
        response = self.rpc_call("getinfo")
        if response.error is not None:
            if response.error.code == RPC_IN_WARMUP:
                self.echo(f"{self.name} daemon is starting up: {response.error.message}")
                return None
            raise RPCCallError(response.error.code, response.error.message)

        if not options.get("quiet"):
            self.echo(f"GOT RESPONSE: {response.result}")
        return response.result
