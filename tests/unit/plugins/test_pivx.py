"""Tests for the PIVX coin plugin."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import patch

import pytest

from mnctl.bootstrap.archive import Compression
from mnctl.config.conf_file import load_conf_file
from mnctl.core.errors import ConfigureError, RPCCallError
from mnctl.plugins.coins import PathOverrides, PIVXCoin
from mnctl.plugins.coins.pivx import PIVX_DESCRIPTOR
from mnctl.rpc.client import RPCErrorInfo, RPCResponse


@pytest.fixture
def pivx(tmp_path: Path) -> PIVXCoin:
    coin = PIVXCoin(output=io.StringIO())
    coin.update_state(
        PathOverrides(wallet=str(tmp_path / "pivx"), data=str(tmp_path / ".pivx"))
    )
    return coin


class TestDescriptor:
    """Tests for the PIVX descriptor."""

    def test_constants(self) -> None:
        desc = PIVX_DESCRIPTOR

        assert desc.name == "pivx"
        assert (desc.port, desc.rpc_port) == (51472, 51473)
        assert (desc.daemon_bin, desc.status_bin, desc.config_file) == (
            "pivxd",
            "pivx-cli",
            "pivx.conf",
        )
        assert desc.default_bin_subpath == Path("pivx-2.2.1/bin")

    def test_linux_wallet_artifact(self) -> None:
        artifact = PIVX_DESCRIPTOR.wallet_artifact("linux-amd64")

        assert artifact is not None
        assert artifact.url.endswith("pivx-2.2.1-x86_64-linux-gnu.tar.gz")
        assert artifact.compression is Compression.TAR_GZ
        assert artifact.sha256 == (
            "401e238e1989b2efdc6d2ac0af3944f1277b2807f79319ad1366248e870e8fcf"
        )
        assert PIVX_DESCRIPTOR.wallet_artifact("windows-amd64") is None

    def test_bootstrap_artifact(self) -> None:
        artifact = PIVX_DESCRIPTOR.bootstrap_artifact

        assert artifact is not None
        assert artifact.url.endswith("pivx-chain-721000-bootstrap.dat.zip")
        assert artifact.compression is Compression.ZIP


class TestConfigure:
    """Tests for the configure command."""

    def test_writes_masternode_conf(self, pivx: PIVXCoin, tmp_path: Path) -> None:
        conf_path = pivx.configure({"ip": "203.0.113.7", "mnprivkey": "KEY"})

        assert conf_path == tmp_path / ".pivx" / "pivx.conf"
        conf = load_conf_file(conf_path, keep_comment_keys=True)
        assert len(conf["rpcuser"]) == 64
        assert len(conf["rpcpassword"]) == 128
        assert conf["rpcallowip"] == "127.0.0.1"
        assert conf["listen"] == conf["server"] == conf["daemon"] == "1"
        assert conf["#masternode"] == "1"
        assert conf["maxconnections"] == "256"
        assert conf["bind"] == "0.0.0.0"
        assert conf["externalip"] == "203.0.113.7"
        assert conf["masternodeaddr"] == "203.0.113.7:51472"
        assert conf["#masternodeprivkey"] == "KEY"

    def test_masternode_lines_are_commented_for_the_daemon(self, pivx: PIVXCoin) -> None:
        conf_path = pivx.configure({"ip": "203.0.113.7", "mnprivkey": "KEY"})

        conf = load_conf_file(conf_path)

        assert "masternode" not in conf
        assert "#masternode" not in conf

    def test_credentials_differ_between_runs(self, pivx: PIVXCoin) -> None:
        first = pivx.build_conf("1.2.3.4", "KEY")
        second = pivx.build_conf("1.2.3.4", "KEY")

        assert first["rpcpassword"] != second["rpcpassword"]

    @pytest.mark.parametrize(
        "options",
        [{}, {"ip": "1.2.3.4"}, {"mnprivkey": "KEY"}, {"ip": " ", "mnprivkey": "KEY"}],
    )
    def test_requires_ip_and_key(self, pivx: PIVXCoin, options, tmp_path: Path) -> None:
        with pytest.raises(ConfigureError):
            pivx.configure(options)

        assert not (tmp_path / ".pivx").exists()


class TestGetinfo:
    """Tests for the getinfo command."""

    def test_prints_result(self, pivx: PIVXCoin) -> None:
        response = RPCResponse(id=1, result={"blocks": 721000})
        with patch.object(PIVXCoin, "rpc_call", return_value=response) as mock_call:
            result = pivx.getinfo({})

        mock_call.assert_called_once_with("getinfo")
        assert result == {"blocks": 721000}
        assert "GOT RESPONSE" in pivx.output.getvalue()

    def test_quiet_does_not_print(self, pivx: PIVXCoin) -> None:
        response = RPCResponse(id=1, result={"blocks": 1})
        with patch.object(PIVXCoin, "rpc_call", return_value=response):
            pivx.getinfo({"quiet": True})

        assert pivx.output.getvalue() == ""

    def test_warmup_is_a_notice(self, pivx: PIVXCoin) -> None:
        response = RPCResponse(id=1, error=RPCErrorInfo(-28, "Loading block index..."))
        with patch.object(PIVXCoin, "rpc_call", return_value=response):
            assert pivx.getinfo({}) is None

        assert "starting up" in pivx.output.getvalue()

    def test_other_errors_raise(self, pivx: PIVXCoin) -> None:
        response = RPCResponse(id=1, error=RPCErrorInfo(-32601, "Method not found"))
        with patch.object(PIVXCoin, "rpc_call", return_value=response):
            with pytest.raises(RPCCallError) as exc_info:
                pivx.getinfo({})

        assert exc_info.value.code == -32601


class TestDownloadAndBootstrap:
    """Tests for download/bootstrap option plumbing."""

    def test_download_passes_options(self, pivx: PIVXCoin) -> None:
        with patch.object(PIVXCoin, "download_wallet") as mock_download:
            pivx.download({"url": "https://mirror/p.tar.gz", "sha256": "ab"})

        mock_download.assert_called_once_with(
            url="https://mirror/p.tar.gz", compression=None, sha256="ab"
        )

    def test_bootstrap_passes_options(self, pivx: PIVXCoin) -> None:
        with patch.object(PIVXCoin, "download_bootstrap") as mock_bootstrap:
            pivx.bootstrap({"compression": "none"})

        mock_bootstrap.assert_called_once_with(url=None, compression="none")

    def test_info_prints_paths(self, pivx: PIVXCoin) -> None:
        pivx.info({})

        output = pivx.output.getvalue()
        assert "Coin: pivx (port 51472, rpc 51473)" in output
        assert "[ MISSING ] daemon" in output
