"""Shared fixtures for mnctl unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple

import pytest

from mnctl.plugins.coins import CoinDescriptor, CoinPlugin


class FakeCoin(CoinPlugin):
    """Coin plugin that records the commands it receives."""

    def __init__(
        self,
        name: str = "fake",
        home: Optional[Path] = None,
        getinfo: Optional[Callable[[Mapping[str, Any]], Any]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        home = home or Path("/nonexistent-mnctl-home")
        self._descriptor = CoinDescriptor(
            name=name,
            port=12000,
            rpc_port=12001,
            daemon_bin="faked",
            status_bin="fake-cli",
            config_file="fake.conf",
            default_wallet_path=home / "wallet",
            default_bin_subpath=Path("fake-1.0/bin"),
            default_data_path=home / "data",
        )
        self._getinfo = getinfo
        self.calls: List[Tuple[str, dict]] = []

    @property
    def descriptor(self) -> CoinDescriptor:
        return self._descriptor

    def info(self, options):
        self.calls.append(("info", dict(options)))
        self.print_info()

    def download(self, options):
        self.calls.append(("download", dict(options)))

    def bootstrap(self, options):
        self.calls.append(("bootstrap", dict(options)))

    def configure(self, options):
        self.calls.append(("configure", dict(options)))

    def getinfo(self, options):
        self.calls.append(("getinfo", dict(options)))
        if self._getinfo is not None:
            return self._getinfo(options)
        return {"blocks": 1}


@pytest.fixture
def fake_coin_class():
    return FakeCoin


@pytest.fixture
def fake_coin(tmp_path: Path) -> FakeCoin:
    return FakeCoin(home=tmp_path)
