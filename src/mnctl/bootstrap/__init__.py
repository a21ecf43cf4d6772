"""
Bootstrap module for coin wallet and blockchain data management.

This module handles:
- Path resolution for a coin's wallet, binaries, data and config file
- Platform detection (OS + architecture) for wallet downloads
- Artifact acquisition: download, sha256 verification, extraction
- Wallet binary validation

Each coin plugin describes its own artifacts; the pipeline here is generic.
"""

from mnctl.bootstrap.archive import Compression, extract_archive
from mnctl.bootstrap.fetcher import (
    BootstrapArtifact,
    WalletArtifact,
    fetch_and_install,
    install_bootstrap,
    install_wallet,
)
from mnctl.bootstrap.paths import MnctlPaths, ResolvedPaths, get_mnctl_home, resolve_paths
from mnctl.bootstrap.platform import PlatformInfo, get_platform_info
from mnctl.bootstrap.validation import BinaryStatus, validate_binary

__all__ = [
    "Compression",
    "extract_archive",
    "BootstrapArtifact",
    "WalletArtifact",
    "fetch_and_install",
    "install_bootstrap",
    "install_wallet",
    "MnctlPaths",
    "ResolvedPaths",
    "get_mnctl_home",
    "resolve_paths",
    "PlatformInfo",
    "get_platform_info",
    "BinaryStatus",
    "validate_binary",
]
