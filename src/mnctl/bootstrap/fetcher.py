"""Artifact acquisition: download, verify, install.

Wallet bundles and bootstrap snapshots go through the same pipeline:

1. refuse if the destination is already installed,
2. stream the artifact to a private temporary file,
3. verify its SHA-256 when an expected digest is known,
4. extract it (tar.gz, zip) or place it as-is (none),
5. remove the temporary file no matter how the above ended.
"""

from __future__ import annotations

import hashlib
import os
import shutil
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional, Union
from urllib.parse import unquote, urlparse

from mnctl.bootstrap.archive import Compression, extract_archive
from mnctl.bootstrap.download import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_DOWNLOAD_TIMEOUT,
    ProgressCallback,
    download_file,
)
from mnctl.core.errors import AlreadyInstalledError, ChecksumMismatchError
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

_SUFFIXES = {
    Compression.TAR_GZ: ".tar.gz",
    Compression.ZIP: ".zip",
    Compression.NONE: "",
}


@dataclass(frozen=True)
class WalletArtifact:
    """A coin's downloadable wallet bundle.

    An empty sha256 disables checksum verification.
    """

    url: str
    compression: Compression = Compression.TAR_GZ
    sha256: str = ""
    version: str = ""

    def with_overrides(
        self,
        url: Optional[str] = None,
        compression: Optional[str] = None,
        sha256: Optional[str] = None,
    ) -> "WalletArtifact":
        """Return a copy with any non-empty override applied."""
        return replace(
            self,
            url=url or self.url,
            compression=Compression.parse(compression) if compression else self.compression,
            sha256=sha256 or self.sha256,
        )


@dataclass(frozen=True)
class BootstrapArtifact:
    """A coin's downloadable blockchain bootstrap snapshot."""

    url: str
    compression: Compression = Compression.ZIP

    def with_overrides(
        self,
        url: Optional[str] = None,
        compression: Optional[str] = None,
    ) -> "BootstrapArtifact":
        """Return a copy with any non-empty override applied."""
        return replace(
            self,
            url=url or self.url,
            compression=Compression.parse(compression) if compression else self.compression,
        )


def sha256_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Hex SHA-256 digest of a file, read in chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


def verify_checksum(path: Path, expected: str) -> None:
    """Compare a file's SHA-256 against an expected hex digest.

    Raises:
        ChecksumMismatchError: If the digests differ (case-insensitively).
    """
    actual = sha256_file(path)
    if actual.lower() != expected.strip().lower():
        raise ChecksumMismatchError(actual, expected)
    LOGGER.info(f"sha256 verified: {actual}")


def _remove_temp(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        LOGGER.warning(f"Unable to clean up temp file {path}: {e}")


def _artifact_filename(url: str) -> str:
    name = os.path.basename(unquote(urlparse(url).path))
    return name or "download"


def fetch_and_install(
    url: str,
    compression: Union[str, Compression],
    expected_hash: str,
    destination: Path,
    *,
    is_installed: Optional[Callable[[], bool]] = None,
    progress: Optional[ProgressCallback] = None,
    timeout: Optional[float] = DEFAULT_DOWNLOAD_TIMEOUT,
) -> Path:
    """Download an artifact and install it into destination.

    Args:
        url: Where to download the artifact from.
        compression: How the artifact is packed (none, tar.gz, zip).
        expected_hash: Expected SHA-256 hex digest; empty skips verification.
        destination: Directory to extract (or place) the artifact into.
        is_installed: Existence check; when it returns True nothing is
            downloaded and AlreadyInstalledError is raised.
        progress: Optional download progress callback.
        timeout: Network timeout in seconds.

    Returns:
        The destination directory.

    Raises:
        AlreadyInstalledError: The destination is already populated.
        UnsupportedCompressionError: Unknown compression kind.
        FetchFailedError: The download failed.
        ChecksumMismatchError: The downloaded bytes did not verify.
        ExtractionFailedError: The archive could not be extracted.
    """
    if is_installed is not None and is_installed():
        raise AlreadyInstalledError(f"{destination} is already installed")

    kind = Compression.parse(compression)
    LOGGER.info(f"Fetching {url} into {destination}")

    fd, temp_name = tempfile.mkstemp(prefix="mnctl-", suffix=_SUFFIXES[kind])
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        download_file(url, temp_path, progress=progress, timeout=timeout)

        if expected_hash:
            verify_checksum(temp_path, expected_hash)
        else:
            LOGGER.debug("No expected sha256, skipping verification")

        if kind is Compression.NONE:
            destination.mkdir(parents=True, exist_ok=True)
            target = destination / _artifact_filename(url)
            LOGGER.info(f"No compression, installing {target} as-is")
            shutil.copyfile(temp_path, target)
        else:
            extract_archive(kind, temp_path, destination)
    finally:
        _remove_temp(temp_path)

    return destination


def install_wallet(
    artifact: WalletArtifact,
    destination: Path,
    *,
    is_installed: Optional[Callable[[], bool]] = None,
    progress: Optional[ProgressCallback] = None,
    timeout: Optional[float] = DEFAULT_DOWNLOAD_TIMEOUT,
) -> Path:
    """Download, verify and extract a wallet bundle."""
    return fetch_and_install(
        artifact.url,
        artifact.compression,
        artifact.sha256,
        destination,
        is_installed=is_installed,
        progress=progress,
        timeout=timeout,
    )


def install_bootstrap(
    artifact: BootstrapArtifact,
    destination: Path,
    *,
    is_installed: Optional[Callable[[], bool]] = None,
    progress: Optional[ProgressCallback] = None,
    timeout: Optional[float] = DEFAULT_DOWNLOAD_TIMEOUT,
) -> Path:
    """Download and extract a bootstrap snapshot (no checksum)."""
    return fetch_and_install(
        artifact.url,
        artifact.compression,
        "",
        destination,
        is_installed=is_installed,
        progress=progress,
        timeout=timeout,
    )
