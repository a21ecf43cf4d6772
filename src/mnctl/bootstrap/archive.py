"""Archive extraction for wallet bundles and bootstrap snapshots.

Supports gzip-compressed tarballs and zip files. Entries are written one by
one so stored permission bits survive, and any entry that would land outside
the destination directory aborts the extraction.
"""

from __future__ import annotations

import shutil
import stat
import tarfile
import zipfile
import zlib
from enum import Enum
from pathlib import Path
from typing import Union

from mnctl.core.errors import ExtractionFailedError, UnsupportedCompressionError
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_FILE_MODE = 0o644
DIR_MODE = 0o755


class Compression(str, Enum):
    """Compression kind of a downloadable artifact."""

    NONE = "none"
    TAR_GZ = "tar.gz"
    ZIP = "zip"

    @classmethod
    def parse(cls, value: Union[str, "Compression", None]) -> "Compression":
        """Parse a compression kind, case-insensitively.

        Raises:
            UnsupportedCompressionError: For anything that is not a known kind.
        """
        if isinstance(value, Compression):
            return value
        normalized = (value or "").strip().lower()
        kind = _ALIASES.get(normalized)
        if kind is None:
            raise UnsupportedCompressionError(str(value))
        return kind


_ALIASES = {
    "": Compression.NONE,
    "none": Compression.NONE,
    "tar.gz": Compression.TAR_GZ,
    "tar-gzip": Compression.TAR_GZ,
    "tgz": Compression.TAR_GZ,
    "zip": Compression.ZIP,
}


def _safe_target(dest_dir: Path, name: str) -> Path:
    target = (dest_dir / name).resolve()
    if not target.is_relative_to(dest_dir.resolve()):
        raise ExtractionFailedError(f"Path traversal detected: {name}")
    return target


def extract_tar_gzip(archive_path: Path, dest_dir: Path) -> int:
    """Extract a .tar.gz archive into dest_dir.

    Directories are recreated, regular files are written with their stored
    permission bits, and every other entry type is ignored.

    Returns:
        Number of regular files written.
    """
    LOGGER.info(f"Extracting .tar.gz file into {dest_dir}")
    dest_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    try:
        # Stream mode: decompress and read sequentially, no seeking.
        with tarfile.open(archive_path, "r|gz") as tar:
            for member in tar:
                target = _safe_target(dest_dir, member.name)
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isreg():
                    target.parent.mkdir(parents=True, exist_ok=True)
                    source = tar.extractfile(member)
                    if source is None:
                        continue
                    with source, open(target, "wb") as out:
                        shutil.copyfileobj(source, out)
                    target.chmod(stat.S_IMODE(member.mode))
                    written += 1
                else:
                    LOGGER.debug(f"Skipping unsupported tar entry: {member.name}")
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ExtractionFailedError(f"Failed to extract {archive_path}: {e}") from e
    return written


def _zip_mode(info: zipfile.ZipInfo) -> int:
    mode = stat.S_IMODE(info.external_attr >> 16)
    return mode or DEFAULT_FILE_MODE


def extract_zip(archive_path: Path, dest_dir: Path) -> int:
    """Extract a .zip archive into dest_dir, keeping permission bits.

    Returns:
        Number of regular files written.
    """
    LOGGER.info(f"Extracting .zip file into {dest_dir}")
    dest_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            for info in zf.infolist():
                target = _safe_target(dest_dir, info.filename)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as source, open(target, "wb") as out:
                    shutil.copyfileobj(source, out)
                target.chmod(_zip_mode(info))
                written += 1
    except (zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
        raise ExtractionFailedError(f"Failed to extract {archive_path}: {e}") from e
    return written


def extract_archive(
    compression: Union[str, Compression],
    archive_path: Path,
    dest_dir: Path,
) -> int:
    """Extract archive_path into dest_dir according to its compression kind.

    `none` performs no extraction and returns 0.

    Raises:
        UnsupportedCompressionError: Unknown compression kind.
        ExtractionFailedError: The archive is corrupt or unsafe.
    """
    kind = Compression.parse(compression)
    if kind is Compression.TAR_GZ:
        return extract_tar_gzip(archive_path, dest_dir)
    if kind is Compression.ZIP:
        return extract_zip(archive_path, dest_dir)
    LOGGER.info("No compression type specified, nothing to extract")
    return 0
