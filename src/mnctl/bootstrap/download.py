"""Secure download utilities with SSL certificate handling.

Downloads are streamed to disk in chunks so large wallet bundles and
blockchain snapshots never sit in memory, with optional progress reporting.
SSL verification uses certifi's CA bundle so standalone builds work where the
system certificate store is unavailable.
"""

from __future__ import annotations

import http.client
import ssl
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import certifi

from mnctl import __version__ as MNCTL_VERSION
from mnctl.core.errors import FetchFailedError
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_DOWNLOAD_TIMEOUT = 60.0
DEFAULT_CHUNK_SIZE = 1024 * 1024

# Called with (bytes_read, total_bytes) after every chunk.
ProgressCallback = Callable[[int, int], None]


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def secure_urlopen(url: str, timeout: Optional[float] = 30.0):
    """Open a URL with proper SSL certificate verification.

    Args:
        url: The URL to open.
        timeout: Connection timeout in seconds.

    Returns:
        A file-like object for reading the response.

    Raises:
        URLError: If the URL cannot be opened.
        ValueError: If the URL is not HTTPS.
    """
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")

    request = Request(url, headers={"User-Agent": f"mnctl/{MNCTL_VERSION}"})
    return urlopen(request, timeout=timeout, context=get_ssl_context())  # nosec B310


class ProgressReporter:
    """Prints download progress on a single, rewritten console line."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._last = -1

    def __call__(self, count: int, total: int) -> None:
        percent = (count * 10000) // total
        if percent == self._last and count < total:
            return
        self._last = percent
        self._stream.write(
            f"{percent // 100:02d}.{percent % 100:02d}% Done -- {count}/{total}\r"
        )
        if count >= total:
            self._stream.write("\n")
        self._stream.flush()


def _content_length(response) -> Optional[int]:
    value = response.headers.get("Content-Length") if response.headers else None
    if not value:
        return None
    try:
        total = int(value)
    except ValueError:
        return None
    return total if total > 0 else None


def download_file(
    url: str,
    dest_path: Path,
    *,
    timeout: Optional[float] = DEFAULT_DOWNLOAD_TIMEOUT,
    progress: Optional[ProgressCallback] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Stream a URL to a file.

    Progress is reported only when the server announces the total size.

    Args:
        url: The URL to download from.
        dest_path: Path to save the downloaded file.
        timeout: Connection timeout in seconds.
        progress: Optional callback receiving (bytes_read, total_bytes).
        chunk_size: Read size for each chunk.

    Returns:
        Number of bytes written.

    Raises:
        FetchFailedError: On any unsuccessful network outcome.
    """
    LOGGER.info(f"Downloading {url}")
    count = 0
    total: Optional[int] = None
    try:
        with secure_urlopen(url, timeout=timeout) as response:
            total = _content_length(response)
            if total is None:
                LOGGER.debug("Server did not report a content length, progress disabled")
            with open(dest_path, "wb") as out:
                while True:
                    chunk = response.read(chunk_size)
                    if not chunk:
                        break
                    out.write(chunk)
                    count += len(chunk)
                    if progress is not None and total is not None:
                        progress(count, total)
    except HTTPError as e:
        raise FetchFailedError(f"Failed to download {url}: HTTP {e.code} - {e.reason}") from e
    except URLError as e:
        raise FetchFailedError(
            f"Failed to download {url}: {e.reason}. Check your network connection."
        ) from e
    except http.client.HTTPException as e:
        raise FetchFailedError(f"Failed to download {url}: {e!r}") from e
    except ValueError as e:
        raise FetchFailedError(str(e)) from e
    except OSError as e:
        raise FetchFailedError(f"Failed to download {url}: {e}") from e

    if total is not None and count < total:
        raise FetchFailedError(
            f"Failed to download {url}: received {count} of {total} bytes"
        )

    LOGGER.info(f"Downloaded {count} bytes to {dest_path}")
    return count
