"""Platform detection for coin wallet downloads.

Coin plugins publish wallet artifacts per platform; the OS and architecture
detected here select which one to fetch.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

# Supported operating systems (lowercase)
SUPPORTED_OS = frozenset({"darwin", "linux", "windows"})

# Supported architectures (normalized)
SUPPORTED_ARCH = frozenset({"amd64", "arm64", "i686", "armhf"})

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "i686",
    "i686": "i686",
    "x86": "i686",
    "armv7l": "armhf",
}


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        Lowercase OS name (darwin, linux, windows).

    Raises:
        ValueError: If the OS is not supported.
    """
    system = platform.system().lower()
    if system not in SUPPORTED_OS:
        raise ValueError(
            f"Unsupported operating system: {platform.system()}. "
            f"Supported: {', '.join(sorted(SUPPORTED_OS))}"
        )
    return system


def detect_arch() -> str:
    """Detect the current CPU architecture.

    Raises:
        ValueError: If the architecture is not supported.
    """
    machine = platform.machine()
    normalized = normalize_arch(machine)
    if normalized is None:
        raise ValueError(
            f"Unsupported architecture: {machine}. "
            f"Supported: {', '.join(sorted(SUPPORTED_ARCH))}"
        )
    return normalized


@dataclass(frozen=True)
class PlatformInfo:
    """Information about the current platform."""

    os: str
    arch: str

    @property
    def key(self) -> str:
        """Key used by coin plugins to index wallet artifacts.

        Example: "linux-amd64", "darwin-arm64"
        """
        return f"{self.os}-{self.arch}"


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information.

    Raises:
        ValueError: If the platform is not supported.
    """
    return PlatformInfo(os=detect_os(), arch=detect_arch())
