"""Binary validation for installed coin wallets."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)


class BinaryStatus(str, Enum):
    """Status of a wallet binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


def validate_binary(path: Optional[Path]) -> BinaryStatus:
    """Validate a single wallet binary.

    Args:
        path: Path to the binary (None when paths were never resolved).

    Returns:
        BinaryStatus indicating whether the binary is present and executable.
    """
    if path is None or not path.is_file():
        return BinaryStatus.MISSING

    if not os.access(path, os.X_OK):
        LOGGER.debug(f"{path} exists but is not executable")
        return BinaryStatus.NOT_EXECUTABLE

    return BinaryStatus.PRESENT
