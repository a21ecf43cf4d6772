"""Settings validation for mnctl.

Validates known settings keys and warns on unknown ones, suggesting the
closest valid key for likely typos.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_TOP_LEVEL_KEYS: Set[str] = {
    "coin",
    "wallet",
    "bins",
    "data",
    "monitor",
    "rpc",
    "download",
}

VALID_MONITOR_KEYS: Set[str] = {
    "start",
    "refresh",
}

VALID_RPC_KEYS: Set[str] = {
    "timeout",
}

VALID_DOWNLOAD_KEYS: Set[str] = {
    "timeout",
}

_SECTION_KEYS: Dict[str, Set[str]] = {
    "monitor": VALID_MONITOR_KEYS,
    "rpc": VALID_RPC_KEYS,
    "download": VALID_DOWNLOAD_KEYS,
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for settings."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationWarning]:
    """Validate a settings dictionary.

    Does not raise; unknown keys and mistyped sections become warnings.

    Args:
        data: Settings dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    for key, value in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            _warn(warnings, ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))
            continue

        valid_keys = _SECTION_KEYS.get(key)
        if valid_keys is None:
            continue
        if not isinstance(value, dict):
            _warn(warnings, ConfigValidationWarning(
                message=f"'{key}' must be a mapping, got {type(value).__name__}",
                source=source,
                key=key,
            ))
            continue
        for sub_key in value:
            if sub_key not in valid_keys:
                _warn(warnings, ConfigValidationWarning(
                    message=f"Unknown key '{sub_key}' in '{key}'",
                    source=source,
                    key=f"{key}.{sub_key}",
                    suggestion=_suggest_key(sub_key, valid_keys),
                ))

    return warnings


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Closest matching valid key, or None if no good match."""
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _warn(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
