"""Settings file loading and merging.

Handles loading settings from YAML files with:
- Global settings (~/.mnctl/config/config.yml) or a --config file
- Environment variable expansion (${VAR})
- CLI overrides taking precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from mnctl.bootstrap.paths import MnctlPaths
from mnctl.config.models import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_REFRESH_SECONDS,
    DEFAULT_RPC_TIMEOUT,
    MnctlSettings,
    MonitorSettings,
    parse_duration,
)
from mnctl.config.validation import validate_config
from mnctl.core.errors import MnctlError
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(MnctlError):
    """Settings loading or parsing error."""


def load_settings(
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    paths: Optional[MnctlPaths] = None,
) -> MnctlSettings:
    """Load settings with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom settings file (cli_config_path) OR global settings file
    3. Built-in defaults

    Args:
        cli_config_path: Optional path to a settings file (--config flag).
        cli_overrides: Dict of CLI flag overrides.
        paths: mnctl home paths (defaults to ~/.mnctl).

    Returns:
        Merged MnctlSettings instance.

    Raises:
        ConfigError: If the given settings file doesn't exist or can't be parsed.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    if cli_config_path is not None:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = merge_configs(merged, _load_layer(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom settings from {cli_config_path}")
    else:
        settings_file = (paths or MnctlPaths.default()).settings_file
        if settings_file.exists():
            merged = merge_configs(merged, _load_layer(settings_file))
            sources.append(f"global:{settings_file}")
            LOGGER.debug(f"Loaded global settings from {settings_file}")

    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")

    settings = dict_to_settings(merged)
    settings._sources = sources
    LOGGER.debug(f"Settings loaded from sources: {sources}")
    return settings


def _load_layer(path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    validate_config(data, source=str(path))
    return data


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML settings file, expanding environment variables.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f.read())

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in string values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dicts, with overlay taking precedence.

    Nested dicts are merged recursively; anything else is replaced.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def _seconds(value: Any, default: float, key: str) -> float:
    if value is None:
        return default
    try:
        return parse_duration(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}': {e}") from e


_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def _flag(value: Any, default: bool, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    # Strings come from quoted YAML or ${VAR} expansion
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ConfigError(f"Invalid value for '{key}': expected true or false, got {value!r}")


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def dict_to_settings(data: Dict[str, Any]) -> MnctlSettings:
    """Convert a merged settings dict to MnctlSettings.

    Raises:
        ConfigError: If a duration or true/false value cannot be parsed.
    """
    monitor_data = _section(data, "monitor")
    rpc_data = _section(data, "rpc")
    download_data = _section(data, "download")

    monitor = MonitorSettings(
        start=_flag(monitor_data.get("start"), False, "monitor.start"),
        refresh=_seconds(monitor_data.get("refresh"), DEFAULT_REFRESH_SECONDS, "monitor.refresh"),
    )

    return MnctlSettings(
        coin=str(data.get("coin") or "").lower(),
        wallet=str(data.get("wallet") or ""),
        bins=str(data.get("bins") or ""),
        data=str(data.get("data") or ""),
        monitor=monitor,
        rpc_timeout=_seconds(rpc_data.get("timeout"), DEFAULT_RPC_TIMEOUT, "rpc.timeout"),
        download_timeout=_seconds(
            download_data.get("timeout"), DEFAULT_DOWNLOAD_TIMEOUT, "download.timeout"
        ),
    )
