"""Configuration for mnctl.

- Tool settings: YAML, loaded by `load_settings`
- Coin daemon `.conf` files: `load_conf_file` / `write_conf_file`
"""

from mnctl.config.conf_file import load_conf_file, random_hex, write_conf_file
from mnctl.config.loader import ConfigError, load_settings
from mnctl.config.models import MnctlSettings, MonitorSettings, parse_duration

__all__ = [
    "load_conf_file",
    "random_hex",
    "write_conf_file",
    "ConfigError",
    "load_settings",
    "MnctlSettings",
    "MonitorSettings",
    "parse_duration",
]
