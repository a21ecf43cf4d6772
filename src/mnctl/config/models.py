"""Settings models for mnctl.

Settings come from ~/.mnctl/config/config.yml (or --config) and CLI flags:

    coin: pivx
    wallet: /opt/pivx
    data: /srv/pivx-data
    monitor:
      start: true
      refresh: 1m
    rpc:
      timeout: 10
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import List, Union

DEFAULT_REFRESH_SECONDS = 30.0
DEFAULT_RPC_TIMEOUT = 10.0
DEFAULT_DOWNLOAD_TIMEOUT = 60.0

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Union[str, int, float]) -> float:
    """Parse a duration into seconds.

    Accepts bare numbers (seconds) and unit strings such as "30s", "5m",
    "1h30m" or "500ms".

    Raises:
        ValueError: If the value is not a positive duration.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().lower()
        try:
            seconds = float(text)
        except ValueError:
            seconds = 0.0
            pos = 0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    raise ValueError(f"Invalid duration: {value!r}") from None
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos == 0 or pos != len(text):
                raise ValueError(f"Invalid duration: {value!r}") from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"Duration must be positive and finite: {value!r}")
    return seconds


@dataclass
class MonitorSettings:
    """Monitor loop settings."""

    start: bool = False
    refresh: float = DEFAULT_REFRESH_SECONDS


@dataclass
class MnctlSettings:
    """Effective mnctl settings.

    Empty path strings mean "use the coin's default".
    """

    coin: str = ""
    wallet: str = ""
    bins: str = ""
    data: str = ""
    monitor: MonitorSettings = field(default_factory=MonitorSettings)
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT

    # Where the settings were loaded from, for diagnostics
    _sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._sources)
