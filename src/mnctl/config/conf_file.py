"""Reading and writing coin daemon `.conf` files.

The format is plain UTF-8 text: a generated header comment block followed by
one `key=value` line per entry. Blank lines and `#`-prefixed lines are
ignored when reading, so keys written with a leading `#` (for example
`#masternode`) are present in the file but commented out for the daemon.
"""

from __future__ import annotations

import secrets
from datetime import datetime
from pathlib import Path
from typing import Dict, Mapping

from mnctl import __version__ as MNCTL_VERSION
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

CONF_FILE_MODE = 0o644

_WARNING_LINE = "# Warning: This is an auto-generated file! Do not hand-edit!"


def random_hex(size: int) -> str:
    """Random hex string encoding `size` random bytes."""
    return secrets.token_hex(size)


def render_conf(mapping: Mapping[str, str], *, generated_at: datetime | None = None) -> str:
    """Render a mapping as `.conf` text with the generated header."""
    stamp = (generated_at or datetime.now()).isoformat(sep=" ", timespec="seconds")
    lines = [
        _WARNING_LINE,
        f"#   Generated using mnctl version {MNCTL_VERSION} on {stamp}",
        _WARNING_LINE,
        "",
    ]
    lines.extend(f"{key}={value}" for key, value in mapping.items())
    lines.append("")
    return "\n".join(lines) + "\n"


def write_conf_file(path: Path, mapping: Mapping[str, str]) -> None:
    """Write `mapping` to `path`, in mapping order, replacing any existing file."""
    path.write_text(render_conf(mapping), encoding="utf-8")
    path.chmod(CONF_FILE_MODE)
    LOGGER.info(f"Wrote {len(mapping)} entries to {path}")


def parse_conf_text(text: str, *, keep_comment_keys: bool = False) -> Dict[str, str]:
    """Parse `.conf` text into an ordered key/value mapping.

    Args:
        text: File contents.
        keep_comment_keys: Keep `#key=value` lines as literal `#key` entries
            instead of skipping them. Header lines contain no `=` and are
            skipped either way.

    Returns:
        Ordered mapping; later duplicates win.
    """
    entries: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("#") and not keep_comment_keys:
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        entries[key.strip()] = value.strip()
    return entries


def load_conf_file(path: Path, *, keep_comment_keys: bool = False) -> Dict[str, str]:
    """Load a `.conf` file; a missing file yields an empty mapping."""
    if not path.is_file():
        return {}
    return parse_conf_text(path.read_text(encoding="utf-8"), keep_comment_keys=keep_comment_keys)
