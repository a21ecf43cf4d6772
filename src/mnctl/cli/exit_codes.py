"""Exit codes for the mnctl CLI.

- 0: Success
- 1: Unexpected mnctl error
- 2: Daemon error (RPC failure, daemon not running or not startable)
- 3: Invalid usage (bad arguments, unknown coin or command, bad settings)
- 4: Acquisition failure (wallet or bootstrap download/verify/extract)
"""

from __future__ import annotations

from mnctl.config.loader import ConfigError
from mnctl.core.errors import (
    AcquisitionError,
    ConfigureError,
    MnctlError,
    RegistryError,
    RPCError,
    SupervisorError,
)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_DAEMON_ERROR = 2
EXIT_INVALID_USAGE = 3
EXIT_ACQUISITION_FAILURE = 4


def exit_code_for(error: MnctlError) -> int:
    """Map an error to the exit code of its family."""
    if isinstance(error, (RegistryError, ConfigureError, ConfigError)):
        return EXIT_INVALID_USAGE
    if isinstance(error, AcquisitionError):
        return EXIT_ACQUISITION_FAILURE
    if isinstance(error, (RPCError, SupervisorError)):
        return EXIT_DAEMON_ERROR
    return EXIT_FAILURE
