"""Exception hierarchy for mnctl.

Every error raised on purpose by mnctl derives from MnctlError so the CLI can
report it and pick an exit code by family:

- RegistryError: coin registration and command dispatch
- AcquisitionError: download, checksum verification and extraction
- RPCError: JSON-RPC transport to a coin daemon
- SupervisorError: daemon start and monitoring
"""

from __future__ import annotations

from typing import Iterable


class MnctlError(Exception):
    """Base class for all mnctl errors."""


# Registry


class RegistryError(MnctlError):
    """Error related to the coin registry."""


class DuplicateCoinError(RegistryError):
    """A coin with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"coin with name={name} already registered")
        self.name = name


class IncompleteHooksError(RegistryError):
    """A coin plugin does not implement every required command."""

    def __init__(self, name: str, missing: Iterable[str]) -> None:
        self.name = name
        self.missing = sorted(missing)
        super().__init__(
            f"{name} does not implement required command(s): {', '.join(self.missing)}"
        )


class UnknownCoinError(RegistryError):
    """The requested coin is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid coin specified ({name})")
        self.name = name


class UnknownCommandError(RegistryError):
    """The requested command is not a coin command."""

    def __init__(self, command: str) -> None:
        super().__init__(f"invalid command specified ({command})")
        self.command = command


# Acquisition


class AcquisitionError(MnctlError):
    """Error while acquiring a wallet or bootstrap artifact."""


class AlreadyInstalledError(AcquisitionError):
    """The destination already holds the artifact's contents."""


class FetchFailedError(AcquisitionError):
    """The artifact could not be downloaded."""


class ChecksumMismatchError(AcquisitionError):
    """The downloaded bytes do not match the expected SHA-256 digest."""

    def __init__(self, actual: str, expected: str) -> None:
        super().__init__(
            f"sha256 for download ({actual}) does not match expected ({expected})"
        )
        self.actual = actual
        self.expected = expected


class UnsupportedCompressionError(AcquisitionError):
    """The compression kind is not one mnctl can extract."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"unsupported compression type ({kind})")
        self.kind = kind


class ExtractionFailedError(AcquisitionError):
    """The archive could not be extracted."""


# RPC


class RPCError(MnctlError):
    """Error talking to a coin daemon over JSON-RPC."""


class TransportUnavailableError(RPCError):
    """The daemon's RPC endpoint could not be reached."""


class AuthorizationFailedError(RPCError):
    """The daemon rejected the RPC credentials."""


class NoResponseError(RPCError):
    """The daemon returned an empty or unparseable body."""


class RPCCallError(RPCError):
    """The daemon answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"RPC error ({code}) : {message}")
        self.code = code
        self.message = message


# Supervisor


class SupervisorError(MnctlError):
    """Error while starting or monitoring a coin daemon."""


class DaemonNotRunningError(SupervisorError):
    """The daemon is unreachable and auto-start was not permitted."""


class DaemonStartFailedError(SupervisorError):
    """The daemon executable could not be launched."""


# Coin commands


class ConfigureError(MnctlError):
    """Required arguments for the configure command are missing."""
