"""Launching coin daemons as background processes.

A daemon is started fire-and-forget: mnctl does not wait for it. Its stdout
and stderr are drained on background threads so the child never blocks on a
full pipe; drained lines are logged at DEBUG. The threads live exactly as
long as the child's pipes stay open, and their outcome is published through
a Future.
"""

from __future__ import annotations

import subprocess
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, IO, List, Optional, Sequence, Union

from mnctl.core.errors import DaemonStartFailedError
from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TERMINATE_TIMEOUT = 10.0


@dataclass
class DaemonProcess:
    """A launched daemon and the future tracking its output draining.

    Attributes:
        name: Display name used in logs.
        process: The child process.
        drained: Resolves to the number of output lines drained once both
            streams reach EOF, or to the exception that stopped draining.
    """

    name: str
    process: subprocess.Popen
    drained: "Future[int]"

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def running(self) -> bool:
        return self.process.poll() is None

    def terminate(self, timeout: float = DEFAULT_TERMINATE_TIMEOUT) -> None:
        """Stop the child if it is still running, killing it after `timeout`."""
        if not self.running:
            return
        LOGGER.info(f"Terminating {self.name} (pid {self.pid})")
        self.process.terminate()
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            LOGGER.warning(f"{self.name} did not exit after {timeout}s, killing it")
            self.process.kill()
            self.process.wait()


def _pump_lines(stream: IO[str], name: str, label: str) -> int:
    count = 0
    with stream:
        for line in stream:
            count += 1
            LOGGER.debug(f"[{name} {label}] {line.rstrip()}")
    return count


def _drain_streams(process: subprocess.Popen, name: str, future: "Future[int]") -> None:
    counts: Dict[str, int] = {}
    errors: List[BaseException] = []

    def pump(stream: Optional[IO[str]], label: str) -> None:
        if stream is None:
            return
        try:
            counts[label] = _pump_lines(stream, name, label)
        except (OSError, ValueError) as e:
            LOGGER.warning(f"Unable to read {label} from {name}: {e}")
            errors.append(e)

    stderr_thread = threading.Thread(
        target=pump, args=(process.stderr, "stderr"), name=f"{name}-stderr", daemon=True
    )
    stderr_thread.start()
    pump(process.stdout, "stdout")
    stderr_thread.join()

    if errors:
        future.set_exception(errors[0])
    else:
        future.set_result(sum(counts.values()))


def start_daemon(
    cmd: Sequence[Union[str, Path]],
    *,
    name: Optional[str] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> DaemonProcess:
    """Start a daemon without waiting for it.

    Args:
        cmd: Executable and arguments.
        name: Display name (defaults to the executable's file name).
        cwd: Working directory for the child.

    Returns:
        DaemonProcess for the running child.

    Raises:
        DaemonStartFailedError: If the executable cannot be launched.
    """
    argv = [str(part) for part in cmd]
    display = name or Path(argv[0]).name
    LOGGER.debug(f"Running: {' '.join(argv)}")

    try:
        process = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as e:
        raise DaemonStartFailedError(f"Unable to start {display}: {e}") from e

    drained: "Future[int]" = Future()
    drained.set_running_or_notify_cancel()
    threading.Thread(
        target=_drain_streams,
        args=(process, display, drained),
        name=f"{display}-drain",
        daemon=True,
    ).start()

    LOGGER.info(f"Started {display} (pid {process.pid})")
    return DaemonProcess(name=display, process=process, drained=drained)
