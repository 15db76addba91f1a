"""Process snapshot source for prokill."""

import os
from typing import Protocol

import psutil

from prokill.errors import KillFailed, ProcessNotFound, SnapshotUnavailable
from prokill.logger import get_logger
from prokill.models import ProcessEntry

log = get_logger(__name__)


class ProcessSnapshotSource(Protocol):
    """Anything that can list live processes and terminate one by pid."""

    def list(self) -> list[ProcessEntry]:
        """Return the current processes, in no particular order."""
        ...

    def kill(self, pid: int) -> None:
        """Request termination of ``pid``."""
        ...


class PsutilSnapshotSource:
    """
    Snapshot source backed by the operating system process table via psutil.

    Processes that die or deny access while being enumerated are skipped,
    the way a process table naturally churns between two reads.
    """

    def __init__(self, force: bool = True) -> None:
        """
        Initialize the PsutilSnapshotSource.

        Args:
            force: Send SIGKILL (``Process.kill``) when True, SIGTERM
                (``Process.terminate``) otherwise.
        """
        self._force = force
        self._own_pid = os.getpid()

    def list(self) -> list[ProcessEntry]:
        """
        Collect ``(pid, name)`` pairs for all running processes.

        Raises:
            SnapshotUnavailable: The process table itself could not be read.
        """
        entries: list[ProcessEntry] = []
        seen: set[int] = set()

        try:
            for proc in psutil.process_iter(attrs=["pid", "name"]):
                try:
                    info = proc.info
                    pid = info.get("pid")
                    if pid is None or pid in seen:
                        continue
                    seen.add(pid)
                    entries.append(ProcessEntry(pid=pid, name=info.get("name") or ""))
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    continue
        except (psutil.Error, OSError) as exc:
            log.warning("snapshot.unavailable", error=str(exc))
            raise SnapshotUnavailable(f"Process list unavailable: {exc}") from exc

        log.debug("snapshot.collected", count=len(entries))
        return entries

    def kill(self, pid: int) -> None:
        """
        Terminate ``pid``.

        Raises:
            ProcessNotFound: The pid is not in the process table.
            KillFailed: Permission denied, the pid is this application, or
                the OS refused the signal (e.g. pid 0 on macOS).
        """
        if pid == self._own_pid:
            raise KillFailed(pid, "refusing to kill prokill itself")

        try:
            proc = psutil.Process(pid)
            if self._force:
                proc.kill()
            else:
                proc.terminate()
        except psutil.NoSuchProcess as exc:
            raise ProcessNotFound(pid) from exc
        except psutil.AccessDenied as exc:
            raise KillFailed(pid, "permission denied") from exc
        except (psutil.Error, ValueError) as exc:
            raise KillFailed(pid, str(exc) or type(exc).__name__) from exc

        log.info("process.kill.sent", pid=pid, force=self._force)
