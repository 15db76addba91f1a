"""Shared fixtures for prokill tests."""

import pytest

from prokill.errors import KillFailed, ProcessNotFound, SnapshotUnavailable
from prokill.models import ProcessEntry


class FakeSnapshotSource:
    """In-memory process table; kills take effect immediately."""

    def __init__(self, entries: list[ProcessEntry] | None = None) -> None:
        self.entries: list[ProcessEntry] = list(entries or [])
        self.killed: list[int] = []
        self.denied: set[int] = set()
        self.unavailable = False
        self.list_calls = 0

    def list(self) -> list[ProcessEntry]:
        self.list_calls += 1
        if self.unavailable:
            raise SnapshotUnavailable("Process list unavailable: boom")
        return list(self.entries)

    def kill(self, pid: int) -> None:
        if pid in self.denied:
            raise KillFailed(pid, "permission denied")
        if not any(e.pid == pid for e in self.entries):
            raise ProcessNotFound(pid)
        self.killed.append(pid)
        self.entries = [e for e in self.entries if e.pid != pid]


@pytest.fixture
def shells() -> list[ProcessEntry]:
    """Three shells in snapshot (unsorted) order."""
    return [
        ProcessEntry(pid=1, name="bash"),
        ProcessEntry(pid=2, name="zsh"),
        ProcessEntry(pid=3, name="ash"),
    ]


@pytest.fixture
def source(shells) -> FakeSnapshotSource:
    return FakeSnapshotSource(shells)
