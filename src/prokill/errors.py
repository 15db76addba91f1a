"""Exception hierarchy for prokill."""


class ProkillError(Exception):
    """Base class for all prokill errors."""


class SnapshotUnavailable(ProkillError):
    """The process table could not be enumerated."""


class KillFailed(ProkillError):
    """A termination request was rejected (permission denied, protected pid)."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"Could not kill {pid}: {reason}")
        self.pid = pid
        self.reason = reason


class ProcessNotFound(KillFailed):
    """The target pid no longer exists when the kill is requested."""

    def __init__(self, pid: int) -> None:
        super().__init__(pid, "no such process")


class EmptySelection(ProkillError):
    """An operation needed a selected row but none is valid."""


class TerminalSetupFailure(ProkillError):
    """The terminal could not be switched into application mode."""


class ConfigError(ProkillError):
    """Raised by Settings.from_env() when environment values are invalid."""
