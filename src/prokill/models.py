"""Data models for prokill."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessEntry:
    """Immutable snapshot of a single process as listed in the table."""

    pid: int
    name: str


class SortMode(Enum):
    """Sort modes for the process list (by name)."""

    NONE = "none"
    ASCENDING = "asc"
    DESCENDING = "desc"


class InputMode(Enum):
    """Whether keys are commands (NORMAL) or search text (EDITING)."""

    NORMAL = "normal"
    EDITING = "editing"
