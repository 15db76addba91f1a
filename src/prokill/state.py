"""Process list state: the model, the selection cursor and the search buffer."""

from collections.abc import Iterator
from operator import attrgetter

from prokill.errors import EmptySelection, SnapshotUnavailable
from prokill.logger import get_logger
from prokill.models import InputMode, ProcessEntry, SortMode
from prokill.source import ProcessSnapshotSource

log = get_logger(__name__)


def sort_entries(entries: list[ProcessEntry], mode: SortMode) -> list[ProcessEntry]:
    """
    Return ``entries`` ordered for ``mode``.

    DESCENDING is the reverse of the stable ascending sort, so ties come out
    in exactly the opposite order. NONE keeps the given order.
    """
    if mode is SortMode.NONE:
        return list(entries)
    ordered = sorted(entries, key=attrgetter("name"))
    if mode is SortMode.DESCENDING:
        ordered.reverse()
    return ordered


class ProcessListModel:
    """Ordered list of processes plus the active sort mode."""

    def __init__(self, source: ProcessSnapshotSource) -> None:
        self._source = source
        self._entries: list[ProcessEntry] = []
        self._sort_mode = SortMode.NONE
        self._snapshot_error: str | None = None

    @property
    def sort_mode(self) -> SortMode:
        """The order applied on each refresh."""
        return self._sort_mode

    @property
    def snapshot_error(self) -> str | None:
        """Message from the last failed refresh, None after a good one."""
        return self._snapshot_error

    def __len__(self) -> int:
        """Number of listed processes."""
        return len(self._entries)

    def __getitem__(self, index: int) -> ProcessEntry:
        """Entry at row ``index``."""
        return self._entries[index]

    def __iter__(self) -> Iterator[ProcessEntry]:
        """Entries in display order."""
        return iter(self._entries)

    def load(self) -> None:
        """Initial population: alphabetical, while sort_mode stays NONE."""
        self.refresh()
        self._entries = sort_entries(self._entries, SortMode.ASCENDING)

    def refresh(self) -> None:
        """Replace the entries with a fresh snapshot in the current sort order."""
        try:
            snapshot = self._source.list()
        except SnapshotUnavailable as exc:
            self._entries = []
            self._snapshot_error = str(exc)
            log.warning("model.refresh.failed", error=str(exc))
            return

        self._snapshot_error = None
        self._entries = sort_entries(snapshot, self._sort_mode)
        log.debug("model.refreshed", count=len(self._entries), sort=self._sort_mode.value)

    def toggle_sort(self) -> SortMode:
        """Cycle NONE -> ASCENDING -> DESCENDING -> ASCENDING and re-sort."""
        if self._sort_mode is SortMode.ASCENDING:
            self._sort_mode = SortMode.DESCENDING
        else:
            self._sort_mode = SortMode.ASCENDING
        self._entries = sort_entries(self._entries, self._sort_mode)
        return self._sort_mode

    def filter_by_search(self, term: str) -> None:
        """
        Refresh, then keep entries whose name contains ``term`` or is
        contained in it. Case-sensitive. An empty term keeps everything.
        """
        self.refresh()
        if not term:
            return
        self._entries = [e for e in self._entries if term in e.name or e.name in term]
        log.debug("search.filter", term=term, matches=len(self._entries))

    def kill(self, pid: int) -> None:
        """
        Ask the source to terminate ``pid``, then refresh.

        The refresh always runs so the list reflects the process table even
        when the kill was rejected; the source's KillFailed or
        ProcessNotFound propagates afterwards.
        """
        try:
            self._source.kill(pid)
        finally:
            self.refresh()


class SelectionCursor:
    """Index of the highlighted row, resolved against the model on demand."""

    def __init__(self, model: ProcessListModel) -> None:
        self._model = model
        self._selected: int | None = None

    @property
    def selected_index(self) -> int | None:
        """Highlighted row, or None before the first move."""
        return self._selected

    def next(self) -> None:
        """Move down, wrapping from the last row to the first."""
        length = len(self._model)
        if length == 0:
            return
        if self._selected is None:
            self._selected = 0
            return
        following = self._selected + 1
        self._selected = 0 if following >= length else following

    def prev(self) -> None:
        """Move up, wrapping from the first row to the last."""
        length = len(self._model)
        if length == 0:
            return
        if self._selected is None:
            self._selected = 0
        elif self._selected == 0 or self._selected > length:
            self._selected = length - 1
        else:
            self._selected -= 1

    def selected_pid(self) -> int | None:
        """Pid under the cursor, or None when the selection is not a valid row."""
        if self._selected is None or not 0 <= self._selected < len(self._model):
            return None
        return self._model[self._selected].pid

    def require_pid(self) -> int:
        """Like selected_pid() but raises EmptySelection instead of returning None."""
        pid = self.selected_pid()
        if pid is None:
            raise EmptySelection("No process selected")
        return pid


class SearchState:
    """Input mode and the in-progress search text."""

    def __init__(self) -> None:
        self._mode = InputMode.NORMAL
        self._buffer = ""

    @property
    def mode(self) -> InputMode:
        """Current input mode."""
        return self._mode

    @property
    def buffer(self) -> str:
        """Search text typed so far."""
        return self._buffer

    @property
    def editing(self) -> bool:
        """True while keystrokes go to the buffer."""
        return self._mode is InputMode.EDITING

    def start_editing(self) -> None:
        """Switch to EDITING; the buffer is kept."""
        self._mode = InputMode.EDITING

    def stop_editing(self) -> None:
        """Switch back to NORMAL; the buffer is kept."""
        self._mode = InputMode.NORMAL

    def append(self, char: str) -> None:
        """Append to the buffer; ignored outside EDITING mode."""
        if self.editing:
            self._buffer += char

    def backspace(self) -> None:
        """Drop the last character; ignored outside EDITING mode."""
        if self.editing:
            self._buffer = self._buffer[:-1]
