"""Keystroke routing: the (input mode, key) state machine and the render view."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from prokill.errors import EmptySelection, KillFailed
from prokill.logger import get_logger
from prokill.models import InputMode, SortMode
from prokill.source import ProcessSnapshotSource
from prokill.state import ProcessListModel, SearchState, SelectionCursor

log = get_logger(__name__)


class Signal(Enum):
    """What the event loop should do after a key was dispatched."""

    RENDER = "render"
    QUIT = "quit"
    IGNORED = "ignored"


@dataclass
class AppState:
    """Everything the router mutates, passed explicitly to each handler."""

    model: ProcessListModel
    cursor: SelectionCursor
    search: SearchState = field(default_factory=SearchState)
    status: str | None = None

    @classmethod
    def create(cls, source: ProcessSnapshotSource) -> "AppState":
        """Build the initial state and load the first snapshot."""
        model = ProcessListModel(source)
        model.load()
        return cls(model=model, cursor=SelectionCursor(model))


Handler = Callable[[AppState], Signal]


def _next(state: AppState) -> Signal:
    """Move the selection down."""
    state.cursor.next()
    return Signal.RENDER


def _prev(state: AppState) -> Signal:
    """Move the selection up."""
    state.cursor.prev()
    return Signal.RENDER


def _kill(state: AppState) -> Signal:
    """Kill the selected process and report the outcome in the status line."""
    try:
        pid = state.cursor.require_pid()
    except EmptySelection:
        log.debug("process.kill.skipped", reason="empty selection")
        return Signal.RENDER

    try:
        state.model.kill(pid)
    except KillFailed as exc:
        log.warning("process.kill.failed", pid=exc.pid, reason=exc.reason)
        state.status = str(exc)
    else:
        state.status = f"Killed {pid}"
    return Signal.RENDER


def _quit(state: AppState) -> Signal:
    """Stop the event loop."""
    return Signal.QUIT


def _toggle_sort(state: AppState) -> Signal:
    """Flip the name sort order."""
    mode = state.model.toggle_sort()
    log.debug("model.sorted", sort=mode.value)
    return Signal.RENDER


def _start_editing(state: AppState) -> Signal:
    """Enter search editing mode."""
    state.search.start_editing()
    return Signal.RENDER


def _refresh(state: AppState) -> Signal:
    """Reload the process list, dropping any filter."""
    state.model.refresh()
    return Signal.RENDER


def _stop_editing(state: AppState) -> Signal:
    """Leave search editing mode, keeping the typed text."""
    state.search.stop_editing()
    return Signal.RENDER


def _backspace(state: AppState) -> Signal:
    """Delete the last search character."""
    state.search.backspace()
    return Signal.RENDER


def _apply_search(state: AppState) -> Signal:
    """Filter the process list by the search text."""
    state.model.filter_by_search(state.search.buffer)
    return Signal.RENDER


class InputRouter:
    """
    Maps ``(input mode, key)`` to a handler.

    Keys use Textual key names ("down", "enter", "escape", "j", ...). In
    EDITING mode any printable character without a table entry is appended
    to the search buffer. Everything else is ignored.
    """

    TRANSITIONS: dict[tuple[InputMode, str], Handler] = {
        (InputMode.NORMAL, "down"): _next,
        (InputMode.NORMAL, "j"): _next,
        (InputMode.NORMAL, "up"): _prev,
        (InputMode.NORMAL, "k"): _prev,
        (InputMode.NORMAL, "enter"): _kill,
        (InputMode.NORMAL, "q"): _quit,
        (InputMode.NORMAL, "n"): _toggle_sort,
        (InputMode.NORMAL, "i"): _start_editing,
        (InputMode.NORMAL, "r"): _refresh,
        (InputMode.EDITING, "escape"): _stop_editing,
        (InputMode.EDITING, "backspace"): _backspace,
        (InputMode.EDITING, "enter"): _apply_search,
    }

    def dispatch(self, state: AppState, key: str, character: str | None = None) -> Signal:
        """Apply one keystroke to ``state`` and return the resulting signal."""
        mode = state.search.mode
        handler = self.TRANSITIONS.get((mode, key))

        if handler is None:
            if mode is InputMode.EDITING and _is_printable(character):
                state.search.append(character)
                return Signal.RENDER
            return Signal.IGNORED

        state.status = None
        return handler(state)


def _is_printable(character: str | None) -> bool:
    return character is not None and len(character) == 1 and character.isprintable()


SORT_INDICATORS = {
    SortMode.NONE: "",
    SortMode.ASCENDING: "▲",
    SortMode.DESCENDING: "▼",
}


@dataclass(slots=True, frozen=True)
class Row:
    """One rendered table row."""

    index: int
    pid: int
    name: str


@dataclass(slots=True, frozen=True)
class ViewState:
    """Read-only projection of AppState handed to the renderer."""

    rows: tuple[Row, ...]
    selected_index: int | None
    mode: InputMode
    search_buffer: str
    sort_indicator: str
    status: str | None
    error: str | None


def project(state: AppState) -> ViewState:
    """Build the render view for the current state without mutating it."""
    rows = tuple(Row(index=i, pid=e.pid, name=e.name) for i, e in enumerate(state.model))
    return ViewState(
        rows=rows,
        selected_index=state.cursor.selected_index,
        mode=state.search.mode,
        search_buffer=state.search.buffer,
        sort_indicator=SORT_INDICATORS[state.model.sort_mode],
        status=state.status,
        error=state.model.snapshot_error,
    )
