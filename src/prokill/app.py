"""prokill - Main Textual application."""

import sys

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Static

from prokill.config import Settings
from prokill.errors import ConfigError, ProkillError, TerminalSetupFailure
from prokill.logger import get_logger, setup_logging
from prokill.models import InputMode
from prokill.router import AppState, InputRouter, Row, Signal, ViewState, project
from prokill.source import ProcessSnapshotSource, PsutilSnapshotSource

log = get_logger(__name__)

INSTRUCTIONS = (
    "Enter kill process | N toggle sort by name | I search (Enter apply, Esc back) | "
    "R refresh | J/K or Up/Down navigate | Q quit"
)


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
        border-title-align: right;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._rows: tuple[Row, ...] = ()

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table", cursor_type="row")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        self.border_title = "Process Killer"
        table = self.query_one("#process-table", DataTable)
        # Keys are routed by the app, not by the table's own bindings.
        table.can_focus = False

        table.add_column("S.N.", key="index", width=6)
        table.add_column("PID", key="pid", width=10)
        table.add_column("Name", key="name")

    def show(self, view: ViewState) -> None:
        """
        Place the cursor and, when the listed processes changed, rebuild the rows.

        Navigation only moves the cursor, so the table is left alone unless
        a refresh, sort, filter or kill produced a different row set.
        """
        table = self.query_one("#process-table", DataTable)
        if view.rows != self._rows:
            table.clear()
            for row in view.rows:
                table.add_row(str(row.index), str(row.pid), Text(row.name), key=str(row.index))
            self._rows = view.rows

        self.border_subtitle = f"Name {view.sort_indicator}" if view.sort_indicator else ""

        selected = view.selected_index
        if selected is not None and 0 <= selected < len(view.rows):
            table.show_cursor = True
            table.move_cursor(row=selected)
        else:
            table.show_cursor = False


class SearchLine(Static):
    """Single-line search input showing the buffer and the input mode."""

    DEFAULT_CSS = """
    SearchLine {
        height: 3;
        border: solid $secondary;
    }
    SearchLine.editing {
        border: solid $warning;
    }
    """

    def show(self, view: ViewState) -> None:
        """Show the buffer, with a caret and highlighted border while editing."""
        editing = view.mode is InputMode.EDITING
        self.set_class(editing, "editing")
        self.border_title = "Search (editing)" if editing else "Search"
        self.update(Text(view.search_buffer + ("_" if editing else "")))


class StatusLine(Static):
    """Last action result or snapshot error."""

    DEFAULT_CSS = """
    StatusLine {
        height: 1;
        padding: 0 1;
    }
    StatusLine.error {
        color: $error;
    }
    """

    def show(self, view: ViewState) -> None:
        """Show the snapshot error, or else the last action status."""
        message = view.error or view.status or ""
        self.set_class(view.error is not None, "error")
        self.update(Text(message))


class Instructions(Static):
    """Key binding help panel."""

    DEFAULT_CSS = """
    Instructions {
        height: auto;
        border: solid $success;
        color: $success;
    }
    """

    def on_mount(self) -> None:
        """Title the panel when mounted."""
        self.border_title = "Instructions"


class ProkillApp(App):
    """Main prokill application."""

    TITLE = "prokill"
    SUB_TITLE = "Process Killer"
    AUTO_FOCUS = None

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    def __init__(self, source: ProcessSnapshotSource | None = None) -> None:
        """
        Initialize the ProkillApp.

        Args:
            source: Where processes come from. Defaults to the live process
                table through psutil.
        """
        super().__init__()
        self._source = source if source is not None else PsutilSnapshotSource()
        self._router = InputRouter()
        self._state = AppState.create(self._source)

    @property
    def state(self) -> AppState:
        """The state the router mutates."""
        return self._state

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield ProcessTable()
        yield SearchLine(id="search-line")
        yield StatusLine(id="status-line")
        yield Instructions(INSTRUCTIONS, id="instructions")

    def on_ready(self) -> None:
        """Draw the first frame once the widgets are mounted."""
        self.render_view()

    def on_key(self, event: events.Key) -> None:
        """Route every keystroke through the input state machine."""
        signal = self._router.dispatch(self._state, event.key, event.character)
        if signal is Signal.IGNORED:
            return

        event.stop()
        event.prevent_default()
        if signal is Signal.QUIT:
            log.info("app.quit")
            self.exit(return_code=0)
            return
        self.render_view()

    def render_view(self) -> None:
        """Draw the current state."""
        view = project(self._state)
        self.query_one(ProcessTable).show(view)
        self.query_one("#search-line", SearchLine).show(view)
        self.query_one("#status-line", StatusLine).show(view)


def run(settings: Settings) -> int:
    """
    Run the application until the user quits and return the exit code.

    Raises:
        TerminalSetupFailure: The terminal could not be taken over.
    """
    if not sys.stdout.isatty():
        raise TerminalSetupFailure("stdout is not a terminal")

    app = ProkillApp(PsutilSnapshotSource(force=settings.force_kill))
    try:
        app.run()
    except Exception as exc:
        raise TerminalSetupFailure(f"Terminal error: {exc}") from exc
    return app.return_code or 0


def main() -> None:
    """Entry point for prokill application."""
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        raise SystemExit(1) from exc

    setup_logging(
        level=settings.log_level,
        log_file=settings.resolved_log_file,
        json_format=settings.log_json,
    )

    try:
        code = run(settings)
    except ProkillError as exc:
        log.error("app.startup.failed", error=str(exc))
        print(f"prokill: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    raise SystemExit(code)


if __name__ == "__main__":
    main()
