"""
Structured logging for prokill.

structlog is routed through stdlib logging and written to a file only; the
terminal belongs to the TUI, so nothing is ever logged to stdout or stderr.

Usage:
    setup_logging(level="INFO", log_file=path)   # once, at startup
    log = get_logger(__name__)
    log.info("process.kill.sent", pid=1234)
"""

import logging
from pathlib import Path
from typing import Any

import structlog

_HANDLER_NAME = "prokill-file"


def setup_logging(level: str = "WARNING", log_file: Path | None = None, json_format: bool = False) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name, DEBUG | INFO | WARNING | ERROR | CRITICAL.
        log_file: Destination file. When None, records are discarded.
        json_format: Emit JSON lines instead of key=value text.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.NullHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(numeric_level)

    renderer: Any
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "prokill") -> Any:
    """Get a structlog logger for ``name``."""
    return structlog.get_logger(name)
