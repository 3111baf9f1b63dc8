"""
Logging for AdaptWatch.

Everything logs under the ``adaptwatch`` logger. Two sinks:
- a Rich console handler for the terminal, prefixed with the jurisdiction
  a record belongs to
- an optional JSON-lines file, one object per record

Context (jurisdiction, run id) travels on records as ``extra`` fields and
is added by ContextualLogger.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from adaptwatch.core.config.models import LoggingConfig

ROOT_LOGGER = "adaptwatch"

CONTEXT_FIELDS = ("jurisdiction", "run_id")

LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.INFO: "default",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with any context fields present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key)) for key in CONTEXT_FIELDS if hasattr(record, key)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class RichConsoleHandler(logging.Handler):
    """Prints records to a Rich console, coloured by level."""

    def __init__(self, console: Console | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.console = console or Console(stderr=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            style = LEVEL_STYLES.get(record.levelno, "default")
            line = f"[{style}]{escape(self.format(record))}[/{style}]"

            jurisdiction = getattr(record, "jurisdiction", None)
            if jurisdiction:
                line = f"[cyan]\\[{escape(str(jurisdiction))}][/cyan] {line}"

            self.console.print(line, highlight=False)
            if record.exc_info:
                self.console.print_exception()
        except Exception:
            self.handleError(record)


def setup_logging(
    config: LoggingConfig | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the package logger from a LoggingConfig.

    Replaces any handlers installed by an earlier call, so commands can
    call this once per invocation.

    Args:
        config: Logging settings (default: LoggingConfig())
        console: Console for the Rich handler (default: stderr)

    Returns:
        The ``adaptwatch`` logger
    """
    if config is None:
        from adaptwatch.core.config.models import LoggingConfig

        config = LoggingConfig()

    level = logging.getLevelName(config.level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(min(level, logging.DEBUG) if config.file else level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.rich_console:
        terminal: logging.Handler = RichConsoleHandler(console)
    else:
        terminal = logging.StreamHandler(sys.stderr)
        terminal.setFormatter(logging.Formatter(PLAIN_FORMAT))
    terminal.setLevel(level)
    logger.addHandler(terminal)

    if config.file:
        path = Path(config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            JSONFormatter() if config.json_format
            else logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger under the package namespace (``adaptwatch.<name>``)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


class ContextualLogger(logging.LoggerAdapter):
    """Adds fixed context fields to every record it logs.

    Context given as ``extra`` on a single call wins over the adapter's.
    """

    def __init__(self, logger: logging.Logger, **context: Any):
        super().__init__(logger, {k: v for k, v in context.items() if v is not None})

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextualLogger":
        """Copy of this adapter with more (or replaced) context."""
        return ContextualLogger(self.logger, **{**self.extra, **context})


def get_contextual_logger(name: str | None = None, **context: Any) -> ContextualLogger:
    """Logger that tags records with e.g. ``jurisdiction`` and ``run_id``."""
    return ContextualLogger(get_logger(name), **context)
