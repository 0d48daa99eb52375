"""Logging setup: structlog on top of stdlib logging.

Every record, whether emitted through structlog or a plain stdlib logger, ends
up in a ``ProcessorFormatter``. The console handler writes human-readable
lines to stderr; an optional file handler writes one JSON object per line.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import TextIO

import structlog
from rich.console import Console
from rich.traceback import Traceback
from structlog.stdlib import BoundLogger
from structlog.typing import ExcInfo, Processor


def _console_time_format(level: int) -> str:
    # Short clock times are enough when debugging interactively
    return "%H:%M:%S" if level < logging.INFO else "%Y-%m-%d %H:%M:%S"


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.dev.set_exc_info,
    ]


def rich_traceback(sio: TextIO, exc_info: ExcInfo) -> None:
    """Render an exception with rich, hiding click and typer frames."""
    width, _ = shutil.get_terminal_size((100, 40))
    sio.write("\n")
    Console(file=sio, color_system="truecolor").print(
        Traceback.from_exception(
            *exc_info,
            width=width,
            extra_lines=1,
            max_frames=5,
            suppress=["click", "typer"],
        )
    )


def configure_structlog(level: int) -> None:
    """Route structlog loggers through stdlib logging at ``level``."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if level < logging.INFO:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            )
        )
    processors += [
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _console_handler(level: int, json_logs: bool) -> logging.Handler:
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(exception_formatter=rich_traceback)
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.processors.TimeStamper(fmt=_console_time_format(level)),
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def _file_handler(level: int, log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8", delay=True)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    return handler


def setup_logging(
    level: int = logging.WARNING,
    log_file: str | None = None,
    json_logs: bool = False,
) -> BoundLogger:
    """Replace the root logger's handlers and configure structlog.

    Args:
        level: Threshold for the root logger and every handler
        log_file: Also write JSON lines to this file when given
        json_logs: Render console output as JSON too

    Returns:
        A logger for the caller's convenience
    """
    configure_structlog(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [_console_handler(level, json_logs)]
    if log_file:
        root.addHandler(_file_handler(level, Path(log_file)))

    return structlog.get_logger()  # type: ignore[no-any-return]
