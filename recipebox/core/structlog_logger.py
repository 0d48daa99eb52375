"""Structured loggers for recipebox modules and services."""

import logging
from typing import Any

import structlog


def get_struct_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger routed through the stdlib logger ``name``."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def debug_tracebacks_enabled() -> bool:
    """Whether failures should be logged with their stack trace."""
    return logging.getLogger().isEnabledFor(logging.DEBUG)


class StructlogMixin:
    """Give a service a ``logger`` bound to its class name.

    Events are snake_case names with keyword context, e.g.
    ``self.logger.info("snapshot_completed", files=12)``.
    """

    _logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if self._logger is None:
            self._logger = get_struct_logger(type(self).__module__).bind(
                service=type(self).__name__
            )
        return self._logger

    def log_error_with_context(
        self, event: str, error: Exception, **context: Any
    ) -> None:
        """Log ``error`` under ``event``; the traceback is kept at debug level."""
        self.logger.error(
            event,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=debug_tracebacks_enabled(),
            **context,
        )
