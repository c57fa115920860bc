"""
Structured logging setup.
Every record carries a correlation_id so request traces can be stitched together.
"""
import logging
import sys

from origination.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Guarantees the correlation_id attribute used by the formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def _build_logger() -> logging.Logger:
    app_logger = logging.getLogger("origination")
    app_logger.setLevel(settings.LOG_LEVEL.upper())

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        app_logger.addHandler(handler)

    app_logger.propagate = False
    return app_logger


logger = _build_logger()


def get_logger_with_correlation(correlation_id: str) -> logging.LoggerAdapter:
    """Returns a logger bound to the given correlation_id."""
    return logging.LoggerAdapter(logger, {"correlation_id": correlation_id})
