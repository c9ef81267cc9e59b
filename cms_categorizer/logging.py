"""Structured logging for the categorization engine.

Events are structlog key/value records routed through the stdlib root
logger, so CLI runs and library callers share one configuration.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

import structlog
from structlog import processors, stdlib

from .config import get_settings


def build_processors(json_logging: bool) -> list[Any]:
    """Processor chain shared by every categorizer logger.

    Args:
        json_logging: Render one JSON object per event instead of console text

    Returns:
        structlog processors, renderer last
    """
    chain: list[Any] = [
        stdlib.filter_by_level,
        stdlib.add_logger_name,
        stdlib.add_log_level,
        processors.TimeStamper(fmt="iso"),
        processors.format_exc_info,
    ]

    if json_logging:
        chain.append(processors.JSONRenderer(serializer=json.dumps))
    else:
        chain.append(processors.CallsiteParameterAdder(
            parameters=[processors.CallsiteParameter.FILENAME,
                        processors.CallsiteParameter.LINENO]
        ))
        chain.append(structlog.dev.ConsoleRenderer(colors=False))

    return chain


def setup_logging(
    log_level: str | None = None,
    json_logging: bool | None = None,
    log_file: Path | None = None
) -> None:
    """Configure structured logging for the categorizer.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_logging: Enable JSON formatting
        log_file: Optional file that receives a copy of every event
    """
    settings = get_settings()
    level = getattr(logging, (log_level or settings.log_level).upper())
    if json_logging is None:
        json_logging = settings.json_logging

    # force: the CLI reconfigures after the import-time setup below
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    structlog.configure(
        processors=build_processors(json_logging),
        wrapper_class=stdlib.BoundLogger,
        logger_factory=stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggingMixin:
    """Gives services a logger named after their class."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")


def categorization_failure(error: Exception, content_id: Any) -> dict[str, Any]:
    """Event for one content item that could not be categorized.

    Args:
        error: Exception raised while scoring or assigning the item
        content_id: Identifier of the item

    Returns:
        Structured log data
    """
    return {
        "event": "categorization_failed",
        "content_id": content_id,
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }


def batch_summary(
    processed: int,
    categorized: int,
    queued: int,
    failed: int,
    **kwargs: Any
) -> dict[str, Any]:
    """Event closing an auto-categorization run.

    Args:
        processed: Uncategorized items visited
        categorized: Items auto-assigned
        queued: Items placed in the review queue
        failed: Items that raised
        **kwargs: Extra fields

    Returns:
        Structured log data
    """
    untouched = processed - categorized - queued - failed
    return {
        "event": "auto_categorize_summary",
        "processed": processed,
        "categorized": categorized,
        "queued": queued,
        "failed": failed,
        "untouched": max(untouched, 0),
        **kwargs
    }


class BatchTimer:
    """Times a batch run and reports its throughput on exit."""

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger):
        self.operation = operation
        self.logger = logger
        self.items = 0
        self.start_time: float | None = None

    def tick(self) -> None:
        self.items += 1

    def __enter__(self) -> "BatchTimer":
        self.start_time = time.perf_counter()
        self.logger.info("batch_started", operation=self.operation)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = time.perf_counter() - (self.start_time or time.perf_counter())
        if exc_type is not None:
            self.logger.error(
                "batch_aborted",
                operation=self.operation,
                items=self.items,
                duration=round(duration, 4),
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            )
            return

        self.logger.info(
            "batch_completed",
            operation=self.operation,
            items=self.items,
            duration=round(duration, 4),
            items_per_second=round(self.items / duration, 2) if duration > 0 else None,
        )


# Initialize logging on module import
setup_logging()
