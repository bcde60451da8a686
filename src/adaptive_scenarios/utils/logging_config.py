"""Structured JSON logging for scenario generation.

Stage records emitted by ``generation_stage_logger`` carry a fixed set of
fields (stage, status, duration, language, level, history size, error). The
formatter lifts those into a ``generation`` object so every generation record
has the same JSON shape; any other ``extra`` fields land under ``extra``.

Only the ``adaptive_scenarios`` logger tree is configured, so the host
application's root logging is left alone.
"""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Union

from adaptive_scenarios import constants

LOGGER_NAMESPACE = "adaptive_scenarios"

GENERATION_FIELDS = (
    "stage",
    "status",
    "duration_ms",
    "language",
    "level",
    "history_size",
    "error",
)

# Attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Shape::

        {"timestamp", "level", "logger", "message",
         "generation": {...},   # only stage fields present on the record
         "extra": {...},        # any other extra fields
         "exception": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        generation = {
            field: getattr(record, field)
            for field in GENERATION_FIELDS
            if hasattr(record, field)
        }
        if generation:
            log_data["generation"] = generation

        extra_fields = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _STANDARD_ATTRS and k not in GENERATION_FIELDS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(
    level: Union[str, int, None] = None,
    json_format: Optional[bool] = None,
) -> logging.Logger:
    """Attach a stdout handler to the ``adaptive_scenarios`` logger.

    Calling it again replaces the handler rather than adding a second one.

    Args:
        level: Logging level (default: LOG_LEVEL env var)
        json_format: Use ``JsonFormatter`` if True, plain text if False
            (default: LOG_JSON env var)

    Returns:
        The configured package logger
    """
    if level is None:
        level = constants.LOG_LEVEL
    if json_format is None:
        json_format = constants.LOG_JSON

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.setLevel(level)
    for handler in [h for h in package_logger.handlers if getattr(h, "_adaptive_scenarios", False)]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler._adaptive_scenarios = True
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    package_logger.addHandler(handler)

    package_logger.info(
        f"Logging configured: level={logging.getLevelName(package_logger.level)}, json_format={json_format}"
    )
    return package_logger


@contextmanager
def generation_stage_logger(stage_name: str, **context):
    """Log entry, exit and failure of a generation stage with timing.

    Exceptions are logged and re-raised.

    Args:
        stage_name: Name of the stage
        **context: Stage fields such as ``language``, ``level``, ``history_size``

    Yields:
        Logger instance for the stage

    Example:
        >>> with generation_stage_logger("scenario_generation", language="Spanish") as logger:
        ...     logger.info("Rendering prompt")
    """
    logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{stage_name}")

    start_time = datetime.now(UTC)
    logger.info(
        f"Starting stage: {stage_name}",
        extra={"stage": stage_name, "status": "started", **context},
    )

    try:
        yield logger
    except Exception as e:
        duration_ms = (datetime.now(UTC) - start_time).total_seconds() * 1000
        logger.error(
            f"Failed stage: {stage_name}",
            extra={
                "stage": stage_name,
                "status": "failed",
                "duration_ms": round(duration_ms, 2),
                "error": str(e)[:200],
                **context,
            },
            exc_info=True,
        )
        raise

    duration_ms = (datetime.now(UTC) - start_time).total_seconds() * 1000
    logger.info(
        f"Completed stage: {stage_name}",
        extra={
            "stage": stage_name,
            "status": "completed",
            "duration_ms": round(duration_ms, 2),
            **context,
        },
    )
