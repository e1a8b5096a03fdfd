"""
Build logging.

The ``portfolio_site`` logger writes human-readable lines to the console
through Rich and, when enabled, one JSON object per line to a build log next
to the output directory. Structured fields passed as ``extra`` (``event``,
``stage``, ``duration_ms``, counts, paths) become top-level keys of the JSON
record, so a build log can be filtered by event name.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from rich.logging import RichHandler

from ..config import LoggingConfig

LOGGER_NAME = "portfolio_site"


def setup_logging(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger:
    """Configure the package logger for one build.

    Handlers from a previous build in the same process are closed and
    replaced, so repeated builds never duplicate output or leak file handles.

    Args:
        cfg: Logging configuration
        log_dir: Directory for the build log; file logging is skipped if None

    Returns:
        The configured ``portfolio_site`` logger
    """
    level = _level_from_string(cfg.level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(
            rich_tracebacks=True, show_time=False, show_level=True, markup=False
        )
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if cfg.file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.info(message, extra=fields)


@contextmanager
def build_stage(logger: logging.Logger, stage: str, **fields: Any) -> Iterator[dict[str, Any]]:
    """Log the outcome and duration of one build stage.

    The yielded dict collects result fields (e.g. page counts) that are added
    to the ``stage_complete`` event. A failing stage logs ``stage_failed``
    with the error and re-raises it.
    """
    result: dict[str, Any] = {}
    started = time.perf_counter()
    try:
        yield result
    except Exception as exc:
        logger.error(
            "Stage %s failed: %s",
            stage,
            exc,
            extra={
                "event": "stage_failed",
                "stage": stage,
                "error": type(exc).__name__,
                "duration_ms": _elapsed_ms(started),
                **fields,
            },
        )
        raise
    log_event(
        logger,
        f"Stage {stage} done",
        event="stage_complete",
        stage=stage,
        duration_ms=_elapsed_ms(started),
        **fields,
        **result,
    )


class JsonlFormatter(logging.Formatter):
    """One JSON object per record; extra fields are merged in at top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extract_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=_json_default)


_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(str(item) for item in value)
    return str(value)


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
