"""Logging du projet : une ligne JSON par événement de synchronisation."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, TextIO

LOGGER_NAME = "asset_tracker"
DEFAULT_LEVEL = "INFO"


class JsonLineFormatter(logging.Formatter):
    """Sérialise l'enregistrement entier (horodatage, niveau, champs) en une ligne JSON."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
        }
        fields = getattr(record, "fields", None)
        if fields:
            line.update(fields)
        else:
            line["message"] = record.getMessage()
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str, ensure_ascii=False)


def _level_from_env() -> str:
    return os.getenv("ASSET_TRACKER_LOG_LEVEL", DEFAULT_LEVEL).strip().upper() or DEFAULT_LEVEL


def configure_logging(
    level: int | str | None = None,
    stream: TextIO | None = None,
    force: bool = False,
) -> logging.Logger:
    """
    Installe le handler JSON sur le logger du projet.
    Sans `force`, un logger déjà configuré est renvoyé tel quel (reruns Streamlit).
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers and not force:
        return logger

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonLineFormatter())
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(level if level is not None else _level_from_env())
    return logger


def get_logger() -> logging.Logger:
    return configure_logging()


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    get_logger().log(level, event, extra={"fields": {"event": event, **fields}})
