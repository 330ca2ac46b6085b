from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from .settings import Settings

# every module logger lives below this name
LOGGER_NAMESPACE = "serverpack.updater"

class _JsonFormatter(logging.Formatter):
    """One JSON object per line, UTC timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _formatter(settings: Settings) -> logging.Formatter:
    if settings.log_json:
        return _JsonFormatter()
    return logging.Formatter(fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

def setup_logging(settings: Settings) -> None:
    """
    Console output on the root logger; LOG_FILE additionally receives the
    updater's own records.
    """
    fmt = _formatter(settings)
    level = settings.log_level.upper()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)

    updater_log = logging.getLogger(LOGGER_NAMESPACE)
    for h in list(updater_log.handlers):
        updater_log.removeHandler(h)
        h.close()
    updater_log.propagate = True

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(settings.log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(level)
        updater_log.addHandler(fh)

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
