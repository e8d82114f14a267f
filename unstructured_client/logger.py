"""
unstructured_client/logger.py
-----------------------------
Logging setup shared by the client and the CLI.
Console output goes to stderr so stdout stays reserved for results.
Daily log files are written only when LOG_DIR is set, and older ones are
cleaned up automatically.

Settings come from the environment and are read when a logger is configured:
  LOG_LEVEL           default WARNING
  DEBUG_LOGS=true     force DEBUG
  LOG_DIR             directory for daily log files (off when empty)
  LOG_RETENTION_DAYS  delete log files older than this many days (default 14)
  ENV=prod            disable console output
"""

import logging
import os
import datetime
from glob import glob


def _retention_days() -> int:
    return int(os.getenv("LOG_RETENTION_DAYS", "14"))


def _cleanup_old_logs(log_dir: str):
    """Remove log files older than retention period."""
    cutoff = datetime.datetime.now() - datetime.timedelta(days=_retention_days())
    for path in glob(os.path.join(log_dir, "*.log")):
        timestamp_str = os.path.basename(path).split("_")[-1].replace(".log", "")
        if len(timestamp_str) != 8:
            continue
        try:
            date = datetime.datetime.strptime(timestamp_str, "%Y%m%d")
        except ValueError:
            continue
        if date < cutoff:
            try:
                os.remove(path)
            except OSError:
                continue


def _level() -> int:
    if os.getenv("DEBUG_LOGS", "false").lower() == "true":
        return logging.DEBUG
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logger(name: str) -> logging.Logger:
    """(Re)apply the environment's logging settings to the named logger."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(_level())

    log_dir = os.getenv("LOG_DIR", "").strip()
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, f"{name}_{datetime.datetime.now():%Y%m%d}.log")
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        _cleanup_old_logs(log_dir)

    # Optional console output (disabled in production)
    if os.getenv("ENV", "dev").lower() != "prod":
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(console)
    else:
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Returns a configured logger for the given module name.
    Logs to LOG_DIR/<name>_YYYYMMDD.log when LOG_DIR is set.
    Console output is disabled when ENV=prod.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        configure_logger(name)
    return logger
