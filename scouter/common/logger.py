import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from scouter.common.setup import PATHS

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attaches the handler under a stable name, unless one by that name is already there (re-imports, repeat calls).
def _attach(logger, handler_name, build, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return
    handler = build()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)

def get_logger(
        name = "scouter",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 2 * 1024 * 1024,
        backup_count = 3,
        console = False,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Rotating log kept across runs, plus latest.log which only ever holds this run.
    _attach(logger, f"{name}:persistent", lambda: RotatingFileHandler(
        filename=log_dir / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
    ), level, fmt)
    _attach(logger, f"{name}:latest", lambda: logging.FileHandler(
        filename=log_dir / "latest.log", mode="w", encoding="utf-8",
    ), level, fmt)
    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

# SCOUTER_LOG_LEVEL=DEBUG turns on the per-tick trace.
_LEVEL = getattr(logging, os.getenv("SCOUTER_LOG_LEVEL", "INFO").upper(), logging.INFO)

log = get_logger(level=_LEVEL,console=bool(os.getenv("SCOUTER_LOG_CONSOLE")))
log.info("=== INITIALIZED NEW SESSION ===")
