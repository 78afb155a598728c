"""Root logger setup: console always, plus a UTF-8 log file when LOG_FILE is set."""

from __future__ import annotations

import logging
from pathlib import Path

# marks handlers installed here so repeated calls do not stack duplicates
_HANDLER_TARGET = "popup_api_target"

FORMATTER = logging.Formatter(
    fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _install(logger: logging.Logger, handler: logging.Handler, target: str) -> None:
    handler.setFormatter(FORMATTER)
    setattr(handler, _HANDLER_TARGET, target)
    logger.addHandler(handler)


def setup_logging(level: str = "INFO", logfile: str | None = None) -> None:
    """Configure the root logger for the API process.

    Handlers that other tools attached (uvicorn, pytest) are left alone; only
    the console handler and the optional ``logfile`` handler owned by this
    module are added, each at most once. The log file's directory is created
    when missing.
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    installed = {getattr(h, _HANDLER_TARGET, None) for h in logger.handlers}
    if "console" not in installed:
        _install(logger, logging.StreamHandler(), "console")

    if logfile:
        log_path = Path(logfile).resolve()
        if str(log_path) not in installed:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            _install(logger, logging.FileHandler(log_path, encoding="utf-8"), str(log_path))
