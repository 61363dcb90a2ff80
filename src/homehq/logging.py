from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional

from .config import get_settings

LOG_FILE_NAME = "homehq.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

# The Supabase client logs every HTTP request at INFO through httpx.
CHATTY_LOGGERS = ("httpx", "httpcore", "hpack", "hypercorn.access")

_HANDLER_MARK = "_homehq_handler"


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARK, True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _installed(root: logging.Logger) -> List[logging.Handler]:
    return [handler for handler in root.handlers if getattr(handler, _HANDLER_MARK, False)]


def _resolve_level(level: Optional[str], fallback: str) -> int:
    name = (level or fallback).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _quiet(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def configure_logging(
    level: Optional[str] = None,
    *,
    log_path: Optional[Path] = None,
    console: bool = True,
) -> Path:
    """Attach the HomeHQ handlers to the root logger and return the log file.

    Calling it again only adjusts the level; handlers are installed once per
    process, so ``serve`` and the embedded server can both call it.
    """

    settings = get_settings().logging
    root = logging.getLogger()
    root.setLevel(_resolve_level(level, settings.level))

    existing = _installed(root)
    if existing:
        for handler in existing:
            if isinstance(handler, RotatingFileHandler):
                return Path(handler.baseFilename)
        return log_path or settings.directory / LOG_FILE_NAME

    target = log_path or settings.directory / LOG_FILE_NAME
    target.parent.mkdir(parents=True, exist_ok=True)
    root.addHandler(_mark(RotatingFileHandler(target, maxBytes=1_000_000, backupCount=5, encoding="utf-8")))
    if console:
        root.addHandler(_mark(logging.StreamHandler()))
    _quiet(CHATTY_LOGGERS, root.level)

    logging.getLogger(__name__).debug("Writing logs to %s", target)
    return target


def reset_logging() -> None:
    """Detach and close the handlers installed by :func:`configure_logging`."""

    root = logging.getLogger()
    for handler in _installed(root):
        root.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "reset_logging"]
