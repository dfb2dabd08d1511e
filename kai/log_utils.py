#!/usr/bin/env python3
"""
Logging setup shared by the hooks and the voice server.

- Voice server: structured lines on stdout
- Hooks: file only, stdout belongs to Claude Code
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_hook_log_path() -> Path:
    """Hook log file, overridable with KAI_HOOK_LOG."""
    override = os.getenv("KAI_HOOK_LOG", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(tempfile.gettempdir()) / "kai-hooks.log"


def configure_server_logging(level: str = "INFO") -> None:
    """Route all records to stdout for the long-running server."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Quiet noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def setup_hook_logger(name: str = "kai.hooks", log_file: Optional[Path] = None,
                      level: int = logging.INFO) -> logging.Logger:
    """
    Attach a file handler to the hook logger.

    Args:
        name: Logger name (children of it inherit the handler)
        log_file: Target file, defaults to get_hook_log_path()
        level: Minimum level written

    Returns:
        logging.Logger: The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        path = log_file or get_hook_log_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = logging.FileHandler(path)
        except OSError:
            # Unwritable log location must never break the hook
            handler = logging.NullHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
