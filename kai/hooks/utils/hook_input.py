#!/usr/bin/env python3
"""
Hook stdin handling.

Claude Code pipes one JSON object to each hook. If nothing arrives within
HOOK_INPUT_TIMEOUT the hook proceeds with an empty payload instead of
blocking the host.
"""

import json
import logging
import sys
import threading
from typing import Any, Dict, Optional, TextIO

logger = logging.getLogger(__name__)

HOOK_INPUT_TIMEOUT = 0.5


def read_stdin_with_timeout(stream: Optional[TextIO] = None, timeout: float = HOOK_INPUT_TIMEOUT) -> str:
    """
    Race a blocking read against a timer.

    The reader runs in a daemon thread; when the timer wins we stop waiting
    and return "", leaving the read to die with the process.
    """
    stream = stream if stream is not None else sys.stdin
    result = {"data": ""}

    def _read():
        try:
            result["data"] = stream.read()
        except (OSError, ValueError) as e:
            logger.debug("stdin read failed: %s", e)

    reader = threading.Thread(target=_read, name="hook-stdin", daemon=True)
    reader.start()
    reader.join(timeout)

    if reader.is_alive():
        logger.info("No hook input within %.1fs, continuing with empty payload", timeout)
        return ""
    return result["data"]


def parse_hook_input(raw: str) -> Dict[str, Any]:
    """Decode the hook JSON, {} for empty or malformed input."""
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Malformed hook input: %s", e)
        return {}
    return data if isinstance(data, dict) else {}


def read_hook_input(stream: Optional[TextIO] = None, timeout: float = HOOK_INPUT_TIMEOUT) -> Dict[str, Any]:
    return parse_hook_input(read_stdin_with_timeout(stream, timeout))
