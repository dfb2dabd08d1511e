#!/usr/bin/env python3
"""
Prompt submission timestamps, handed from UserPromptSubmit to Stop.

One marker per session holding epoch milliseconds. The Stop hook pops it:
the marker is renamed to a private name before reading, so only one reader
ever sees it and it is gone afterwards.
"""

import logging
import os
import re
import tempfile
import time
import uuid
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MARKER_PREFIX = "prompt-"


def get_default_marker_dir() -> Path:
    """Marker directory, overridable with KAI_PROMPT_TIMER_DIR."""
    override = os.getenv("KAI_PROMPT_TIMER_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(tempfile.gettempdir()) / "kai-prompt-timer"


def now_ms() -> int:
    return int(time.time() * 1000)


class PromptTimestampStore:
    """Keyed session-id -> timestamp store with delete-after-read"""

    def __init__(self, marker_dir: Optional[Path] = None):
        self.marker_dir = Path(marker_dir) if marker_dir else get_default_marker_dir()

    def _marker_path(self, session_id: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", session_id or "default")
        return self.marker_dir / f"{MARKER_PREFIX}{safe_id}"

    def record(self, session_id: str, timestamp_ms: Optional[int] = None) -> Path:
        """
        Write the prompt timestamp for a session, replacing any previous one.

        Args:
            session_id: Claude Code session id
            timestamp_ms: Epoch milliseconds, defaults to now

        Returns:
            Path: The marker file written
        """
        self.marker_dir.mkdir(parents=True, exist_ok=True)
        path = self._marker_path(session_id)
        value = timestamp_ms if timestamp_ms is not None else now_ms()

        # Write then rename so a concurrent pop never sees a partial file
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}")
        tmp_path.write_text(str(int(value)))
        os.replace(tmp_path, path)
        return path

    def pop(self, session_id: str) -> Optional[int]:
        """
        Read and delete the session's timestamp.

        Returns:
            Optional[int]: Epoch milliseconds, None if no usable marker exists
        """
        path = self._marker_path(session_id)
        claimed = path.with_name(f".{path.name}.claimed.{uuid.uuid4().hex}")
        try:
            os.replace(path, claimed)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not claim prompt marker %s: %s", path, e)
            return None

        try:
            return int(claimed.read_text().strip())
        except (OSError, ValueError) as e:
            logger.warning("Unreadable prompt marker for session %s: %s", session_id, e)
            return None
        finally:
            try:
                claimed.unlink()
            except OSError:
                pass

    def elapsed_ms(self, session_id: str, now: Optional[int] = None) -> int:
        """Milliseconds since the prompt was submitted, 0 without a marker."""
        started = self.pop(session_id)
        if started is None:
            return 0
        current = now if now is not None else now_ms()
        return max(0, current - started)
