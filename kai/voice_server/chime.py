#!/usr/bin/env python3
"""
Chime played before each spoken notification.

A missing file or a playback failure is logged and ignored; the chime must
never hold up the notification itself.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from kai.voice_server.audio_player import play_audio_file

logger = logging.getLogger(__name__)

CHIME_TIMEOUT = 5


def play_chime(chime_path: Optional[Path], volume: float = 0.8,
               player: Callable[..., bool] = play_audio_file) -> bool:
    """
    Play the chime to completion.

    Returns:
        bool: True if the chime played
    """
    if chime_path is None or not Path(chime_path).exists():
        logger.debug("Chime file not found: %s", chime_path)
        return False
    try:
        played = player(str(chime_path), volume=volume, timeout=CHIME_TIMEOUT)
    except Exception as e:
        logger.warning("Chime playback failed: %s", e)
        return False
    if not played:
        logger.warning("Chime playback failed: %s", chime_path)
    return bool(played)
