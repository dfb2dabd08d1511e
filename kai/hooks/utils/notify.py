#!/usr/bin/env python3
"""
Fire-and-forget client for the local voice server.

Voice is an optional extra on top of Claude Code: if the server is down or
slow, the notification is dropped and the hook carries on.
"""

import logging
import os
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8888
NOTIFY_TIMEOUT = 2.0
MAX_MESSAGE_LENGTH = 500


def get_notify_url() -> str:
    """Voice server endpoint from KAI_VOICE_SERVER_URL or PORT."""
    url = os.getenv("KAI_VOICE_SERVER_URL", "").strip()
    if url:
        return url
    port = os.getenv("PORT", "").strip() or str(DEFAULT_PORT)
    return f"http://localhost:{port}/notify"


def get_assistant_name() -> str:
    """Assistant name from DA, used as the notification title."""
    return os.getenv("DA", "").strip() or "Kai"


def build_payload(message: str, title: Optional[str] = None, voice_id: Optional[str] = None,
                  voice_enabled: bool = True, priority: str = "normal") -> Dict[str, Any]:
    """
    Assemble the notification body.

    The title defaults to the assistant name (DA) and the voice to
    ELEVENLABS_VOICE_ID; the message is cut to the server's limit.
    """
    payload: Dict[str, Any] = {
        "title": title or get_assistant_name(),
        "message": message[:MAX_MESSAGE_LENGTH],
        "voice_enabled": voice_enabled,
        "priority": priority,
    }
    voice_id = voice_id or os.getenv("ELEVENLABS_VOICE_ID", "").strip()
    if voice_id:
        payload["voice_id"] = voice_id
    return payload


def send_notification(payload: Dict[str, Any], url: Optional[str] = None,
                      timeout: float = NOTIFY_TIMEOUT) -> bool:
    """
    POST the payload to the voice server.

    Returns:
        bool: True if the server answered 2xx; every failure is swallowed
    """
    target = url or get_notify_url()
    try:
        response = httpx.post(target, json=payload, timeout=timeout)
    except httpx.HTTPError as e:
        logger.debug("Voice server unavailable at %s: %s", target, e)
        return False

    if response.is_success:
        return True
    logger.debug("Voice server rejected notification (%d): %s", response.status_code, response.text[:200])
    return False
