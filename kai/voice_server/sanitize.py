"""
Input validation and sanitization for spoken notifications.

Messages end up as arguments to `say` and audio players, so anything that
looks like markup, shell syntax or a path escape is removed before it gets
near a subprocess. This is not a general HTML sanitizer.
"""

import re
from typing import Any, Optional

from kai.voice_server.errors import InvalidInputError

MAX_TEXT_LENGTH = 500

SCRIPT_TAG_RE = re.compile(r"<\s*/?\s*script\b[^>]*>?", re.IGNORECASE)
COMMAND_SUBSTITUTION_RE = re.compile(r"\$\([^)]*\)?|`[^`]*`?")
PATH_TRAVERSAL_RE = re.compile(r"\.\.[\\/]+|[\\/]\.\.(?=[\\/]|$)")
SHELL_METACHARACTERS_RE = re.compile(r"[;&|`$<>(){}\\]")
MARKDOWN_RE = re.compile(r"\*\*|__|\*|~~|```|`")
HEADING_RE = re.compile(r"^[ \t]*#{1,6}[ \t]+", re.MULTILINE)
VOICE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_text(value: Any, field: str, required: bool = True) -> Optional[str]:
    """
    Check a raw request field before sanitization.

    Raises:
        InvalidInputError: Missing (when required), not a string, or too long
    """
    if value is None:
        if required:
            raise InvalidInputError(f"Invalid {field}: field is required")
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"Invalid {field}: must be a string")
    if len(value) > MAX_TEXT_LENGTH:
        raise InvalidInputError(f"Invalid {field}: longer than {MAX_TEXT_LENGTH} characters")
    return value


def sanitize_for_speech(text: str) -> str:
    """
    Remove dangerous or unspeakable content and cap the length.

    Strips <script> tags, command substitutions, path traversal, shell
    metacharacters and markdown markup. Safe text only loses surrounding
    whitespace.
    """
    text = SCRIPT_TAG_RE.sub("", text)
    text = COMMAND_SUBSTITUTION_RE.sub("", text)
    text = PATH_TRAVERSAL_RE.sub("", text)
    text = SHELL_METACHARACTERS_RE.sub("", text)
    text = HEADING_RE.sub("", text)
    text = MARKDOWN_RE.sub("", text)
    return text.strip()[:MAX_TEXT_LENGTH].strip()


def clean_field(value: Any, field: str, required: bool = True) -> Optional[str]:
    """
    Validate then sanitize a request field.

    Raises:
        InvalidInputError: Validation failed or nothing speakable remains
    """
    raw = validate_text(value, field, required=required)
    if raw is None:
        return None
    cleaned = sanitize_for_speech(raw)
    if not cleaned:
        raise InvalidInputError(f"Invalid {field}: empty after sanitization")
    return cleaned


def validate_voice_id(value: Any) -> Optional[str]:
    """
    Check a voice_id / voice_name field.

    The value ends up in the ElevenLabs URL path, so only letters, digits,
    "_" and "-" are accepted.

    Raises:
        InvalidInputError: Not a string, too long or has other characters
    """
    voice = validate_text(value, "voice_id", required=False)
    if voice is None or not voice.strip():
        return None
    voice = voice.strip()
    if not VOICE_ID_RE.match(voice):
        raise InvalidInputError("Invalid voice_id: only letters, digits, '_' and '-' are allowed")
    return voice
