"""
Voice server configuration.

All settings come from environment variables (or ~/.claude/.env, written by
the Kai installer) with defaults that run with zero configuration: the
platform voice always works.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CLAUDE_DIR = Path.home() / ".claude"
KOKORO_MODELS_DIR = Path.home() / ".kokoro-tts" / "models"

PROVIDER_ALIASES = {
    "elevenlabs": "elevenlabs",
    "cloud": "elevenlabs",
    "kokoro": "kokoro",
    "piper": "kokoro",
    "local": "kokoro",
    "macos": "platform",
    "say": "platform",
    "platform": "platform",
    "system": "platform",
}


class Settings(BaseSettings):
    """Voice server settings loaded from environment variables."""

    # --- Server ---
    host: str = "127.0.0.1"
    port: int = 8888
    log_level: str = "INFO"
    allowed_origin: str = "http://localhost"

    # --- ElevenLabs (cloud) ---
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    elevenlabs_model: str = "eleven_turbo_v2_5"

    # --- Kokoro (local neural) ---
    kokoro_model_path: Path = KOKORO_MODELS_DIR / "kokoro-v1.0.onnx"
    kokoro_voices_path: Path = KOKORO_MODELS_DIR / "voices-v1.0.bin"
    kokoro_voice: str = "am_echo"

    # --- Platform voice ---
    macos_voice: str = "Samantha"

    # --- Cascade / chime ---
    tts_provider: str = "elevenlabs"  # elevenlabs | kokoro | platform
    chime_enabled: bool = True
    chime_path: Path = CLAUDE_DIR / "voice-server" / "chime.mp3"

    # --- Files ---
    voices_config_path: Path = CLAUDE_DIR / "config" / "voice-personalities.json"
    tts_error_log: Path = CLAUDE_DIR / "voice-server" / "tts-errors.log"

    model_config = SettingsConfigDict(
        env_file=(".env", str(CLAUDE_DIR / ".env")),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("elevenlabs_api_key")
    @classmethod
    def _blank_key_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("tts_provider")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        return PROVIDER_ALIASES.get(value.strip().lower(), "elevenlabs")

    @field_validator("kokoro_model_path", "kokoro_voices_path", "chime_path",
                     "voices_config_path", "tts_error_log")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return Path(value).expanduser()

    def snapshot(self) -> Dict[str, Any]:
        """Operator-facing view of the active configuration, secrets omitted."""
        return {
            "port": self.port,
            "tts_provider": self.tts_provider,
            "elevenlabs_key_configured": self.elevenlabs_api_key is not None,
            "elevenlabs_voice_id": self.elevenlabs_voice_id,
            "elevenlabs_model": self.elevenlabs_model,
            "kokoro_model_path": str(self.kokoro_model_path),
            "kokoro_voice": self.kokoro_voice,
            "macos_voice": self.macos_voice,
            "chime_enabled": self.chime_enabled,
            "chime_path": str(self.chime_path),
            "voices_config_path": str(self.voices_config_path),
        }


@lru_cache
def get_settings() -> Settings:
    """
    Return a cached Settings instance.

    Environment variables are read once per process.
    """
    return Settings()
