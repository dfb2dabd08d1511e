"""
Voice personality configuration for the voice server.

Layered settings: voice-personalities.json > built-in defaults

The file maps personality keys (agent roles) to ElevenLabs voice presets:

    {
      "default_volume": 0.8,
      "voices": {
        "engineer": {"voice_id": "...", "stability": 0.6, "similarity_boost": 0.8,
                     "description": "Steady, precise"}
      }
    }

Loaded once at startup and read-only afterwards.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_VOLUME = 0.8


@dataclass(frozen=True)
class VoiceProfile:
    """Synthesis preset for one personality"""
    key: str
    voice_id: str
    stability: float = 0.5
    similarity_boost: float = 0.5
    description: str = ""


class VoicesConfig:
    """Personality presets merged over built-in defaults"""

    DEFAULT_CONFIG: Dict[str, Any] = {
        "default_volume": DEFAULT_VOLUME,
        "voices": {
            "kai": {
                "voice_id": "21m00Tcm4TlvDq8ikWAM",
                "stability": 0.5,
                "similarity_boost": 0.75,
                "description": "Primary assistant, warm and clear",
            },
            "engineer": {
                "voice_id": "pNInz6obpgDQGcFmaJgB",
                "stability": 0.65,
                "similarity_boost": 0.8,
                "description": "Steady and precise",
            },
            "architect": {
                "voice_id": "ErXwobaYiN019PkySvjV",
                "stability": 0.7,
                "similarity_boost": 0.8,
                "description": "Measured, deliberate",
            },
            "researcher": {
                "voice_id": "AZnzlk1XvdvUeBnXmlld",
                "stability": 0.55,
                "similarity_boost": 0.75,
                "description": "Curious, energetic",
            },
            "designer": {
                "voice_id": "MF3mGyEYCl7XYWbV9V6O",
                "stability": 0.45,
                "similarity_boost": 0.7,
                "description": "Expressive",
            },
            "pentester": {
                "voice_id": "TxGEqnHWrfWFTfGW9XjX",
                "stability": 0.4,
                "similarity_boost": 0.75,
                "description": "Quick, playful",
            },
            "writer": {
                "voice_id": "yoZ06aMxZJJ28mfd3POQ",
                "stability": 0.6,
                "similarity_boost": 0.7,
                "description": "Calm narrator",
            },
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path).expanduser() if config_path else None
        self._config_cache: Optional[Dict[str, Any]] = None

    def load(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Load presets with hierarchy: file > defaults

        Args:
            force_reload: If True, ignore cache and reload from file

        Returns:
            Dict containing merged configuration
        """
        if self._config_cache is not None and not force_reload:
            return self._config_cache

        config = json.loads(json.dumps(self.DEFAULT_CONFIG))

        if self.config_path is not None and self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    file_config = json.load(f)
                if isinstance(file_config, dict):
                    config = self._deep_merge(config, file_config)
                else:
                    logger.warning("Ignoring %s: expected a JSON object", self.config_path)
            except (json.JSONDecodeError, IOError) as e:
                # Keep defaults, a broken file must not stop the server
                logger.error("Failed to load voice personalities from %s: %s", self.config_path, e)

        self._config_cache = config
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value with dot notation support

        Args:
            key: Setting key, e.g. "voices.engineer.stability"
            default: Default value if key not found
        """
        value: Any = self.load()
        try:
            for k in key.split("."):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    @property
    def default_volume(self) -> float:
        """Playback volume clamped to 0.0-1.0."""
        try:
            volume = float(self.get("default_volume", DEFAULT_VOLUME))
        except (TypeError, ValueError):
            return DEFAULT_VOLUME
        return min(1.0, max(0.0, volume))

    def profiles(self) -> Dict[str, VoiceProfile]:
        voices = self.get("voices", {}) or {}
        result = {}
        for key, entry in voices.items():
            if not isinstance(entry, dict) or not entry.get("voice_id"):
                continue
            try:
                result[key] = VoiceProfile(
                    key=key,
                    voice_id=str(entry["voice_id"]),
                    stability=float(entry.get("stability", 0.5)),
                    similarity_boost=float(entry.get("similarity_boost", 0.5)),
                    description=str(entry.get("description", "")),
                )
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed voice profile %r: %s", key, e)
        return result

    def resolve(self, voice: Optional[str]) -> Optional[VoiceProfile]:
        """Find a profile by personality key or by literal provider voice id."""
        if not voice:
            return None
        profiles = self.profiles()
        if voice in profiles:
            return profiles[voice]
        lowered = voice.lower()
        if lowered in profiles:
            return profiles[lowered]
        for profile in profiles.values():
            if profile.voice_id == voice:
                return profile
        return None

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
