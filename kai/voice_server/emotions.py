"""
Emotion tags and voice settings resolution.

A message may start with (or contain) a tag such as "[💥 excited]". When
the emoji and the label agree with EMOTIONS, the tag is removed from the
spoken text and its preset drives the synthesis parameters.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from kai.voice_server.voice_config import VoicesConfig


@dataclass(frozen=True)
class VoiceSettings:
    stability: float = 0.5
    similarity_boost: float = 0.5

    def as_dict(self) -> Dict[str, float]:
        return {"stability": self.stability, "similarity_boost": self.similarity_boost}


@dataclass(frozen=True)
class Emotion:
    emoji: str
    settings: VoiceSettings


EMOTIONS: Dict[str, Emotion] = {
    "excited": Emotion("💥", VoiceSettings(0.7, 0.9)),
    "celebration": Emotion("🎉", VoiceSettings(0.65, 0.85)),
    "insight": Emotion("💡", VoiceSettings(0.55, 0.8)),
    "creative": Emotion("🎨", VoiceSettings(0.5, 0.75)),
    "success": Emotion("✨", VoiceSettings(0.6, 0.8)),
    "progress": Emotion("📈", VoiceSettings(0.55, 0.75)),
    "investigating": Emotion("🔍", VoiceSettings(0.6, 0.85)),
    "debugging": Emotion("🐛", VoiceSettings(0.55, 0.8)),
    "learning": Emotion("📚", VoiceSettings(0.5, 0.75)),
    "pondering": Emotion("🤔", VoiceSettings(0.65, 0.8)),
    "focused": Emotion("🎯", VoiceSettings(0.7, 0.85)),
    "caution": Emotion("⚠️", VoiceSettings(0.4, 0.6)),
    "urgent": Emotion("🚨", VoiceSettings(0.3, 0.9)),
}

DEFAULT_VOICE_SETTINGS = VoiceSettings(0.5, 0.5)

EMOTION_TAG_RE = re.compile(r"\[\s*([^\w\s\]]+)\s+([A-Za-z]+)\s*\]")


def _normalize_emoji(emoji: str) -> str:
    # Drop variation selectors so "⚠" and "⚠️" compare equal
    return emoji.replace("\ufe0f", "").strip()


def extract_emotion(text: str) -> Tuple[str, Optional[str]]:
    """
    Pull the first valid emotion tag out of text.

    Returns:
        (text without the tag, emotion name) when emoji and label agree,
        otherwise (text unchanged, None)
    """
    for match in EMOTION_TAG_RE.finditer(text):
        emoji, label = match.group(1), match.group(2).lower()
        emotion = EMOTIONS.get(label)
        if emotion is None or _normalize_emoji(emotion.emoji) != _normalize_emoji(emoji):
            continue
        stripped = text[:match.start()] + text[match.end():]
        return re.sub(r"\s{2,}", " ", stripped).strip(), label
    return text, None


def resolve_voice_settings(emotion: Optional[str], voice: Optional[str],
                           voices: Optional[VoicesConfig] = None) -> VoiceSettings:
    """
    Pick synthesis parameters.

    Priority: emotion preset > personality profile (by key or voice id) > flat default
    """
    if emotion and emotion in EMOTIONS:
        return EMOTIONS[emotion].settings

    if voices is not None:
        profile = voices.resolve(voice)
        if profile is not None:
            return VoiceSettings(profile.stability, profile.similarity_boost)

    return DEFAULT_VOICE_SETTINGS
