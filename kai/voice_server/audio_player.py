#!/usr/bin/env python3
"""
Cross-platform audio playback for the voice server

Plays synthesized speech and chimes at a given volume (0.0-1.0).
- macOS: afplay -v (native)
- Windows: pygame (with winsound / PowerShell MediaPlayer fallback)
- Linux: pygame, then ffplay, then aplay for WAV
"""

import logging
import os
import subprocess
import sys
import tempfile
import time
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def _clamp_volume(volume: float) -> float:
    return min(1.0, max(0.0, float(volume)))


def play_audio_file(file_path: str, volume: float = 0.8, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """
    Play an audio file using platform-appropriate method.

    Args:
        file_path: Path to audio file (WAV, MP3 or AIFF)
        volume: Playback volume between 0.0 and 1.0
        timeout: Maximum playback time in seconds

    Returns:
        bool: True if playback succeeded
    """
    volume = _clamp_volume(volume)
    if sys.platform == "darwin":
        return _play_macos(file_path, volume, timeout)
    elif sys.platform == "win32":
        return _play_windows(file_path, volume, timeout)
    else:
        return _play_linux(file_path, volume, timeout)


def play_audio_bytes(data: bytes, suffix: str, volume: float = 0.8, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """
    Write audio to a uniquely named temp file, play it, then delete it.

    The file is removed whether or not playback worked.
    """
    # delete=False so players on Windows can open the closed file
    tmp_file = tempfile.NamedTemporaryFile(prefix="kai-voice-", suffix=suffix, delete=False)
    tmp_path = tmp_file.name
    try:
        tmp_file.write(data)
        tmp_file.close()
        return play_audio_file(tmp_path, volume=volume, timeout=timeout)
    finally:
        tmp_file.close()
        try:
            os.unlink(tmp_path)
        except OSError as e:
            logger.warning("Could not remove temp audio %s: %s", tmp_path, e)


def _play_macos(file_path: str, volume: float, timeout: int) -> bool:
    """macOS audio playback using afplay"""
    try:
        subprocess.run(["afplay", "-v", f"{volume:.2f}", file_path], check=True, timeout=timeout)
        return True
    except (subprocess.TimeoutExpired, subprocess.SubprocessError, FileNotFoundError) as e:
        logger.warning("afplay failed for %s: %s", file_path, e)
        return False


def _play_with_pygame(file_path: str, volume: float, timeout: int) -> bool:
    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    import pygame

    try:
        pygame.mixer.init()
        pygame.mixer.music.load(file_path)
        pygame.mixer.music.set_volume(volume)
        pygame.mixer.music.play()

        # Wait for playback to complete or timeout
        start = time.time()
        while pygame.mixer.music.get_busy():
            if time.time() - start > timeout:
                pygame.mixer.music.stop()
                break
            time.sleep(0.1)
        return True
    except pygame.error as e:
        logger.debug("pygame playback failed for %s: %s", file_path, e)
        return False


def _play_windows(file_path: str, volume: float, timeout: int) -> bool:
    """Windows audio playback using pygame, winsound or PowerShell"""
    if _play_with_pygame(file_path, volume, timeout):
        return True

    # winsound has no volume control and only handles WAV
    if Path(file_path).suffix.lower() == ".wav":
        try:
            import winsound
            winsound.PlaySound(file_path, winsound.SND_FILENAME)
            return True
        except RuntimeError as e:
            logger.debug("winsound failed for %s: %s", file_path, e)

    try:
        escaped_path = file_path.replace("'", "''")
        ps_cmd = f'''
Add-Type -AssemblyName presentationCore
$mediaPlayer = New-Object System.Windows.Media.MediaPlayer
$mediaPlayer.Volume = {volume:.2f}
$mediaPlayer.Open([Uri]'{escaped_path}')
$mediaPlayer.Play()
Start-Sleep -Seconds {min(timeout, 10)}
'''
        subprocess.run(["powershell", "-Command", ps_cmd], capture_output=True, timeout=timeout + 2)
        return True
    except (subprocess.SubprocessError, FileNotFoundError) as e:
        logger.warning("PowerShell playback failed for %s: %s", file_path, e)
        return False


def _play_linux(file_path: str, volume: float, timeout: int) -> bool:
    """Linux audio playback using pygame, ffplay or aplay"""
    if _play_with_pygame(file_path, volume, timeout):
        return True

    try:
        subprocess.run(
            ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet",
             "-volume", str(int(volume * 100)), file_path],
            check=True,
            capture_output=True,
            timeout=timeout,
        )
        return True
    except (FileNotFoundError, subprocess.SubprocessError) as e:
        logger.debug("ffplay failed for %s: %s", file_path, e)

    # aplay ignores volume but is present on most ALSA systems
    if Path(file_path).suffix.lower() == ".wav":
        try:
            subprocess.run(["aplay", "-q", file_path], check=True, timeout=timeout)
            return True
        except (FileNotFoundError, subprocess.SubprocessError) as e:
            logger.debug("aplay failed for %s: %s", file_path, e)

    logger.warning("No working audio player for %s", file_path)
    return False
