"""
Local voice notification server.

POST /notify -> rate limit -> sanitize -> emotion -> chime -> TTS cascade -> playback
"""
