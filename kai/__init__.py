"""
Kai voice notifications

Stop-hook completion summaries and a local cascading TTS notification server.
"""

__version__ = "2.0.0"
