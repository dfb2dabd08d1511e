#!/usr/bin/env python3
"""Start the Kai voice server: `python -m kai.voice_server` or `kai-voice-server`."""

import argparse

import uvicorn

from kai.voice_server.app import create_app
from kai.voice_server.config import get_settings


def main():
    parser = argparse.ArgumentParser(description="Kai voice notification server")
    parser.add_argument("--host", help="Bind address (default: HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port (default: PORT or 8888)")
    args = parser.parse_args()

    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
