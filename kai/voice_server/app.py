"""
Kai voice server - FastAPI application factory.

Accepts notifications from the hooks on localhost, answers immediately and
speaks the message in a background task.

Run with `kai-voice-server`, or
`uvicorn --factory kai.voice_server.app:create_app`.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from kai import __version__
from kai.log_utils import configure_server_logging
from kai.voice_server.config import Settings, get_settings
from kai.voice_server.emotions import extract_emotion
from kai.voice_server.errors import InvalidInputError, NotificationError, RateLimitExceeded
from kai.voice_server.middleware import AllowedOriginMiddleware, RequestLoggingMiddleware
from kai.voice_server.notifier import VoiceNotifier
from kai.voice_server.rate_limit import RateLimiter
from kai.voice_server.sanitize import clean_field, validate_voice_id
from kai.voice_server.voice_config import VoicesConfig

logger = logging.getLogger("kai.voice_server")

DEFAULT_TITLE = "Notification"
BANNER = "Kai voice server - POST /notify to speak, GET /health for status"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info(
        "Kai voice server v%s listening on %s:%d (preferred provider: %s)",
        __version__,
        settings.host,
        settings.port,
        settings.tts_provider,
    )
    yield
    logger.info("Kai voice server shutting down")


def _client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


def create_app(settings: Optional[Settings] = None,
               notifier: Optional[VoiceNotifier] = None,
               rate_limiter: Optional[RateLimiter] = None,
               clock: Callable[[], float] = time.time,
               configure_logging: bool = True) -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = settings or get_settings()
    if configure_logging:
        configure_server_logging(settings.log_level)

    if notifier is None:
        voices = VoicesConfig(settings.voices_config_path)
        voices.load()
        notifier = VoiceNotifier(settings, voices)

    app = FastAPI(
        title="Kai Voice Server",
        version=__version__,
        description="Spoken notifications for Claude Code sessions.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.notifier = notifier
    app.state.rate_limiter = rate_limiter or RateLimiter()
    app.state.started_at = clock()

    # --- Exception Handlers ---
    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning("%s", exc)
        response = _error_response(exc.status_code, str(exc))
        response.headers["Retry-After"] = str(max(1, int(exc.retry_after + 0.999)))
        return response

    @app.exception_handler(NotificationError)
    async def notification_error_handler(request: Request, exc: NotificationError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Notification failed: %s", exc)
        else:
            logger.info("Rejected request from %s: %s", _client_address(request), exc)
        return _error_response(exc.status_code, str(exc))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch unhandled exceptions and return a clean 500 response."""
        logger.exception(
            "Unhandled error | %s %s | %s",
            request.method,
            request.url.path,
            str(exc),
        )
        return _error_response(500, "Internal server error")

    # --- Middleware (last added = first executed) ---
    app.add_middleware(AllowedOriginMiddleware, allowed_origin=settings.allowed_origin)
    app.add_middleware(RequestLoggingMiddleware)

    # --- Routes ---
    @app.post("/notify")
    async def notify(request: Request, background_tasks: BackgroundTasks) -> Dict[str, str]:
        """Validate a notification and queue it for speech."""
        request.app.state.rate_limiter.check(_client_address(request))

        try:
            body = await request.json()
        except ValueError:
            raise InvalidInputError("Invalid request body: expected JSON")
        if not isinstance(body, dict):
            raise InvalidInputError("Invalid request body: expected a JSON object")

        message = clean_field(body.get("message"), "message")
        title = clean_field(body.get("title"), "title", required=False) or DEFAULT_TITLE

        voice_enabled = body.get("voice_enabled", True)
        if not isinstance(voice_enabled, bool):
            raise InvalidInputError("Invalid voice_enabled: must be a boolean")

        voice = validate_voice_id(body.get("voice_id") or body.get("voice_name"))

        spoken, emotion = extract_emotion(message)
        if not spoken:
            spoken = title

        logger.info(
            "Notification '%s': %s%s",
            title,
            spoken,
            f" [{emotion}]" if emotion else "",
        )
        if voice_enabled:
            background_tasks.add_task(
                request.app.state.notifier.notify, spoken, voice_id=voice, emotion=emotion
            )

        return {"status": "success", "message": "Notification sent"}

    @app.get("/health")
    async def health(request: Request) -> Dict[str, Any]:
        """Return provider availability, configuration and uptime."""
        state = request.app.state
        return {
            "status": "healthy",
            "version": __version__,
            "providers": state.notifier.cascade.status(),
            "config": state.settings.snapshot(),
            "uptime_seconds": round(clock() - state.started_at, 2),
        }

    @app.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=204)

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"])
    async def banner(path: str) -> PlainTextResponse:
        return PlainTextResponse(BANNER)

    return app
