"""Errors surfaced to /notify callers."""


class NotificationError(Exception):
    """Base class for request-level failures (HTTP 500 unless overridden)"""
    status_code = 500


class InvalidInputError(NotificationError):
    """Malformed, oversized or empty-after-sanitization input (HTTP 400)"""
    status_code = 400


class RateLimitExceeded(NotificationError):
    """Caller exceeded the per-window request limit (HTTP 429)"""
    status_code = 429

    def __init__(self, client: str, retry_after: float = 0.0):
        super().__init__(f"Rate limit exceeded for {client}")
        self.client = client
        self.retry_after = retry_after
