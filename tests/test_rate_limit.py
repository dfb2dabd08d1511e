import pytest

from kai.voice_server.errors import RateLimitExceeded
from kai.voice_server.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_request_after_limit_is_rejected_then_recovers():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)

    for _ in range(3):
        limiter.check("127.0.0.1")
    with pytest.raises(RateLimitExceeded) as exc:
        limiter.check("127.0.0.1")
    assert exc.value.status_code == 429
    assert exc.value.retry_after == pytest.approx(60)

    clock.now += 60
    limiter.check("127.0.0.1")
    assert limiter.remaining("127.0.0.1") == 2


def test_rejected_requests_do_not_extend_the_window():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)
    limiter.check("a")

    clock.now += 5
    with pytest.raises(RateLimitExceeded):
        limiter.check("a")
    clock.now += 5
    limiter.check("a")


def test_clients_are_counted_separately():
    limiter = RateLimiter(max_requests=1, clock=FakeClock())
    limiter.check("a")
    limiter.check("b")
    assert limiter.remaining("a") == 0
    assert limiter.remaining("c") == 1

    limiter.reset()
    assert limiter.remaining("a") == 1
