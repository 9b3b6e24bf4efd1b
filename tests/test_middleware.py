"""
Tests for the request log and the per-client rate limiter.
"""
from webapp.backend.middleware import RateLimiter, RequestLog, RequestLogger


def test_rate_limiter_blocks_over_limit_and_recovers(clock):
    limiter = RateLimiter(max_requests=2, window=900, clock=clock)
    assert limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.1")
    assert not limiter.hit("10.0.0.1")
    assert limiter.remaining("10.0.0.1") == 0
    assert limiter.retry_after("10.0.0.1") == 901

    clock.advance(901)
    assert limiter.hit("10.0.0.1")
    assert limiter.remaining("10.0.0.1") == 1


def test_idle_clients_are_forgotten_after_the_window(clock):
    limiter = RateLimiter(max_requests=100, window=900, clock=clock)
    for n in range(5000):
        limiter.hit(f"10.0.{n // 256}.{n % 256}")
    assert len(limiter) == 5000

    clock.advance(10000)
    limiter.hit("192.168.1.1")
    assert len(limiter) == 1


def test_lookups_do_not_track_unknown_clients(clock):
    limiter = RateLimiter(max_requests=5, window=60, clock=clock)
    assert limiter.remaining("10.0.0.9") == 5
    assert limiter.retry_after("10.0.0.9") is None
    assert len(limiter) == 0


def test_expired_calls_drop_the_client_on_lookup(clock):
    limiter = RateLimiter(max_requests=5, window=60, clock=clock)
    limiter.hit("10.0.0.1")
    clock.advance(61)
    assert limiter.remaining("10.0.0.1") == 5
    assert len(limiter) == 0


def test_request_logger_stats():
    request_logger = RequestLogger(max_logs=3)
    for url, status in [("/a", 200), ("/a", 200), ("/b", 404), ("/a", 502)]:
        request_logger.log(RequestLog(
            method="GET", url=url, statusCode=status, responseTime=10.0,
            ip="127.0.0.1", userAgent="pytest", timestamp="2024-01-01T00:00:00Z",
        ))

    stats = request_logger.get_stats()
    assert stats["totalRequests"] == 3
    assert stats["statusCodes"] == {"200": 1, "404": 1, "502": 1}
    assert stats["topEndpoints"][0] == {"url": "/a", "count": 2}
    assert [entry["url"] for entry in request_logger.get_logs(2)] == ["/b", "/a"]
    assert request_logger.get_logs(0) == []
