"""
Tests for the sliding-window rate limiter
"""

from server.middleware.metrics import normalize_endpoint
from server.rate_limiter import InMemoryRateLimiter


class TestSlidingWindow:
    def test_allows_up_to_limit(self):
        limiter = InMemoryRateLimiter(requests_limit=3, window_seconds=60)

        results = [limiter.check_rate_limit("client", now=100.0 + i) for i in range(3)]

        assert [allowed for allowed, _, _ in results] == [True, True, True]
        assert [remaining for _, remaining, _ in results] == [2, 1, 0]

    def test_blocks_over_limit_with_retry_after(self):
        limiter = InMemoryRateLimiter(requests_limit=2, window_seconds=60)
        limiter.check_rate_limit("client", now=100.0)
        limiter.check_rate_limit("client", now=110.0)

        allowed, remaining, info = limiter.check_rate_limit("client", now=120.0)

        assert not allowed
        assert remaining == 0
        assert info["retry_after"] == 41

    def test_window_slides(self):
        limiter = InMemoryRateLimiter(requests_limit=1, window_seconds=60)
        limiter.check_rate_limit("client", now=100.0)

        assert not limiter.check_rate_limit("client", now=159.0)[0]
        assert limiter.check_rate_limit("client", now=160.0)[0]

    def test_clients_independent(self):
        limiter = InMemoryRateLimiter(requests_limit=1, window_seconds=60)
        limiter.check_rate_limit("a", now=100.0)
        assert limiter.check_rate_limit("b", now=100.0)[0]

    def test_reset(self):
        limiter = InMemoryRateLimiter(requests_limit=1, window_seconds=60)
        limiter.check_rate_limit("a", now=100.0)
        limiter.reset()
        assert limiter.check_rate_limit("a", now=101.0)[0]


class TestEndpointNormalization:
    def test_numeric_segments_collapsed(self):
        assert normalize_endpoint("/api/admin/contestants/12") == "/api/admin/contestants/:id"
        assert normalize_endpoint("/api/results") == "/api/results"
        assert normalize_endpoint("/") == "/"
