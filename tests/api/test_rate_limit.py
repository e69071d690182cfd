import pytest

from carousel.reviews.api.reviews.rate_limit import (
    DEFAULT_CLIENT_IP,
    RateLimiter,
    client_ip_from_headers,
)


def test_allows_up_to_limit_then_blocks(clock):
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)

    decisions = [limiter.check("1.2.3.4") for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]


def test_window_resets(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert limiter.check("ip").allowed
    assert not limiter.check("ip").allowed

    clock.advance(60)
    assert limiter.check("ip").allowed


def test_clients_are_independent(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert limiter.check("a").allowed
    assert limiter.check("b").allowed
    assert not limiter.check("a").allowed


def test_reset_in_counts_down(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.check("ip")
    clock.advance(15)
    decision = limiter.check("ip")
    assert decision.reset_in == pytest.approx(45)


def test_rejects_bad_limit():
    with pytest.raises(ValueError):
        RateLimiter(max_requests=0)


def test_client_ip_from_forwarded_for():
    headers = {"x-forwarded-for": "10.0.0.1, 172.16.0.1", "x-real-ip": "10.9.9.9"}
    assert client_ip_from_headers(headers) == "10.0.0.1"


def test_client_ip_from_real_ip():
    assert client_ip_from_headers({"x-real-ip": "10.9.9.9"}) == "10.9.9.9"


def test_client_ip_fallbacks():
    assert client_ip_from_headers({}, fallback="192.168.1.2") == "192.168.1.2"
    assert client_ip_from_headers({}) == DEFAULT_CLIENT_IP
