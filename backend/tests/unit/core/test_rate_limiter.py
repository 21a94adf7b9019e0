"""
Unit Tests for the rate limit key
"""
from starlette.requests import Request

from app.core.rate_limiter import get_user_identifier


def make_request(host: str) -> Request:
    return Request({"type": "http", "method": "POST", "path": "/", "headers": [], "client": (host, 52100)})


class TestRateLimitKey:

    def test_keyed_by_client_ip(self):
        assert get_user_identifier(make_request("10.0.0.7")) == "ip:10.0.0.7"

    def test_request_state_is_ignored(self):
        request = make_request("10.0.0.8")
        request.state.user_id = "someone"

        assert get_user_identifier(request) == "ip:10.0.0.8"
