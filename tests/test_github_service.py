from unittest.mock import MagicMock, patch

import pytest
import requests

from gh_recap.services import github_service
from gh_recap.services.github_service import (
    RateLimitError,
    UpstreamError,
    graphql_query,
    parse_rate_limit,
    rest_get,
)


def _response(status=200, body=None, text=None, headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.headers = headers or {}
    resp.text = text if text is not None else ("" if body is None else str(body))
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


def test_rest_get_returns_json_and_sends_bearer_token():
    with patch.object(github_service, "session") as session:
        session.get.return_value = _response(body={"login": "octocat"})
        result = rest_get("/users/octocat", token="abc")

    assert result == {"login": "octocat"}
    url = session.get.call_args.args[0]
    kwargs = session.get.call_args.kwargs
    assert url == "https://api.github.com/users/octocat"
    assert kwargs["headers"]["Authorization"] == "Bearer abc"
    assert kwargs["timeout"] == 20


def test_rest_get_without_token_has_no_auth_header():
    with patch.object(github_service, "session") as session:
        session.get.return_value = _response(body=[])
        rest_get("/users/octocat/repos")
    assert "Authorization" not in session.get.call_args.kwargs["headers"]


def test_rest_get_rate_limited_carries_retry_after():
    headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1000"}
    with patch.object(github_service, "session") as session:
        session.get.return_value = _response(403, body={"message": "API rate limit exceeded"}, headers=headers)
        with pytest.raises(RateLimitError) as exc:
            rest_get("/users/octocat", clock=lambda: 940.5)
    assert exc.value.retry_after_seconds == 60


def test_rest_get_rate_limit_reset_in_past_is_zero():
    headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "100"}
    with patch.object(github_service, "session") as session:
        session.get.return_value = _response(429, body={}, headers=headers)
        with pytest.raises(RateLimitError) as exc:
            rest_get("/users/octocat", clock=lambda: 500)
    assert exc.value.retry_after_seconds == 0


def test_rest_get_other_failure_uses_json_message():
    headers = {"X-RateLimit-Remaining": "42"}
    with patch.object(github_service, "session") as session:
        session.get.return_value = _response(404, body={"message": "Not Found"}, headers=headers)
        with pytest.raises(UpstreamError) as exc:
            rest_get("/users/nobody")
    assert str(exc.value) == "Not Found"
    assert exc.value.status_code == 404
    assert not isinstance(exc.value, RateLimitError)


def test_rest_get_other_failure_falls_back_to_raw_text():
    with patch.object(github_service, "session") as session:
        session.get.return_value = _response(502, text="Bad gateway")
        with pytest.raises(UpstreamError, match="Bad gateway"):
            rest_get("/users/octocat")


def test_rest_get_failure_is_logged():
    with patch.object(github_service, "session") as session, \
            patch.object(github_service, "logger") as logger:
        session.get.return_value = _response(500, text="boom")
        with pytest.raises(UpstreamError):
            rest_get("/users/octocat")
    logged = logger.error.call_args.args[0]
    assert "500" in logged and "boom" in logged


def test_rest_get_transport_error_becomes_upstream_error():
    with patch.object(github_service, "session") as session:
        session.get.side_effect = requests.Timeout("timed out")
        with pytest.raises(UpstreamError, match="timed out"):
            rest_get("/users/octocat")


def test_parse_rate_limit_without_headers():
    assert parse_rate_limit({}) == (False, None)


def test_graphql_returns_data():
    with patch.object(github_service, "session") as session:
        session.post.return_value = _response(body={"data": {"user": {"login": "octocat"}}})
        data = graphql_query("tok", "query { viewer { login } }", {"a": 1})

    assert data == {"user": {"login": "octocat"}}
    kwargs = session.post.call_args.kwargs
    assert kwargs["json"] == {"query": "query { viewer { login } }", "variables": {"a": 1}}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


def test_graphql_errors_array_is_failure_even_with_200():
    body = {"data": None, "errors": [{"message": "Could not resolve to a User"}]}
    with patch.object(github_service, "session") as session:
        session.post.return_value = _response(body=body)
        with pytest.raises(UpstreamError, match="Could not resolve"):
            graphql_query("tok", "q", {})


def test_graphql_rate_limit_message_has_no_retry_hint():
    body = {"errors": [{"message": "API RATE LIMIT exceeded for user"}]}
    with patch.object(github_service, "session") as session:
        session.post.return_value = _response(body=body)
        with pytest.raises(RateLimitError) as exc:
            graphql_query("tok", "q", {})
    assert exc.value.retry_after_seconds is None


def test_graphql_http_failure_without_body():
    with patch.object(github_service, "session") as session:
        session.post.return_value = _response(502, text="<html>")
        with pytest.raises(UpstreamError, match="502"):
            graphql_query("tok", "q", {})


def test_rest_get_non_json_success_body_is_upstream_error():
    with patch.object(github_service, "session") as session, \
            patch.object(github_service, "logger") as logger:
        session.get.return_value = _response(200, text="<html>proxy</html>")
        with pytest.raises(UpstreamError, match="not valid JSON"):
            rest_get("/users/octocat")
    assert logger.error.called


def test_graphql_non_json_success_body_is_upstream_error():
    with patch.object(github_service, "session") as session, \
            patch.object(github_service, "logger") as logger:
        session.post.return_value = _response(200, text="<html>proxy</html>")
        with pytest.raises(UpstreamError, match="not valid JSON"):
            graphql_query("tok", "q", {})
    assert logger.error.called
