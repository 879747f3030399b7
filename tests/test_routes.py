from unittest.mock import patch

from gh_recap.models import RecapMeta, RecapResponse, YearlyStatistics
from gh_recap.services.github_service import RateLimitError, UpstreamError, UserNotFoundError


def _response(year=2024):
    stats = YearlyStatistics(year=year, handle="octocat", display_name="Octo", commits=3)
    return RecapResponse(stats=stats, comparison=None, meta=RecapMeta("rest", ["w"]))


def test_recap_success(client):
    with patch("gh_recap.routes.recap_routes.get_recap", return_value=_response()) as get_recap:
        resp = client.post("/api/recap", json={
            "username": "  octocat ", "year": 2024, "token": "tok", "includeComparison": False,
        })

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["stats"]["handle"] == "octocat"
    assert body["stats"]["commits"] == 3
    assert body["comparison"] is None
    assert body["meta"] == {"source": "rest", "warnings": ["w"]}
    args, kwargs = get_recap.call_args
    assert args == ("octocat", 2024)
    assert kwargs["client_token"] == "tok"
    assert kwargs["include_comparison"] is False


def test_recap_defaults_to_comparison(client):
    with patch("gh_recap.routes.recap_routes.get_recap", return_value=_response(0)) as get_recap:
        resp = client.post("/api/recap", json={"username": "octocat", "year": 0})
    assert resp.status_code == 200
    assert get_recap.call_args.kwargs["include_comparison"] is True
    assert get_recap.call_args.args == ("octocat", 0)


def test_recap_requires_username(client):
    resp = client.post("/api/recap", json={"username": "   ", "year": 2024})
    assert resp.status_code == 400
    assert "username" in resp.get_json()["error"]


def test_recap_rejects_bad_year(client):
    for year in (2007, 2101, "2024"):
        resp = client.post("/api/recap", json={"username": "octocat", "year": year})
        assert resp.status_code == 400
        assert "year" in resp.get_json()["error"]


def test_recap_without_body_is_bad_request(client):
    resp = client.post("/api/recap", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_rate_limit_maps_to_429_with_retry_after(client):
    with patch("gh_recap.routes.recap_routes.get_recap", side_effect=RateLimitError("slow down", 42)):
        resp = client.post("/api/recap", json={"username": "octocat", "year": 2024})
    assert resp.status_code == 429
    assert resp.headers["Retry-After"] == "42"
    assert resp.get_json() == {"error": "slow down"}


def test_rate_limit_without_hint_has_no_header(client):
    with patch("gh_recap.routes.recap_routes.get_recap", side_effect=RateLimitError("slow down")):
        resp = client.post("/api/recap", json={"username": "octocat", "year": 2024})
    assert resp.status_code == 429
    assert "Retry-After" not in resp.headers


def test_upstream_and_not_found_map_to_500(client):
    for error in (UpstreamError("Not Found", 404), UserNotFoundError("User not found or inaccessible")):
        with patch("gh_recap.routes.recap_routes.get_recap", side_effect=error):
            resp = client.post("/api/recap", json={"username": "octocat", "year": 2024})
        assert resp.status_code == 500
        assert resp.get_json()["error"] == str(error)


def test_unexpected_error_maps_to_500(client):
    with patch("gh_recap.routes.recap_routes.get_recap", side_effect=KeyError("")):
        resp = client.post("/api/recap", json={"username": "octocat", "year": 2024})
    assert resp.status_code == 500
    assert resp.get_json()["error"]


def test_personality_endpoint(client):
    stats = YearlyStatistics(year=2024, handle="octocat", display_name="Octo", reviews=900,
                             pull_requests=10, merged_prs=10)
    resp = client.post("/api/personality", json=stats.to_dict())
    assert resp.status_code == 200
    assert resp.get_json()["codename"] == "REVIEW: GUARDIAN"
    assert len(resp.get_json()["why"]) == 3


def test_personality_endpoint_rejects_garbage(client):
    resp = client.post("/api/personality", json={"year": 2024})
    assert resp.status_code == 400


def test_clear_cache(client):
    from gh_recap.extensions import recap_cache

    recap_cache.set("rest:octocat:2024", "x")
    resp = client.post("/api/clear-cache")
    assert resp.status_code == 200
    assert len(recap_cache) == 0


def test_healthz(client):
    assert client.get("/healthz").get_json() == {"ok": True}


def test_personality_endpoint_rejects_overflowing_numbers(client):
    resp = client.post("/api/personality", data='{"handle": "x", "commits": 1e400}',
                       content_type="application/json")
    assert resp.status_code == 400


def test_recap_rejects_fractional_year(client):
    with patch("gh_recap.routes.recap_routes.get_recap") as get_recap:
        resp = client.post("/api/recap", json={"username": "octocat", "year": 2008.9})
    assert resp.status_code == 400
    get_recap.assert_not_called()
