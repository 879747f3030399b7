"""GitHub API client: REST GET and GraphQL POST with classified errors."""

import logging
import math
import time

import requests

from gh_recap.config import get_config

logger = logging.getLogger(__name__)

session = requests.Session()


class GitHubAPIError(RuntimeError):
    """Base class for failures talking to GitHub."""


class RateLimitError(GitHubAPIError):
    """GitHub quota exhausted. retry_after_seconds is None when unknown."""

    def __init__(self, message, retry_after_seconds=None):
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class UpstreamError(GitHubAPIError):
    """Any other non-success response from GitHub."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class UserNotFoundError(GitHubAPIError):
    """GraphQL resolved the requested user to null."""


REST_RATE_LIMIT_MESSAGE = (
    "GitHub API rate limit reached: retry later, or supply a token "
    "(authenticated requests have a higher quota)."
)
GRAPHQL_RATE_LIMIT_MESSAGE = (
    "GitHub API rate limit reached: retry later, or use a token with a higher quota."
)


def _headers(token=None, accept="application/vnd.github+json"):
    config = get_config()
    headers = {
        "Accept": accept,
        "User-Agent": config.get("user_agent", "github-recap"),
        "X-GitHub-Api-Version": config.get("github_api_version", "2022-11-28"),
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _to_number(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_rate_limit(headers, clock=time.time):
    """Read GitHub's rate-limit headers.

    Returns:
        tuple: (is_exhausted, retry_after_seconds) - retry_after_seconds is None
        when the reset header is missing or unparseable.
    """
    remaining = _to_number(headers.get("X-RateLimit-Remaining"))
    reset = _to_number(headers.get("X-RateLimit-Reset"))
    is_exhausted = remaining is not None and remaining <= 0
    retry_after = None
    if reset is not None:
        retry_after = max(0, math.ceil(reset - clock()))
    return is_exhausted, retry_after


def read_error_text(response):
    """Prefer the JSON body's "message", falling back to the raw text."""
    text = response.text or ""
    try:
        body = response.json()
    except ValueError:
        return text
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return text


def rest_get(path, token=None, params=None, clock=time.time):
    """GET a GitHub REST resource and return the parsed JSON.

    Args:
        path: Path under the API base URL (e.g. "/users/octocat") or a full URL.
        token: Optional bearer token.
        params: Optional query parameters.
        clock: Epoch-seconds clock used to compute retry-after.

    Raises:
        RateLimitError: the response is a failure and the quota is exhausted.
        UpstreamError: any other failure, including transport errors.
    """
    config = get_config()
    url = path if path.startswith("http") else f"{config['github_api_url']}{path}"
    try:
        resp = session.get(
            url,
            headers=_headers(token),
            params=params,
            timeout=config.get("request_timeout_seconds", 20),
        )
    except requests.RequestException as e:
        logger.error(f"GitHub REST request failed for {url}: {e}")
        raise UpstreamError(f"GitHub REST request failed: {e}")

    if not resp.ok:
        is_exhausted, retry_after = parse_rate_limit(resp.headers, clock)
        message = read_error_text(resp)
        logger.error(f"GitHub REST error {resp.status_code}: {message}")
        if is_exhausted:
            raise RateLimitError(REST_RATE_LIMIT_MESSAGE, retry_after)
        raise UpstreamError(
            message or f"GitHub REST request failed ({resp.status_code})",
            status_code=resp.status_code,
        )

    try:
        return resp.json()
    except ValueError as e:
        logger.error(f"GitHub REST response for {url} is not JSON: {e}")
        raise UpstreamError("GitHub REST response was not valid JSON", status_code=resp.status_code)


def graphql_query(token, query, variables):
    """POST a GraphQL query and return its "data" object.

    A non-2xx status or a non-empty "errors" array is a failure. The first
    error message decides between RateLimitError and UpstreamError.
    """
    config = get_config()
    try:
        resp = session.post(
            config["github_graphql_url"],
            headers=_headers(token, accept="application/json"),
            json={"query": query, "variables": variables},
            timeout=config.get("request_timeout_seconds", 20),
        )
    except requests.RequestException as e:
        logger.error(f"GitHub GraphQL request failed: {e}")
        raise UpstreamError(f"GitHub GraphQL request failed: {e}")

    try:
        body = resp.json()
    except ValueError as e:
        if resp.ok:
            logger.error(f"GitHub GraphQL response is not JSON: {e}")
            raise UpstreamError("GitHub GraphQL response was not valid JSON", status_code=resp.status_code)
        body = None
    if not isinstance(body, dict):
        body = {}

    errors = body.get("errors") or []
    if not resp.ok or errors:
        first = errors[0] if errors and isinstance(errors[0], dict) else {}
        message = first.get("message") or f"GitHub GraphQL request failed ({resp.status_code})"
        logger.error(f"GitHub GraphQL error {resp.status_code}: {errors or message}")
        if "rate limit" in message.lower():
            raise RateLimitError(GRAPHQL_RATE_LIMIT_MESSAGE)
        raise UpstreamError(message, status_code=resp.status_code)

    return body.get("data") or {}
