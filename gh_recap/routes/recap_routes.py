"""Recap route: POST /api/recap."""

from datetime import datetime

from flask import Blueprint, jsonify, request

from gh_recap.extensions import recap_cache
from gh_recap.routes import error_response
from gh_recap.services.github_service import RateLimitError
from gh_recap.services.recap_service import get_recap, normalize_username, validate_year

recap_bp = Blueprint("recap", __name__)


@recap_bp.route("/api/recap", methods=["POST"])
def post_recap():
    """Build a year-in-review recap.

    Body: {username, year, token?, includeComparison?}
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}

    username = body.get("username")
    username = normalize_username(username if isinstance(username, str) else "")
    year = body.get("year")
    if year is None:
        year = datetime.now().year
    token = body.get("token") if isinstance(body.get("token"), str) else None
    include_comparison = body.get("includeComparison")
    if include_comparison is None:
        include_comparison = True

    if not username:
        return error_response("Please provide a GitHub username (username)", 400)
    if not validate_year(year):
        return error_response("Invalid year parameter", 400, f"Rejected year {year!r}")

    try:
        resp = get_recap(
            username,
            int(year),
            client_token=token,
            include_comparison=bool(include_comparison),
            cache=recap_cache,
        )
        return jsonify(resp.to_dict())
    except RateLimitError as e:
        headers = {}
        if e.retry_after_seconds is not None:
            headers["Retry-After"] = str(e.retry_after_seconds)
        return error_response(str(e), 429, f"Rate limited fetching recap for {username}: {e}", headers)
    except Exception as e:
        message = str(e) or "Failed to fetch GitHub data"
        return error_response(message, 500, f"Failed to build recap for {username}: {e}")
