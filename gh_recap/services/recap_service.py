"""Recap orchestration: strategy selection, REST caching, year-over-year comparison."""

import logging
import math

from gh_recap.cache.memory_cache import make_key
from gh_recap.config import get_config
from gh_recap.models import (
    ALL_TIME, RecapMeta, RecapResponse, YearChanges, YearComparison,
)
from gh_recap.services.stats_service import fetch_graphql_year_recap, fetch_rest_overview

logger = logging.getLogger(__name__)

MIN_YEAR = 2008
MAX_YEAR = 2100
# Comparison needs a prior year that GitHub can have data for.
FIRST_COMPARABLE_YEAR = 2009

SERVER_TOKEN_NOTE = (
    "The server has a GITHUB_TOKEN configured: yearly contributions are available without a token."
)
REST_TOKEN_ADVICE = (
    "Configure GITHUB_TOKEN on the server or supply a token to avoid public API rate limits."
)


def normalize_username(username):
    return (username or "").strip()


def validate_year(year):
    """True for 0 (all time) or a whole number within [2008, 2100]."""
    if isinstance(year, bool) or not isinstance(year, (int, float)):
        return False
    if not math.isfinite(year) or year != int(year):
        return False
    return year == ALL_TIME or MIN_YEAR <= year <= MAX_YEAR


def calc_change(current, previous):
    """Fractional change; from zero it is 1 if anything happened, else 0."""
    if previous == 0:
        return 1 if current > 0 else 0
    return (current - previous) / previous


def build_comparison(current, previous):
    if previous is None:
        return YearComparison(current=current)
    return YearComparison(
        current=current,
        previous=previous,
        changes=YearChanges(
            commits=calc_change(current.commits, previous.commits),
            pull_requests=calc_change(current.pull_requests, previous.pull_requests),
            issues=calc_change(current.issues, previous.issues),
            reviews=calc_change(current.reviews, previous.reviews),
            active_days=calc_change(current.active_days, previous.active_days),
        ),
    )


def resolve_token(client_token=None):
    """Return (token, from_client): client token first, then the server's."""
    client = (client_token or "").strip()
    if client:
        return client, True
    server = (get_config().get("github_token") or "").strip()
    return server, False


def _fetch_previous_year(username, year, token, use_graphql):
    """Stats for year - 1, or None on any failure."""
    try:
        if use_graphql:
            previous, _ = fetch_graphql_year_recap(username, year - 1, token)
        else:
            previous, _ = fetch_rest_overview(username, year - 1)
        return previous
    except Exception as e:
        logger.warning(f"Comparison fetch for {username} {year - 1} failed, skipping: {e}")
        return None


def _fetch_rest_cached(username, year, cache):
    """Stats and warnings through the REST cache; warnings are copied per hit."""
    def load():
        stats, warnings = fetch_rest_overview(username, year)
        return stats, tuple(warnings) + (REST_TOKEN_ADVICE,)

    if cache is None:
        stats, warnings = load()
    else:
        stats, warnings = cache.get_or_set(make_key(username, year), load)
    return stats, list(warnings)


def get_recap(username, year, client_token=None, include_comparison=True, cache=None):
    """Build the recap response for one user and year.

    Args:
        username: GitHub login (already trimmed).
        year: Calendar year, or 0 for all time.
        client_token: Token supplied by the caller, if any.
        include_comparison: Also fetch year - 1 and compute deltas.
        cache: RecapCache for unauthenticated REST lookups (None disables caching).

    Raises:
        GitHubAPIError: upstream failures of the primary fetch, unchanged.
    """
    token, from_client = resolve_token(client_token)
    use_graphql = bool(token)

    if use_graphql:
        stats, warnings = fetch_graphql_year_recap(username, year, token)
        warnings = list(warnings)
        if not from_client:
            warnings.insert(0, SERVER_TOKEN_NOTE)
        source = "graphql"
    else:
        stats, warnings = _fetch_rest_cached(username, year, cache)
        source = "rest"

    comparison = None
    if include_comparison and year != ALL_TIME and year >= FIRST_COMPARABLE_YEAR:
        previous = _fetch_previous_year(username, year, token, use_graphql)
        comparison = build_comparison(stats, previous)

    logger.info(f"Recap for {username} ({year or 'all time'}) via {source}")
    return RecapResponse(
        stats=stats,
        comparison=comparison,
        meta=RecapMeta(source=source, warnings=warnings),
    )
