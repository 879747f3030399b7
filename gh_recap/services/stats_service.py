"""Yearly statistics from GitHub's REST overview and GraphQL contribution data.

Every fetch returns ``(YearlyStatistics, warnings)``.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from urllib.parse import quote

from gh_recap.config import get_config
from gh_recap.models import (
    ALL_TIME, AccountProfile, HighlightRepository, LanguageShare, YearlyStatistics,
)
from gh_recap.services.github_service import (
    UserNotFoundError, graphql_query, rest_get,
)
from gh_recap.utils.math import clamp01
from gh_recap.visualizers.calendar_visualizer import (
    build_contribution_calendar, compute_active_days_and_streak,
    compute_weekend_rate, flatten_calendar_weeks,
)

logger = logging.getLogger(__name__)

# GitHub exposes no hour-of-day signal for contributions.
NIGHT_OWL_ESTIMATE = 0.24

REST_MODE_WARNING = (
    "REST mode only provides a repository/language overview; yearly contributions "
    "(commits, PRs, issues, reviews, streaks) are unavailable."
)
NIGHT_OWL_WARNING = (
    "GitHub does not expose the hour of each contribution; the night owl rate is an estimate."
)
STARS_WARNING = (
    "Stars are the stargazer total across sampled repositories, not stars gained this year."
)
USER_NOT_FOUND_MESSAGE = "User not found or inaccessible"

REPOSITORIES_FRAGMENT = """
        repositories(first: 50, ownerAffiliations: OWNER, orderBy: { field: STARGAZERS, direction: DESC }) {
          nodes {
            name
            description
            stargazerCount
            primaryLanguage { name }
            languages(first: 8, orderBy: { field: SIZE, direction: DESC }) {
              edges { size node { name } }
            }
          }
        }
"""

CONTRIBUTIONS_FRAGMENT = """
        contributionsCollection(from: $from, to: $to) {
          totalCommitContributions
          totalPullRequestContributions
          totalIssueContributions
          totalPullRequestReviewContributions
          contributionCalendar {
            weeks {
              contributionDays {
                date
                contributionCount
              }
            }
          }
        }
"""

YEAR_RECAP_QUERY = """
    query Recap($login: String!, $from: DateTime!, $to: DateTime!, $mergedQuery: String!) {
      user(login: $login) {
        login
        name
        avatarUrl
        createdAt
""" + CONTRIBUTIONS_FRAGMENT + REPOSITORIES_FRAGMENT + """
      }
      merged: search(query: $mergedQuery, type: ISSUE) {
        issueCount
      }
    }
"""

USER_OVERVIEW_QUERY = """
    query GetUser($login: String!) {
      user(login: $login) {
        login
        name
        avatarUrl
        createdAt
""" + REPOSITORIES_FRAGMENT + """
      }
    }
"""

MERGED_PRS_QUERY = """
    query MergedPRs($mergedQuery: String!) {
      merged: search(query: $mergedQuery, type: ISSUE) {
        issueCount
      }
    }
"""

YEAR_CONTRIBUTIONS_QUERY = """
    query YearContrib($login: String!, $from: DateTime!, $to: DateTime!) {
      user(login: $login) {
""" + CONTRIBUTIONS_FRAGMENT + """
      }
    }
"""


def year_window(year):
    """GraphQL DateTime bounds covering one calendar year."""
    return f"{year}-01-01T00:00:00Z", f"{year}-12-31T23:59:59Z"


def merged_prs_search(username, year=None):
    """Search qualifier for merged PRs, optionally bounded to one year."""
    query = f"is:pr is:merged author:{username}"
    if year:
        query += f" merged:{year}-01-01..{year}-12-31"
    return query


def _created_year(created_at):
    try:
        return datetime.fromisoformat(created_at.replace("Z", "+00:00")).year
    except (AttributeError, ValueError):
        return datetime.now(timezone.utc).year


def _profile(avatar_url, created_at):
    return AccountProfile(
        avatar_url=avatar_url or "",
        created_at=created_at or "",
        created_year=_created_year(created_at),
    )


def compute_language_shares(weights, limit=5):
    """Top languages by weight, normalized to the kept subset's total.

    Args:
        weights: dict of language -> weight (bytes or repository count), in
            first-seen order; ties keep that order.
        limit: number of languages to keep.

    Returns:
        list of LanguageShare
    """
    entries = sorted(weights.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    total = sum(v for _, v in entries) or 1
    return [LanguageShare(name=name, percent=clamp01(v / total)) for name, v in entries]


def _repository_languages(repos):
    """Language shares from repo byte sizes, falling back to primary-language counts."""
    lang_size = {}
    lang_count = {}
    for repo in repos:
        edges = (repo.get("languages") or {}).get("edges") or []
        if edges:
            for edge in edges:
                name = edge["node"]["name"]
                lang_size[name] = lang_size.get(name, 0) + (edge.get("size") or 0)
        else:
            primary = (repo.get("primaryLanguage") or {}).get("name")
            if primary:
                lang_count[primary] = lang_count.get(primary, 0) + 1

    if lang_size:
        return compute_language_shares(lang_size)
    return compute_language_shares(lang_count)


def _graphql_highlight(repos):
    # Upstream already orders by stargazers desc.
    if not repos:
        return HighlightRepository()
    top = repos[0]
    return HighlightRepository(
        name=top.get("name") or "-",
        description=top.get("description") or "",
        stars_gained=top.get("stargazerCount") or 0,
    )


def fetch_rest_overview(username, year, token=None):
    """Repository/language overview from the public REST API.

    Temporal fields stay zero: REST exposes no yearly contribution data.
    """
    login = quote(username, safe="")
    user = rest_get(f"/users/{login}", token)
    repos = rest_get(
        f"/users/{login}/repos",
        token,
        params={"per_page": 100, "sort": "updated"},
    ) or []

    stars = 0
    highlight = None
    lang_count = {}
    for repo in repos:
        repo_stars = repo.get("stargazers_count") or 0
        stars += repo_stars
        if highlight is None or repo_stars > (highlight.get("stargazers_count") or 0):
            highlight = repo
        language = repo.get("language")
        if language:
            lang_count[language] = lang_count.get(language, 0) + 1

    stats = YearlyStatistics(
        year=year,
        handle=user.get("login") or username,
        display_name=user.get("name") or user.get("login") or username,
        stars_gained=stars,
        top_languages=tuple(compute_language_shares(lang_count)),
        highlight_repo=HighlightRepository(
            name=highlight.get("name") or "-",
            description=highlight.get("description") or "",
            stars_gained=highlight.get("stargazers_count") or 0,
        ) if highlight else HighlightRepository(),
        profile=_profile(user.get("avatar_url"), user.get("created_at")),
    )
    logger.info(f"REST overview for {username}: {len(repos)} repos, {stars} stars")
    return stats, [REST_MODE_WARNING]


def _build_graphql_stats(user, year, totals, days, merged_count):
    active_days, max_streak = compute_active_days_and_streak(days)
    repos = (user.get("repositories") or {}).get("nodes") or []
    return YearlyStatistics(
        year=year,
        handle=user["login"],
        display_name=user.get("name") or user["login"],
        commits=totals["commits"],
        pull_requests=totals["pull_requests"],
        merged_prs=merged_count,
        issues=totals["issues"],
        reviews=totals["reviews"],
        stars_gained=sum(r.get("stargazerCount") or 0 for r in repos),
        active_days=active_days,
        max_streak_days=max_streak,
        night_owl_rate=NIGHT_OWL_ESTIMATE,
        weekend_rate=compute_weekend_rate(days),
        top_languages=tuple(_repository_languages(repos)),
        highlight_repo=_graphql_highlight(repos),
        contribution_calendar=tuple(build_contribution_calendar(days)),
        profile=_profile(user.get("avatarUrl"), user.get("createdAt")),
    )


def _contribution_totals(collection):
    return {
        "commits": collection.get("totalCommitContributions") or 0,
        "pull_requests": collection.get("totalPullRequestContributions") or 0,
        "issues": collection.get("totalIssueContributions") or 0,
        "reviews": collection.get("totalPullRequestReviewContributions") or 0,
    }


def fetch_graphql_year_recap(username, year, token):
    """Full contribution recap for one calendar year; year 0 means all time."""
    if year == ALL_TIME:
        return fetch_graphql_all_time_recap(username, token)

    start, end = year_window(year)
    data = graphql_query(token, YEAR_RECAP_QUERY, {
        "login": username,
        "from": start,
        "to": end,
        "mergedQuery": merged_prs_search(username, year),
    })
    user = data.get("user")
    if not user:
        raise UserNotFoundError(USER_NOT_FOUND_MESSAGE)

    collection = user.get("contributionsCollection") or {}
    days = flatten_calendar_weeks(collection.get("contributionCalendar"))
    merged_count = (data.get("merged") or {}).get("issueCount") or 0

    stats = _build_graphql_stats(user, year, _contribution_totals(collection), days, merged_count)
    return stats, [NIGHT_OWL_WARNING, STARS_WARNING]


def _fetch_year_contributions(username, token, year):
    """Totals and calendar days for one year, or None if the user resolved to null."""
    start, end = year_window(year)
    data = graphql_query(token, YEAR_CONTRIBUTIONS_QUERY, {
        "login": username,
        "from": start,
        "to": end,
    })
    user = data.get("user")
    if not user:
        return None
    collection = user.get("contributionsCollection") or {}
    return _contribution_totals(collection), flatten_calendar_weeks(collection.get("contributionCalendar"))


def fetch_graphql_all_time_recap(username, token, current_year=None):
    """Aggregate every calendar year from account creation through current_year.

    Each year is fetched as an independent task; a failing year is logged and
    skipped so the others still count.
    """
    data = graphql_query(token, USER_OVERVIEW_QUERY, {"login": username})
    user = data.get("user")
    if not user:
        raise UserNotFoundError(USER_NOT_FOUND_MESSAGE)

    merged = graphql_query(token, MERGED_PRS_QUERY, {"mergedQuery": merged_prs_search(username)})
    merged_count = (merged.get("merged") or {}).get("issueCount") or 0

    if current_year is None:
        current_year = datetime.now(timezone.utc).year
    created_year = _created_year(user.get("createdAt"))
    years = list(range(created_year, current_year + 1))

    max_workers = max(1, int(get_config().get("all_time_max_workers", 4)))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            (year, executor.submit(_fetch_year_contributions, username, token, year))
            for year in years
        ]

        totals = {"commits": 0, "pull_requests": 0, "issues": 0, "reviews": 0}
        all_days = []
        for year, future in futures:
            try:
                result = future.result()
            except Exception as e:
                logger.error(f"Failed to fetch contributions for {username} in {year}: {e}")
                continue
            if result is None:
                logger.warning(f"No contribution data for {username} in {year}")
                continue
            year_totals, days = result
            for key in totals:
                totals[key] += year_totals[key]
            all_days.extend(days)

    logger.info(f"All-time recap for {username}: {len(years)} years, {len(all_days)} days")
    stats = _build_graphql_stats(user, ALL_TIME, totals, all_days, merged_count)
    return stats, [NIGHT_OWL_WARNING, STARS_WARNING]
