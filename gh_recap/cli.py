#!/usr/bin/env python3
"""Print a recap and its matched personality for one GitHub user.

Usage:
    python -m gh_recap.cli octocat --year 2024
    python -m gh_recap.cli octocat --year 0 --token ghp_...   # all time
"""

import argparse
import json
import sys
from datetime import datetime

from gh_recap.extensions import logger, recap_cache
from gh_recap.services.github_service import GitHubAPIError
from gh_recap.services.personality_service import match_personality
from gh_recap.services.recap_service import get_recap, normalize_username, validate_year


def build_parser():
    parser = argparse.ArgumentParser(description="GitHub year-in-review recap")
    parser.add_argument("username", help="GitHub login")
    parser.add_argument("--year", type=int, default=datetime.now().year,
                        help="Calendar year, or 0 for all time (default: current year)")
    parser.add_argument("--token", default=None, help="GitHub token (defaults to the server token)")
    parser.add_argument("--no-comparison", action="store_true",
                        help="Skip the previous-year comparison")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    username = normalize_username(args.username)
    if not username:
        logger.error("Username must not be empty")
        return 2
    if not validate_year(args.year):
        logger.error(f"Invalid year: {args.year}")
        return 2

    try:
        resp = get_recap(
            username,
            args.year,
            client_token=args.token,
            include_comparison=not args.no_comparison,
            cache=recap_cache,
        )
    except GitHubAPIError as e:
        logger.error(f"Failed to build recap for {username}: {e}")
        return 1

    output = resp.to_dict()
    output["personality"] = match_personality(resp.stats).to_dict()
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
