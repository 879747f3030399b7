#!/usr/bin/env python3
"""GitHub Recap - Flask Backend

Serves the year-in-review recap API backed by GitHub's REST and GraphQL APIs.
"""

from gh_recap import create_app
from gh_recap.config import get_config

app = create_app()


if __name__ == "__main__":
    config = get_config()
    app.run(
        host=config.get("host", "127.0.0.1"),
        port=config.get("port", 5050),
        debug=config.get("debug", False),
    )
