"""Application configuration loaded from config.json with environment overrides."""

import json
import os
from pathlib import Path
from typing import Any, Dict

# Project root is one level up from gh_recap/
PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_CONFIG: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 5050,
    "debug": False,
    "log_level": "INFO",
    "github_token": "",
    "github_api_url": "https://api.github.com",
    "github_graphql_url": "https://api.github.com/graphql",
    "github_api_version": "2022-11-28",
    "user_agent": "github-recap",
    "request_timeout_seconds": 20,
    "rest_cache_ttl_seconds": 60,
    "rest_cache_max_entries": 256,
    "all_time_max_workers": 4,
}


def load_config(config_path: Path = None) -> Dict[str, Any]:
    """Load configuration from config.json merged over the defaults.

    Args:
        config_path: Optional path to config file. Defaults to $GH_RECAP_CONFIG,
            then PROJECT_ROOT/config.json. A missing file yields the defaults.

    Returns:
        Configuration dictionary.
    """
    if config_path is None:
        env_path = os.getenv("GH_RECAP_CONFIG")
        config_path = Path(env_path) if env_path else PROJECT_ROOT / "config.json"

    config = dict(DEFAULT_CONFIG)
    if Path(config_path).exists():
        with open(config_path) as f:
            config.update(json.load(f))

    env_token = os.getenv("GITHUB_TOKEN", "").strip()
    if env_token:
        config["github_token"] = env_token
    return config


# Singleton config instance
_config: Dict[str, Any] = None


def get_config() -> Dict[str, Any]:
    """Get the singleton config dictionary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    _config = None
