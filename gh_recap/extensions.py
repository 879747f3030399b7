"""Shared singletons: logger and the REST recap cache.

All global state used across modules lives here to avoid circular imports.
"""

import logging

from gh_recap.cache.memory_cache import RecapCache
from gh_recap.config import get_config

_config = get_config()

# Configure logging
logging.basicConfig(
    level=getattr(logging, str(_config.get("log_level", "INFO")).upper(), logging.INFO),
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("gh_recap")

# Short-lived cache for unauthenticated REST lookups (public rate limit is tight)
recap_cache = RecapCache(
    ttl_seconds=_config.get("rest_cache_ttl_seconds", 60),
    maxsize=_config.get("rest_cache_max_entries", 256),
)
