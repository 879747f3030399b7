"""Cache management routes."""

from flask import Blueprint, jsonify

from gh_recap.extensions import logger, recap_cache

cache_bp = Blueprint("cache", __name__)


@cache_bp.route("/api/clear-cache", methods=["POST"])
def clear_cache():
    """Clear the in-memory REST recap cache."""
    recap_cache.clear()
    logger.info("REST recap cache cleared")
    return jsonify({"message": "Cache cleared"})
