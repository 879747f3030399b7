"""Personality route: match a stats record to an archetype."""

from flask import Blueprint, jsonify, request

from gh_recap.models import YearlyStatistics
from gh_recap.routes import error_response
from gh_recap.services.personality_service import match_personality

personality_bp = Blueprint("personality", __name__)


@personality_bp.route("/api/personality", methods=["POST"])
def get_personality():
    """Classify a YearlyStatistics JSON object into its best-matching archetype."""
    body = request.get_json(silent=True)
    try:
        stats = YearlyStatistics.from_dict(body)
    except ValueError as e:
        return error_response(str(e), 400)
    return jsonify(match_personality(stats).to_dict())
