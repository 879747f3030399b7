"""Route blueprints registration."""

from flask import jsonify

from gh_recap.extensions import logger


def error_response(message, status=500, log_message=None, headers=None):
    """Log the failure and return a JSON {"error": message} response."""
    if status >= 500:
        logger.error(log_message or message)
    else:
        logger.warning(log_message or message)
    response = jsonify({"error": message})
    response.status_code = status
    if headers:
        response.headers.update(headers)
    return response


def register_blueprints(app):
    """Register all route blueprints with the Flask app."""
    from gh_recap.routes.health_routes import health_bp
    from gh_recap.routes.recap_routes import recap_bp
    from gh_recap.routes.personality_routes import personality_bp
    from gh_recap.routes.cache_routes import cache_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(recap_bp)
    app.register_blueprint(personality_bp)
    app.register_blueprint(cache_bp)
