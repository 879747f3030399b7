"""GitHub Recap - Backend Package.

Provides the Flask application factory and all backend modules.
"""

from flask import Flask

from gh_recap.config import get_config
from gh_recap.extensions import logger
from gh_recap.routes import register_blueprints


def create_app():
    """Create and configure the Flask application."""
    app = Flask(__name__)
    register_blueprints(app)
    logger.info(f"gh_recap app created (server token configured: {bool(get_config().get('github_token'))})")
    return app
