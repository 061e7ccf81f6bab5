"""Flask routes for James OS."""

from src.routes.events import events_bp
from src.routes.health import health_bp
from src.routes.logs import logs_bp

__all__ = [
    "events_bp",
    "health_bp",
    "logs_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app.

    Args:
        app: The Flask application instance.
    """
    app.register_blueprint(events_bp, url_prefix="/api")
    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(logs_bp, url_prefix="/api")
