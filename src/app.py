"""Flask application factory for James OS.

This module creates and configures the Flask application, wiring together
the services behind the dashboard API:

- ConfigService: Configuration loading from config.yaml and environment
- EventBus: Real-time SSE broadcasting of log changes
- LogStore / FileLogStore: The activity log repository

Usage:
    from src.app import create_app
    app = create_app()
    app.run(port=5050)
"""

import logging
import os
from pathlib import Path

from flask import Flask

from src.models import AppConfig
from src.routes import register_blueprints
from src.services import EventBus, LogStore, create_log_store, get_config_service

logger = logging.getLogger(__name__)


def _load_dotenv() -> None:
    """Load environment variables from .env file if it exists."""
    env_file = Path(".env")
    if not env_file.exists():
        return
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key and key not in os.environ:
                os.environ[key] = value.strip().strip('"').strip("'")


# Load environment variables from .env file
_load_dotenv()


def create_app(
    config_path: str = "config.yaml",
    log_store: LogStore | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_path: Path to the configuration file.
        log_store: Store to serve. Built from the configuration if omitted.

    Returns:
        Configured Flask application.
    """
    config_service = get_config_service(config_path)
    config = config_service.get_config()

    app = Flask(__name__)
    app.config["TESTING"] = False

    # Store services on app for access in routes
    app.extensions["config"] = config
    app.extensions["config_service"] = config_service

    _init_services(app, config, log_store)

    register_blueprints(app)

    return app


def _init_services(app: Flask, config: AppConfig, log_store: LogStore | None) -> None:
    """Initialize the services and wire them together.

    Args:
        app: Flask application.
        config: Application configuration.
        log_store: Injected store, or None to build one from config.
    """
    if log_store is not None and log_store.event_bus is not None:
        event_bus = log_store.event_bus
    else:
        event_bus = EventBus(buffer_size=config.events.buffer_size)
    app.extensions["event_bus"] = event_bus

    if log_store is None:
        log_store = create_log_store(
            backend=config.log_store.backend,
            capacity=config.log_store.capacity,
            file_path=config.log_store.file_path,
            event_bus=event_bus,
        )
    elif log_store.event_bus is None:
        log_store.event_bus = event_bus
    app.extensions["log_store"] = log_store

    if config.log_store.seed_on_start:
        log_store.seed()

    logger.info(
        f"Services initialized ({log_store.storage_kind} log store, "
        f"capacity {log_store.capacity})"
    )


def main():
    """Run the Flask application."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app()
    config = app.extensions["config"]

    logger.info(f"Starting James OS on port {config.port}")
    logger.info(f"API: http://localhost:{config.port}/api/logs")
    logger.info(f"Health: http://localhost:{config.port}/api/health")
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=True)


if __name__ == "__main__":
    main()
