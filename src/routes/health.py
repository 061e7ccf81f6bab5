"""Health routes for James OS."""

import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health", __name__)

logger = logging.getLogger(__name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Report liveness and log store statistics.

    Returns:
        JSON object with:
        - status: "ok"
        - timestamp: Current server time (ISO 8601)
        - storage: Log store backend ("memory" or "file")
        - stats: totalLogs and totalSessions
    """
    store = current_app.extensions.get("log_store")
    if store is None:
        return jsonify({"status": "error", "error": "Health check failed"}), 500

    try:
        stats = store.stats()
    except Exception:
        logger.exception("Health check failed")
        return jsonify({"status": "error", "error": "Health check failed"}), 500

    return jsonify(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "storage": store.storage_kind,
            "stats": stats.model_dump(by_alias=True),
        }
    )
