"""Log routes for James OS.

Provides REST API endpoints for the activity log:
- GET/POST/DELETE /api/logs
- GET/DELETE /api/logs/<id>
- POST /api/logs/<parent_id>/children
- GET /api/sessions
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from src.services.log_store import LogStore, NotFoundError, StorageError, ValidationError

logs_bp = Blueprint("logs", __name__)

logger = logging.getLogger(__name__)


def _get_log_store() -> LogStore:
    """Get the log store from app extensions."""
    return current_app.extensions["log_store"]


@logs_bp.errorhandler(ValidationError)
def handle_validation_error(error: ValidationError):
    return jsonify({"error": str(error)}), 400


@logs_bp.errorhandler(NotFoundError)
def handle_not_found(error: NotFoundError):
    return jsonify({"error": "Log not found"}), 404


@logs_bp.errorhandler(StorageError)
def handle_storage_error(error: StorageError):
    logger.exception(f"Log storage failure on {request.method} {request.path}")
    return jsonify({"error": "Log storage unavailable"}), 500


@logs_bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return error
    logger.exception(f"Unexpected error on {request.method} {request.path}")
    return jsonify({"error": "Internal server error"}), 500


@logs_bp.route("/logs", methods=["GET"])
def list_logs():
    """Get log entries.

    Query parameters (first match wins):
        parentId: Direct children of this entry
        sessionId: All entries of this session
        verbose: "true" for every entry; otherwise top-level entries only

    Returns:
        JSON array of log entries, newest first.
    """
    store = _get_log_store()
    parent_id = request.args.get("parentId")
    session_id = request.args.get("sessionId")
    verbose = request.args.get("verbose") == "true"

    if parent_id:
        logs = store.list_by_parent(parent_id)
    elif session_id:
        logs = store.list_by_session(session_id)
    elif verbose:
        logs = store.list_all()
    else:
        logs = store.list_top_level()

    return jsonify([entry.to_dict() for entry in logs])


@logs_bp.route("/logs", methods=["POST"])
def create_log():
    """Create a top-level (or caller-parented) log entry.

    Request body:
        JSON object with at least ``message`` or ``content``.

    Returns:
        JSON object with:
        - success: True
        - log: The stored entry
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400

    entry = _get_log_store().insert(data)
    return jsonify({"success": True, "log": entry.to_dict()})


@logs_bp.route("/logs", methods=["DELETE"])
def delete_all_logs():
    """Delete every log entry."""
    _get_log_store().delete_all()
    return jsonify({"success": True})


@logs_bp.route("/logs/<log_id>", methods=["GET"])
def get_log(log_id: str):
    """Get one log entry with its direct children.

    Returns:
        The entry's fields plus ``children`` (list of entries), or 404.
    """
    entry, children = _get_log_store().get_with_children(log_id)
    data = entry.to_dict()
    data["children"] = [child.to_dict() for child in children]
    return jsonify(data)


@logs_bp.route("/logs/<log_id>", methods=["DELETE"])
def delete_log(log_id: str):
    """Delete a log entry and all of its descendants.

    Returns:
        JSON object with:
        - success: True
        - deleted: Size of the deleted ID set (includes the requested ID)
    """
    deleted = _get_log_store().delete(log_id)
    return jsonify({"success": True, "deleted": deleted})


@logs_bp.route("/logs/<parent_id>/children", methods=["POST"])
def create_child_log(parent_id: str):
    """Create a log entry nested under an existing one.

    The child inherits the parent's session.

    Returns:
        JSON object with success and log, or 404 if the parent is missing.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400

    entry = _get_log_store().insert_child(parent_id, data)
    if entry is None:
        return jsonify({"error": "Parent log not found"}), 404
    return jsonify({"success": True, "log": entry.to_dict()})


@logs_bp.route("/sessions", methods=["GET"])
def list_sessions():
    """Get a summary of every session, most recently started first."""
    sessions = _get_log_store().list_sessions()
    return jsonify([s.model_dump(mode="json", by_alias=True) for s in sessions])
