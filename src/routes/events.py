"""Event routes for James OS.

Provides a Server-Sent Events (SSE) endpoint so the dashboard can follow
the activity log without polling.
"""

from flask import Blueprint, Response, current_app, request

events_bp = Blueprint("events", __name__)


@events_bp.route("/events")
def sse_events():
    """Server-Sent Events stream of log store changes.

    Events:
    - log_created: {"log": <entry>}
    - log_deleted: {"id": <id>, "deleted": <count>}
    - logs_cleared: {"deleted": <count>}

    Query parameters:
        replay: "false" to skip buffered events on connect

    Returns:
        SSE stream with events in format:
        event: <event_type>
        data: <json_payload>
    """
    event_bus = current_app.extensions["event_bus"]
    config = current_app.extensions.get("config")
    keepalive = config.events.keepalive_interval if config else 30.0
    include_buffer = request.args.get("replay") != "false"

    return Response(
        event_bus.get_sse_stream(include_buffer=include_buffer, timeout=keepalive),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
