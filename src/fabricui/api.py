"""JSON endpoints served next to the Dash app on its Flask server."""

import logging

from flask import Response, jsonify, request

from .exceptions import InvalidSelection, InvocationFailure, InvocationTimeout, MalformedResponse

logger = logging.getLogger(__name__)


def _error(error: str, details: str, status: int):
    response = jsonify({"error": error, "details": details})
    response.status_code = status
    return response


def parse_execute_body(body) -> dict:
    """Validates an execute request body and normalizes its flag name."""
    if not isinstance(body, dict):
        raise MalformedResponse("Request body must be a JSON object.")
    raw_input = body.get("input")
    if not isinstance(raw_input, str):
        raise MalformedResponse("'input' must be a string.")
    fields = {"input": raw_input}
    for name in ("pattern", "model"):
        value = body.get(name) or ""
        if not isinstance(value, str):
            raise MalformedResponse(f"'{name}' must be a string.")
        fields[name] = value
    flag = body.get("isYouTubeUrl", body.get("isVideoUrl"))
    if flag is not None and not isinstance(flag, bool):
        raise MalformedResponse("'isYouTubeUrl' must be a boolean.")
    fields["is_video_url"] = flag
    return fields


def register_routes(app) -> None:
    server = app.server

    @server.route("/api/execute", methods=["POST"])
    def execute():
        logger.info("Execute API route hit")
        try:
            fields = parse_execute_body(request.get_json(silent=True))
        except MalformedResponse as exc:
            return _error("Malformed request", str(exc), 400)

        try:
            invocation = app.builder.build_from(
                fields["input"], fields["pattern"], fields["model"], fields["is_video_url"]
            )
            output = app.runner.run(invocation)
        except InvalidSelection as exc:
            return _error("Invalid selection", str(exc), 400)
        except InvocationTimeout as exc:
            logger.error("Command timed out: %s", exc)
            return _error("Command timed out", str(exc), 504)
        except InvocationFailure as exc:
            logger.error("Error executing command: %s", exc)
            return _error("Failed to execute command", exc.details or exc.message, 500)

        return Response(output, mimetype="text/plain")

    @server.route("/api/patterns", methods=["GET"])
    def patterns():
        return jsonify({"patterns": app.catalog.list_patterns()})

    @server.route("/api/models", methods=["GET"])
    def models():
        return jsonify({"models": app.catalog.list_models()})
