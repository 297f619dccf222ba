"""
JSON error responses for the dashboard API.

Every failure, whether an application error, a plain werkzeug HTTP error or
an unexpected exception, is rendered as:
{
    "status": "error",
    "error": "ErrorClassName",
    "message": "Human readable message",
    "details": { ... optional context ... }
}
"""

import os
import traceback

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from middleware.errors import BaseAppError


def _error_response(name, message, details, status):
    payload = {"status": "error", "error": name, "message": message, "details": details or {}}
    return jsonify(payload), status


def register_error_handlers(app):
    """Attach the JSON error handlers to ``app``."""

    @app.errorhandler(BaseAppError)
    def handle_app_error(err):
        if err.code >= 500:
            current_app.logger.error("%s: %s", err.__class__.__name__, err.message)
        else:
            current_app.logger.info("%s (%d): %s", err.__class__.__name__, err.code, err.message)
        return jsonify(err.to_dict()), err.code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return _error_response(err.__class__.__name__, err.description, None, err.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        current_app.logger.exception("Unhandled error")
        details = {}
        if app.debug or os.getenv("FLASK_DEBUG") == "1":
            details["traceback"] = traceback.format_exc()
        return _error_response(
            err.__class__.__name__, str(err) or "Unexpected internal error", details, 500
        )
