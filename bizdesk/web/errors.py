"""
JSON error responses.

Every failure leaves the API as ``{"message": str}`` with a status code
taken from the exception family (see bizdesk.exceptions).
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
import sentry_sdk
from werkzeug.exceptions import HTTPException

from ..exceptions import CRMException, http_status_for
from .session import get_session

logger = logging.getLogger(__name__)


def _error(message: str, status: int):
    return jsonify({"message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CRMException)
    def handle_crm_exception(exc: CRMException):
        # Business failures must not leave half-applied changes behind.
        get_session().rollback()
        logger.info("%s: %s", type(exc).__name__, exc.message)
        return _error(exc.message, http_status_for(exc))

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        # Unknown routes and non-integer ids both end up here as 404.
        return _error(exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        sentry_sdk.capture_exception(exc)
        get_session().rollback()
        return _error("Internal server error", 500)
