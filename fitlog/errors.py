# backend/fitlog/errors.py
from typing import Any, Dict, List, Optional

import pydantic
from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from . import db


class ApiError(Exception):
    """Base class for errors surfaced to API callers as ``{"message": ...}``."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        payload = {"message": self.message}
        payload.update(self.extra)
        return payload


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Unauthorized. Please log in."


class Forbidden(ApiError):
    status_code = 403
    default_message = "You don't have permission to access this resource."


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found."


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request data"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, str]]] = None):
        if details is None:
            super().__init__(message)
        else:
            super().__init__(message, details=details)


class Conflict(ApiError):
    status_code = 409
    default_message = "Resource already exists."


class TooManyRequests(ApiError):
    status_code = 429
    default_message = "Too many attempts. Please try again later."


class InternalError(ApiError):
    status_code = 500


def validation_details(exc: pydantic.ValidationError) -> List[Dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "invalid value"),
        }
        for err in exc.errors()
    ]


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            db.session.rollback()
            current_app.logger.error(f"[api] {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_validation_error(err: pydantic.ValidationError):
        wrapped = ValidationError(details=validation_details(err))
        return jsonify(wrapped.to_dict()), wrapped.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error: {err}")
        return jsonify({"message": InternalError.default_message}), 500
