"""Error types surfaced by resource handlers and their JSON rendering."""

from __future__ import annotations

from typing import Any, Dict

from flask import jsonify


class ResourceError(Exception):
    """Base class for failures that map directly onto an HTTP status."""

    status = 500

    def __init__(self, message: str, details: Dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequest(ResourceError):
    status = 400


class NotFound(ResourceError):
    status = 404


class ServerError(ResourceError):
    status = 500


def json_error(message: str, status: int, details: Dict[str, Any] | None = None):
    payload: Dict[str, Any] = {"error": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


__all__ = ["BadRequest", "NotFound", "ResourceError", "ServerError", "json_error"]
