"""
JSON envelope helpers shared by every blueprint.

Success bodies look like {"success": true, ...}; failures look like
{"success": false, "message": "...", "error": "..."} where `error` is optional.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from bson import ObjectId
from flask import Response, jsonify


def success_response(status: int = 200, **payload: Any) -> Tuple[Response, int]:
    body: Dict[str, Any] = {"success": True}
    body.update(payload)
    return jsonify(body), status


def error_response(message: str, status: int, error: Optional[str] = None) -> Tuple[Response, int]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    return jsonify(body), status


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a Mongo document into something jsonify can emit.

    `_id` is exposed as a string `id`; datetimes become ISO-8601 strings.
    """
    out = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        else:
            out[key] = serialize_value(value)
    return out
