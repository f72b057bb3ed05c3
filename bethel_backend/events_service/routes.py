"""
Events service routes: list active events and create new ones.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, g, request
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from bethel_backend.auth_service.utils import require_auth
from bethel_backend.core.fields import ValidationError, ensure_object
from bethel_backend.core.responses import error_response, serialize_document, success_response
from bethel_backend.database.db_connection import EVENTS, get_db
from bethel_backend.events_service.models import build_event

events_bp = Blueprint("events", __name__)


@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.route("/events", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    Return all active events, soonest first.

    Public; no token required.

    Returns:
        200: {success, events}
        500: Database error.
    """
    try:
        cursor = get_db()[EVENTS].find({"isActive": True}).sort("date", ASCENDING)
        events = [serialize_document(doc) for doc in cursor]
    except PyMongoError:
        logging.exception("[Events] Database error listing events")
        return error_response("Failed to retrieve events", 500)

    return success_response(200, events=events)


@events_bp.route("/events", methods=["POST"])
@require_auth()
def create_event() -> Tuple[Response, int]:
    """
    Create an event.

    Requires Authorization header: Bearer <token>

    Expects JSON with `title` and `date` (ISO-8601), optional `description`,
    `location`, `isActive` (default true), plus up to 20 extra scalar fields.

    Returns:
        201: {success, event}
        400: Validation error.
        401: Authentication failure.
        500: Database error.
    """
    data, body_err = ensure_object(request.get_json(silent=True))
    if body_err:
        return error_response(body_err, 400)

    try:
        event = build_event(data, created_by=g.current_user["email"])
    except ValidationError as e:
        return error_response(str(e), 400)

    try:
        result = get_db()[EVENTS].insert_one(event)
    except PyMongoError:
        logging.exception("[Events] Database error creating event")
        return error_response("Failed to create event", 500)

    event["_id"] = result.inserted_id
    logging.info(f"[Events] Created event {result.inserted_id}")
    return success_response(201, event=serialize_document(event))
