"""
Announcements service routes: list announcements (newest first) and post new ones.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, g, request
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from bethel_backend.announcements_service.models import build_announcement
from bethel_backend.auth_service.utils import require_auth
from bethel_backend.core.fields import ValidationError, ensure_object
from bethel_backend.core.responses import error_response, serialize_document, success_response
from bethel_backend.database.db_connection import ANNOUNCEMENTS, get_db

announcements_bp = Blueprint("announcements", __name__)


@announcements_bp.before_request
def before_request() -> None:
    logging.info(f"[Announcements] Incoming {request.method} {request.path}")


@announcements_bp.route("/announcements", methods=["GET"])
def list_announcements() -> Tuple[Response, int]:
    """
    Return all announcements, newest first. Public.

    Returns:
        200: {success, announcements}
        500: Database error.
    """
    try:
        cursor = get_db()[ANNOUNCEMENTS].find({}).sort("createdAt", DESCENDING)
        announcements = [serialize_document(doc) for doc in cursor]
    except PyMongoError:
        logging.exception("[Announcements] Database error listing announcements")
        return error_response("Failed to retrieve announcements", 500)

    return success_response(200, announcements=announcements)


@announcements_bp.route("/announcements", methods=["POST"])
@require_auth()
def create_announcement() -> Tuple[Response, int]:
    """
    Post an announcement as the authenticated user.

    Requires Authorization header: Bearer <token>

    Returns:
        201: {success, announcement}
        400: Validation error.
        401: Authentication failure.
        500: Database error.
    """
    data, body_err = ensure_object(request.get_json(silent=True))
    if body_err:
        return error_response(body_err, 400)

    try:
        announcement = build_announcement(data, author=g.current_user["email"])
    except ValidationError as e:
        return error_response(str(e), 400)

    try:
        result = get_db()[ANNOUNCEMENTS].insert_one(announcement)
    except PyMongoError:
        logging.exception("[Announcements] Database error creating announcement")
        return error_response("Failed to create announcement", 500)

    announcement["_id"] = result.inserted_id
    return success_response(201, announcement=serialize_document(announcement))
