"""
Authentication service route handlers.

Provides routes for:
- User registration (/signup)
- User login (/login)
- Profile retrieval (/me)

Token signing and verification live in `auth_service.utils`.
"""

import logging
from typing import Any, Dict, Tuple

from argon2.exceptions import HashingError
from bson import ObjectId
from bson.errors import InvalidId
from flask import Blueprint, Response, g, request
from pymongo.errors import DuplicateKeyError, PyMongoError

from bethel_backend.auth_service.models import (
    EMAIL_PATTERN,
    NAME_MAX_LENGTH,
    OPTIONAL_PROFILE_FIELDS,
    PASSWORD_MIN_LENGTH,
    PROFILE_FIELD_MAX_LENGTH,
    new_user_document,
    normalize_email,
    profile_user,
    public_user,
)
from bethel_backend.auth_service.utils import (
    INVALID_CREDENTIALS,
    TokenConfigurationError,
    burn_verification,
    get_token_issuer,
    hash_password,
    require_auth,
    verify_password,
)
from bethel_backend.core.fields import ensure_object
from bethel_backend.core.responses import error_response, success_response
from bethel_backend.database.db_connection import USERS, get_db, require_indexes

auth_bp = Blueprint("auth", __name__)

USER_EXISTS = "User already exists with this email"


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """Log every incoming request to the authentication service."""
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Auth] Response {response.status}")
    return response


# --- SIGNUP ---
@auth_bp.route("/signup", methods=["POST"])
def signup() -> Tuple[Response, int]:
    """
    Register a new user and log them in.

    Expects a JSON body with:
    - name (str)
    - email (str): Unique email address.
    - password (str): Minimum 6 characters.
    - studentId, institution, major (str, optional)

    Returns:
        201: {success, message, token, user}
        400: Missing fields, invalid input, or email already registered.
        500: Hashing, signing or database failure.
    """
    data, body_err = ensure_object(request.get_json(silent=True))
    if body_err:
        return error_response(body_err, 400)

    name = data.get("name")
    email = normalize_email(data.get("email"))
    password = data.get("password")

    # Validate input
    if not isinstance(name, str) or not name.strip() or not email or not isinstance(password, str) or not password:
        return error_response("Name, email and password are required", 400)
    name = name.strip()
    if len(name) > NAME_MAX_LENGTH:
        return error_response(f"Name must be {NAME_MAX_LENGTH} characters or less", 400)
    if not EMAIL_PATTERN.match(email):
        return error_response("Please provide a valid email address", 400)
    if len(password) < PASSWORD_MIN_LENGTH:
        return error_response(f"Password must be at least {PASSWORD_MIN_LENGTH} characters", 400)

    profile: Dict[str, Any] = {}
    for key in OPTIONAL_PROFILE_FIELDS:
        value = data.get(key)
        if value is None or value == "":
            continue
        if not isinstance(value, str) or len(value) > PROFILE_FIELD_MAX_LENGTH:
            return error_response(f"{key} must be a string of {PROFILE_FIELD_MAX_LENGTH} characters or less", 400)
        profile[key] = value.strip()

    users = get_db()[USERS]

    try:
        if users.find_one({"email": email}, {"_id": 1}):
            return error_response(USER_EXISTS, 400)
    except PyMongoError:
        logging.exception("[Auth] Signup lookup failed")
        return error_response("Registration failed", 500)

    try:
        pw_hash = hash_password(password)
    except HashingError:
        logging.exception("[Auth] Password hashing failed")
        return error_response("Password hashing failed", 500)

    user = new_user_document(name, email, pw_hash, profile)
    user["_id"] = ObjectId()

    # No insert happens unless the token can be signed
    try:
        token = get_token_issuer().create_token(user["_id"], email, user["role"])
    except TokenConfigurationError:
        logging.exception("[Auth] Cannot issue token")
        return error_response("Server configuration error", 500)

    try:
        require_indexes()
    except PyMongoError:
        logging.exception("[Auth] Unique email index is missing and could not be created")
        return error_response("Registration failed", 500)

    try:
        users.insert_one(user)
    except DuplicateKeyError:
        # Lost a race with a concurrent signup for the same address
        return error_response(USER_EXISTS, 400)
    except PyMongoError:
        logging.exception("[Auth] Signup insert failed")
        return error_response("Registration failed", 500)

    logging.info(f"[Auth] Registered user {user['_id']}")
    return success_response(
        201,
        message="User created successfully",
        token=token,
        user=public_user(user),
    )


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: {success, message, token, user}
        400: Missing credentials.
        401: Invalid credentials (wrong password or unknown email, same body).
        500: Signing or database failure.
    """
    data, body_err = ensure_object(request.get_json(silent=True))
    if body_err:
        return error_response(body_err, 400)

    email = normalize_email(data.get("email"))
    password = data.get("password")

    if not email or not isinstance(password, str) or not password:
        return error_response("Email and password are required", 400)

    try:
        user = get_db()[USERS].find_one({"email": email})
    except PyMongoError:
        logging.exception("[Auth] Login lookup failed")
        return error_response("Login failed", 500)

    if not user:
        burn_verification(password)
        return error_response(INVALID_CREDENTIALS, 401)

    if not verify_password(user.get("password"), password):
        return error_response(INVALID_CREDENTIALS, 401)

    try:
        token = get_token_issuer().create_token(user["_id"], user["email"], user.get("role", "student"))
    except TokenConfigurationError:
        logging.exception("[Auth] Cannot issue token")
        return error_response("Server configuration error", 500)

    return success_response(
        200,
        message="Login successful",
        token=token,
        user=public_user(user),
    )


# --- GET CURRENT USER ---
@auth_bp.route("/me", methods=["GET"])
@require_auth()
def get_current_user() -> Tuple[Response, int]:
    """
    Retrieve the current user's profile.

    Requires Authorization header: Bearer <token>

    Returns:
        200: {success, user}
        401: Authentication failure.
        404: User no longer exists.
        500: Database error.
    """
    try:
        user_id = ObjectId(g.current_user["userId"])
    except (InvalidId, TypeError):
        return error_response("User not found", 404)

    try:
        user = get_db()[USERS].find_one({"_id": user_id}, {"password": 0})
    except PyMongoError:
        logging.exception("[Auth] Profile lookup failed")
        return error_response("Could not retrieve user", 500)

    if not user:
        return error_response("User not found", 404)

    return success_response(200, user=profile_user(user))
