"""
Shared authentication helpers.
Provides password hashing, token creation, token verification and the
`require_auth` guard for protected routes.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from flask import Response, current_app, g, request

from bethel_backend.core.config import Settings
from bethel_backend.core.responses import error_response

logger = logging.getLogger(__name__)

ph = PasswordHasher()

# Verified against when the email is unknown, so both login failures cost one hash check.
_DUMMY_HASH = ph.hash("bethel-placeholder-password")

INVALID_CREDENTIALS = "Invalid email or password"
AUTH_REQUIRED = "Authentication required"
INVALID_TOKEN = "Invalid or expired token"


class TokenConfigurationError(RuntimeError):
    """The server cannot sign or verify tokens (missing secret)."""


# --- PASSWORDS ---
def hash_password(password: str) -> str:
    """Return a salted argon2 hash of `password`."""
    return ph.hash(password)


def verify_password(password_hash: Optional[str], password: str) -> bool:
    """
    Check a plaintext password against a stored argon2 hash.

    A missing or corrupt stored hash counts as a mismatch.
    """
    if not password_hash:
        burn_verification(password)
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def burn_verification(password: str) -> None:
    """Run one hash check for a login whose email matched no account."""
    try:
        ph.verify(_DUMMY_HASH, password)
    except (VerificationError, InvalidHashError):
        pass


# --- JWT ---
class TokenIssuer:
    """
    Signs and verifies session tokens with the server-held secret.

    Tokens carry the user id, email and role, and expire after
    `settings.token_expiration_days`. The payload is readable by whoever holds
    the token, so nothing else goes in it.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def lifetime(self) -> timedelta:
        return timedelta(days=self.settings.token_expiration_days)

    def _secret(self) -> str:
        if not self.settings.jwt_secret:
            raise TokenConfigurationError("JWT_SECRET is not configured")
        return self.settings.jwt_secret

    def create_token(self, user_id: Any, email: str, role: str) -> str:
        """
        Generate a new JWT for a verified user.

        Raises:
            TokenConfigurationError: If no signing secret is configured.
        """
        secret = self._secret()
        now = datetime.now(timezone.utc)

        payload = {
            "sub": str(user_id),
            "userId": str(user_id),
            "email": email,
            "role": role,
            "iat": now,
            "exp": now + self.lifetime,
        }

        return jwt.encode(payload, secret, algorithm=self.settings.jwt_algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the payload.

        Raises:
            jwt.InvalidTokenError: Bad signature, malformed or expired token.
            TokenConfigurationError: If no signing secret is configured.
        """
        return jwt.decode(
            token,
            self._secret(),
            algorithms=[self.settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )


def get_token_issuer() -> TokenIssuer:
    return current_app.extensions["bethel"].tokens


# --- ACCESS GUARD ---
def verify_token_from_request(
    required_roles: Optional[List[str]] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Never touches the database; the token alone decides.

    Args:
        required_roles (list, optional): Roles allowed through.

    Returns:
        tuple: (identity, error_response, status_code)
               identity is {"userId", "email", "role"} on success, and
               error_response/status_code are None. On failure identity is None.
    """
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        err, code = error_response(AUTH_REQUIRED, 401, "missing token")
        return None, err, code

    token = auth.split(" ", 1)[1].strip()
    if not token:
        err, code = error_response(AUTH_REQUIRED, 401, "missing token")
        return None, err, code

    try:
        payload = get_token_issuer().decode_token(token)
    except TokenConfigurationError:
        logger.exception("Cannot verify token")
        err, code = error_response("Server configuration error", 500)
        return None, err, code
    except jwt.ExpiredSignatureError:
        err, code = error_response(INVALID_TOKEN, 401, "token expired")
        return None, err, code
    except jwt.InvalidTokenError:
        err, code = error_response(INVALID_TOKEN, 401, "invalid token")
        return None, err, code

    identity = {
        "userId": payload.get("userId") or payload.get("sub"),
        "email": payload.get("email"),
        "role": payload.get("role"),
    }

    if required_roles and identity["role"] not in required_roles:
        err, code = error_response("Permission denied", 403)
        return None, err, code

    return identity, None, None


def require_auth(required_roles: Optional[List[str]] = None) -> Callable:
    """
    Decorator for protected views.

    Rejects the request before the view runs unless a valid bearer token is
    present; otherwise stores the decoded identity on `g.current_user`.
    """
    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args: Any, **kwargs: Any):
            identity, err, code = verify_token_from_request(required_roles)
            if err:
                return err, code
            g.current_user = identity
            return view(*args, **kwargs)
        return wrapper
    return decorator
