"""
User documents for the authentication service.

A user lives in the `users` collection:

    {
        "_id": ObjectId,
        "name": str,
        "email": str,            # unique, trimmed and lowercased
        "password": str,         # argon2 hash, never plaintext
        "studentId": str | None,
        "institution": str | None,
        "major": str | None,
        "role": "student" | "admin",
        "createdAt": datetime,
        "updatedAt": datetime,
    }
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"
VALID_ROLES = (ROLE_STUDENT, ROLE_ADMIN)

PASSWORD_MIN_LENGTH = 6
NAME_MAX_LENGTH = 100
PROFILE_FIELD_MAX_LENGTH = 100

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

OPTIONAL_PROFILE_FIELDS = ("studentId", "institution", "major")


def normalize_email(email: Any) -> str:
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def new_user_document(
    name: str,
    email: str,
    password_hash: str,
    profile: Optional[Dict[str, Optional[str]]] = None,
    role: str = ROLE_STUDENT,
) -> Dict[str, Any]:
    """Build the document inserted on signup."""
    if role not in VALID_ROLES:
        raise ValueError(f"role must be one of: {', '.join(VALID_ROLES)}")

    now = datetime.now(timezone.utc)
    doc = {
        "name": name,
        "email": email,
        "password": password_hash,
        "role": role,
        "createdAt": now,
        "updatedAt": now,
    }
    for key in OPTIONAL_PROFILE_FIELDS:
        doc[key] = (profile or {}).get(key)
    return doc


def public_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    """The projection returned by signup and login. Never includes the hash."""
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "email": doc.get("email"),
        "role": doc.get("role", ROLE_STUDENT),
        "studentId": doc.get("studentId"),
    }


def profile_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    """The fuller projection returned by /api/me."""
    created_at = doc.get("createdAt")
    profile = public_user(doc)
    profile.update({
        "institution": doc.get("institution"),
        "major": doc.get("major"),
        "createdAt": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
    })
    return profile
