"""
Event documents.

Typed fields: title, date, description, location, isActive. Anything else the
client submits is kept as a bounded map of extra scalar fields.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from bethel_backend.core.fields import (
    ValidationError,
    extract_extra_fields,
    optional_string,
    parse_dt,
    require_string,
)

# --- CONSTANTS FOR VALIDATION ---
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000
LOCATION_MAX_LENGTH = 200

TYPED_FIELDS = ("title", "date", "description", "location", "isActive")
SERVER_FIELDS = ("_id", "id", "createdBy", "createdAt", "updatedAt")


def build_event(data: Dict[str, Any], created_by: str) -> Dict[str, Any]:
    """
    Validate a submitted event and return the document to insert.

    Raises:
        ValidationError: If a typed field is missing or malformed, or the extra
            fields exceed their bounds.
    """
    title = require_string(data, "title", TITLE_MAX_LENGTH)

    date_str = data.get("date")
    if not date_str:
        raise ValidationError("date is required")
    date = parse_dt(date_str)
    if not date:
        raise ValidationError("Invalid date format. Use ISO-8601.")
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)

    is_active = data.get("isActive", True)
    if not isinstance(is_active, bool):
        raise ValidationError("isActive must be true or false")

    extra = extract_extra_fields(
        {k: v for k, v in data.items() if k not in SERVER_FIELDS},
        TYPED_FIELDS,
    )

    now = datetime.now(timezone.utc)
    doc = dict(extra)
    doc.update({
        "title": title,
        "date": date,
        "description": optional_string(data, "description", DESCRIPTION_MAX_LENGTH),
        "location": optional_string(data, "location", LOCATION_MAX_LENGTH),
        "isActive": is_active,
        "createdBy": created_by,
        "createdAt": now,
        "updatedAt": now,
    })
    return doc
