"""
Announcement documents.

`title` and `content` are required; `author` always comes from the token, never
from the request body. Other submitted fields are kept within the same bounds
as event extras.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from bethel_backend.core.fields import extract_extra_fields, require_string

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000

TYPED_FIELDS = ("title", "content")
SERVER_FIELDS = ("_id", "id", "author", "createdAt", "updatedAt")


def build_announcement(data: Dict[str, Any], author: str) -> Dict[str, Any]:
    """
    Validate a submitted announcement and return the document to insert.

    Raises:
        ValidationError: On a missing/oversized field or out-of-bounds extras.
    """
    title = require_string(data, "title", TITLE_MAX_LENGTH)
    content = require_string(data, "content", CONTENT_MAX_LENGTH)

    extra = extract_extra_fields(
        {k: v for k, v in data.items() if k not in SERVER_FIELDS},
        TYPED_FIELDS,
    )

    now = datetime.now(timezone.utc)
    doc = dict(extra)
    doc.update({
        "title": title,
        "content": content,
        "author": author,
        "createdAt": now,
        "updatedAt": now,
    })
    return doc
