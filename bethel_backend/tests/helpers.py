"""Constants and token builders shared by the test modules."""

import jwt
from datetime import datetime, timedelta, timezone

TEST_SECRET = "test_secret"
TEST_USER_ID = "64b7f0c2a1b2c3d4e5f60718"
TEST_EMAIL = "ann@x.edu"


def expired_token(user_id=TEST_USER_ID, email=TEST_EMAIL, role="student"):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now - timedelta(days=8),
        "exp": now - timedelta(days=1),
    }
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")
