"""
Application settings.

Everything the services need from the environment is read here, once, into a
`Settings` object. The gateway builds it at startup and hands it to the token
issuer, the store connector and the Flask app; nothing else reads os.environ.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _get_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: Optional[str], default: List[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    port: int = 3000
    host: str = "0.0.0.0"
    debug: bool = False
    log_level: str = "INFO"

    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    token_expiration_days: int = 7

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "bethel_department"
    mongo_timeout_ms: int = 5000

    static_dir: str = os.path.join(PROJECT_ROOT, "frontend")
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        A `.env` file in the working directory (or any parent) is loaded first,
        without overriding variables that are already set.
        """
        load_dotenv()

        return cls(
            port=int(os.getenv("PORT", "3000")),
            host=os.getenv("HOST", "0.0.0.0"),
            debug=_get_bool(os.getenv("FLASK_DEBUG"), default=False),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            token_expiration_days=int(os.getenv("TOKEN_EXPIRATION_DAYS", "7")),
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db_name=os.getenv("MONGO_DB_NAME", "bethel_department"),
            mongo_timeout_ms=int(os.getenv("MONGO_TIMEOUT_MS", "5000")),
            static_dir=os.getenv("STATIC_DIR", os.path.join(PROJECT_ROOT, "frontend")),
            cors_origins=_get_list(os.getenv("CORS_ORIGINS"), ["*"]),
        )

    def validate(self) -> List[str]:
        """Return human-readable problems with this configuration."""
        problems = []
        if not self.jwt_secret:
            problems.append("JWT_SECRET is not set; signup, login and protected routes will fail.")
        if self.token_expiration_days <= 0:
            problems.append("TOKEN_EXPIRATION_DAYS must be positive.")
        return problems
