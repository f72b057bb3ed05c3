"""
MongoDB connection helper.

Provides connect() to build a database handle from Settings, and get_db() for
route handlers to reach the handle the app was created with.
"""

import logging

from flask import current_app
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from bethel_backend.core.config import Settings

logger = logging.getLogger(__name__)

USERS = "users"
EVENTS = "events"
ANNOUNCEMENTS = "announcements"

COLLECTIONS = (USERS, EVENTS, ANNOUNCEMENTS)


def connect(settings: Settings) -> Database:
    """
    Create a MongoClient for the configured URI and return the app database.

    The client connects lazily, so this does not fail when the server is down;
    the first operation will raise pymongo.errors.ServerSelectionTimeoutError
    after `mongo_timeout_ms` instead.

    Returns:
        pymongo.database.Database: Handle to `settings.mongo_db_name`.
    """
    client = MongoClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        tz_aware=True,
    )
    logger.info(f"Mongo client configured for database '{settings.mongo_db_name}'")
    return client[settings.mongo_db_name]


def ensure_indexes(db: Database) -> None:
    """
    Create the indexes the application relies on.

    The unique index on users.email is what rejects duplicate signups, including
    two concurrent signups for the same address.
    """
    db[USERS].create_index([("email", ASCENDING)], unique=True, name="uniq_users_email")
    db[EVENTS].create_index([("isActive", ASCENDING), ("date", ASCENDING)], name="idx_events_active_date")
    db[ANNOUNCEMENTS].create_index([("createdAt", DESCENDING)], name="idx_announcements_created")


def get_db() -> Database:
    """Return the database handle registered on the current Flask app."""
    return current_app.extensions["bethel"].db


def require_indexes() -> None:
    """
    Make sure the indexes exist before a write that depends on them.

    Index creation is retried here when it failed at startup, so the unique
    email index is in place before any signup insert.

    Raises:
        pymongo.errors.PyMongoError: If the indexes still cannot be created.
    """
    services = current_app.extensions["bethel"]
    if services.indexes_ready:
        return
    ensure_indexes(services.db)
    services.indexes_ready = True
    logger.info("Mongo indexes created after startup retry")
