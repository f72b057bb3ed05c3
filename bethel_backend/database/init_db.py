"""
Database bootstrap and quick health check.

Run directly to create indexes and print document counts for each collection:

    python -m bethel_backend.database.init_db

The same helpers back the /api and /api/test-db diagnostics.
"""

import logging
import sys
from typing import Dict

from pymongo.database import Database
from pymongo.errors import PyMongoError

from bethel_backend.core.config import Settings
from bethel_backend.database.db_connection import COLLECTIONS, connect, ensure_indexes

logger = logging.getLogger(__name__)


def ping(db: Database) -> bool:
    """Return True if the server answers a ping command."""
    try:
        db.client.admin.command("ping")
        return True
    except PyMongoError:
        logger.warning("Mongo ping failed", exc_info=True)
        return False


def collection_counts(db: Database) -> Dict[str, int]:
    """
    Count the documents in every application collection.

    Raises:
        pymongo.errors.PyMongoError: If the store is unreachable.
    """
    return {name: db[name].count_documents({}) for name in COLLECTIONS}


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    settings = Settings.from_env()

    print("--- Running Database Quick Test ---")
    db = connect(settings)

    if not ping(db):
        print(f"Could not reach MongoDB at {settings.mongo_uri}")
        return 1
    print(f"Connected! Using database '{settings.mongo_db_name}'")

    try:
        ensure_indexes(db)
        print("Indexes ensured.")
        for name, count in collection_counts(db).items():
            print(f"  {name}: {count} document(s)")
    except PyMongoError as e:
        print(f"Database check failed: {e}")
        return 1

    print("--- Database Quick Test Passed ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
