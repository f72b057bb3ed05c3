import pytest
from unittest.mock import MagicMock

from bethel_backend.core.config import Settings
from bethel_backend.database.db_connection import COLLECTIONS
from bethel_backend.gateway.server import create_app
from bethel_backend.tests.helpers import TEST_EMAIL, TEST_SECRET, TEST_USER_ID


@pytest.fixture
def settings(tmp_path):
    (tmp_path / "index.html").write_text("<h1>Bethel Department</h1>")
    return Settings(
        jwt_secret=TEST_SECRET,
        mongo_db_name="bethel_test",
        static_dir=str(tmp_path),
    )


@pytest.fixture
def mock_db():
    """
    A MagicMock standing in for the pymongo Database.
    Each collection is its own mock so tests can set return values per collection.
    """
    db = MagicMock()
    collections = {name: MagicMock(name=name) for name in COLLECTIONS}
    db.__getitem__.side_effect = lambda name: collections[name]
    return db


@pytest.fixture
def app(settings, mock_db):
    app = create_app(settings, db=mock_db)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tokens(app):
    return app.extensions["bethel"].tokens


@pytest.fixture
def auth_headers(tokens):
    token = tokens.create_token(TEST_USER_ID, TEST_EMAIL, "student")
    return {"Authorization": f"Bearer {token}"}
