from datetime import datetime, timezone

from bson import ObjectId
from pymongo import DESCENDING

from bethel_backend.tests.helpers import TEST_EMAIL


def test_list_announcements_newest_first(client, mock_db):
    announcements = mock_db["announcements"]
    announcements.find.return_value.sort.return_value = [
        {
            "_id": ObjectId(),
            "title": "Registration opens",
            "content": "Spring registration opens Monday.",
            "author": "admin@x.edu",
            "createdAt": datetime(2025, 2, 1, tzinfo=timezone.utc),
        },
    ]

    response = client.get("/api/announcements")

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["announcements"][0]["title"] == "Registration opens"
    assert data["announcements"][0]["createdAt"] == "2025-02-01T00:00:00+00:00"
    announcements.find.return_value.sort.assert_called_once_with("createdAt", DESCENDING)


def test_create_announcement_author_comes_from_token(client, mock_db, auth_headers):
    announcements = mock_db["announcements"]
    announcements.insert_one.return_value.inserted_id = ObjectId()

    payload = {
        "title": "Lab closed",
        "content": "The lab is closed Friday.",
        "author": "impostor@x.edu",
        "priority": "high",
    }

    response = client.post("/api/announcements", json=payload, headers=auth_headers)

    assert response.status_code == 201
    announcement = response.get_json()["announcement"]
    assert announcement["author"] == TEST_EMAIL
    assert announcement["priority"] == "high"
    assert "createdAt" in announcement
    assert announcements.insert_one.call_args[0][0]["author"] == TEST_EMAIL


def test_create_announcement_requires_token(client, mock_db):
    response = client.post("/api/announcements", json={"title": "T", "content": "C"})

    assert response.status_code == 401
    assert response.get_json()["success"] is False
    mock_db["announcements"].insert_one.assert_not_called()


def test_create_announcement_missing_content(client, mock_db, auth_headers):
    response = client.post("/api/announcements", json={"title": "Only a title"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["message"] == "content is required"
    mock_db["announcements"].insert_one.assert_not_called()
