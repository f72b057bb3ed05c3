from datetime import datetime, timezone

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import ServerSelectionTimeoutError

from bethel_backend.tests.helpers import TEST_EMAIL, expired_token


def test_list_events(client, mock_db):
    events = mock_db["events"]
    events.find.return_value.sort.return_value = [
        {
            "_id": ObjectId(),
            "title": "Orientation",
            "date": datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc),
            "isActive": True,
        },
        {
            "_id": ObjectId(),
            "title": "Career Fair",
            "date": datetime(2025, 3, 2, 13, 0, tzinfo=timezone.utc),
            "isActive": True,
            "room": "HC 101",
        },
    ]

    response = client.get("/api/events")

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert [e["title"] for e in data["events"]] == ["Orientation", "Career Fair"]
    assert data["events"][0]["date"] == "2025-01-10T09:00:00+00:00"
    assert data["events"][1]["room"] == "HC 101"
    assert isinstance(data["events"][0]["id"], str)
    assert "_id" not in data["events"][0]

    # Inactive events are filtered by the store, soonest first
    events.find.assert_called_once_with({"isActive": True})
    events.find.return_value.sort.assert_called_once_with("date", ASCENDING)


def test_list_events_is_public(client, mock_db):
    mock_db["events"].find.return_value.sort.return_value = []

    response = client.get("/api/events")

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "events": []}


def test_list_events_database_error(client, mock_db):
    mock_db["events"].find.side_effect = ServerSelectionTimeoutError("no servers")

    response = client.get("/api/events")

    assert response.status_code == 500
    assert response.get_json() == {"success": False, "message": "Failed to retrieve events"}


def test_create_event_success(client, mock_db, auth_headers):
    events = mock_db["events"]
    new_id = ObjectId()
    events.insert_one.return_value.inserted_id = new_id

    payload = {
        "title": "Research Symposium",
        "date": "2025-04-18T15:00:00Z",
        "location": "Chapel",
        "speaker": "Dr. Lee",
        "createdBy": "someone@else.edu",
    }

    response = client.post("/api/events", json=payload, headers=auth_headers)

    assert response.status_code == 201
    event = response.get_json()["event"]
    assert event["id"] == str(new_id)
    assert event["title"] == "Research Symposium"
    assert event["date"] == "2025-04-18T15:00:00+00:00"
    assert event["isActive"] is True
    assert event["speaker"] == "Dr. Lee"
    assert event["createdBy"] == TEST_EMAIL

    inserted = events.insert_one.call_args[0][0]
    assert inserted["date"] == datetime(2025, 4, 18, 15, 0, tzinfo=timezone.utc)


def test_create_inactive_event(client, mock_db, auth_headers):
    mock_db["events"].insert_one.return_value.inserted_id = ObjectId()

    response = client.post(
        "/api/events",
        json={"title": "Old Event", "date": "2024-01-01", "isActive": False},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert mock_db["events"].insert_one.call_args[0][0]["isActive"] is False


def test_create_event_requires_token(client, mock_db):
    response = client.post("/api/events", json={"title": "T", "date": "2025-01-01"})

    assert response.status_code == 401
    mock_db["events"].insert_one.assert_not_called()


def test_create_event_expired_token(client, mock_db):
    response = client.post(
        "/api/events",
        json={"title": "T", "date": "2025-01-01"},
        headers={"Authorization": f"Bearer {expired_token()}"},
    )

    assert response.status_code == 401
    mock_db["events"].insert_one.assert_not_called()


def test_create_event_invalid_input(client, mock_db, auth_headers):
    bad_payloads = [
        {"title": "No date"},
        {"date": "2025-01-01"},
        {"title": "Bad date", "date": "next tuesday"},
        {"title": "Bad flag", "date": "2025-01-01", "isActive": "yes"},
        {"title": "x" * 201, "date": "2025-01-01"},
        {"title": "Nested", "date": "2025-01-01", "meta": {"a": 1}},
        {"title": "Operator", "date": "2025-01-01", "$where": "1"},
        {"title": "Too many", "date": "2025-01-01", **{f"f{i}": i for i in range(21)}},
        {"title": "Huge int", "date": "2025-01-01", "attendees": 2 ** 70},
        {"title": "NUL key", "date": "2025-01-01", "a\x00b": 1},
    ]

    for payload in bad_payloads:
        response = client.post("/api/events", json=payload, headers=auth_headers)
        assert response.status_code == 400, payload
        assert response.get_json()["success"] is False

    mock_db["events"].insert_one.assert_not_called()


def test_create_event_database_error(client, mock_db, auth_headers):
    mock_db["events"].insert_one.side_effect = ServerSelectionTimeoutError("no servers")

    response = client.post("/api/events", json={"title": "T", "date": "2025-01-01"}, headers=auth_headers)

    assert response.status_code == 500
    assert response.get_json()["message"] == "Failed to create event"


def test_create_event_rejects_non_finite_number(client, mock_db, auth_headers):
    response = client.post(
        "/api/events",
        data='{"title": "T", "date": "2025-01-01", "ratio": NaN}',
        content_type="application/json",
        headers=auth_headers,
    )

    assert response.status_code == 400
    mock_db["events"].insert_one.assert_not_called()
