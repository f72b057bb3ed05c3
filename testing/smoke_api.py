"""
Quick API smoke test for the Bethel Department backend against a running server.
Tests: health, signup, login, profile, create/list events, create/list announcements.

Start the server first (python -m bethel_backend.gateway.server), then run:

    python testing/smoke_api.py [base_url]
"""

import sys
import uuid

import requests

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"

# 0) Health
r = requests.get(f"{BASE}/api")
print("API:", r.status_code, r.json())

r = requests.get(f"{BASE}/api/test-db")
print("TEST-DB:", r.status_code, r.json())

# 1) Sign up a throwaway user
email = f"smoke-{uuid.uuid4().hex[:8]}@example.edu"
r = requests.post(f"{BASE}/api/signup", json={
    "name": "Smoke Test",
    "email": email,
    "password": "pass123",
    "institution": "Bethel University",
})
print("SIGNUP:", r.status_code, r.json())

# 2) Signing up again must be rejected
r = requests.post(f"{BASE}/api/signup", json={"name": "Smoke Test", "email": email, "password": "pass123"})
print("SIGNUP AGAIN:", r.status_code, r.json())

# 3) Login with the same credentials
r = requests.post(f"{BASE}/api/login", json={"email": email, "password": "pass123"})
print("LOGIN:", r.status_code, r.json())
token = r.json().get("token")
headers = {"Authorization": f"Bearer {token}"}

# 4) Wrong password
r = requests.post(f"{BASE}/api/login", json={"email": email, "password": "wrong-password"})
print("BAD LOGIN:", r.status_code, r.json())

# 5) Profile
r = requests.get(f"{BASE}/api/me", headers=headers)
print("ME:", r.status_code, r.json())

# 6) Create an event, then list
r = requests.post(f"{BASE}/api/events", json={
    "title": "Smoke Test Event",
    "date": "2030-10-20T10:00:00Z",
    "location": "Room 101",
}, headers=headers)
print("CREATE EVENT:", r.status_code, r.json())

r = requests.get(f"{BASE}/api/events")
print("LIST EVENTS:", r.status_code, len(r.json().get("events", [])), "event(s)")

# 7) Create an announcement, then list
r = requests.post(f"{BASE}/api/announcements", json={
    "title": "Smoke Test Announcement",
    "content": "Posted by the smoke test.",
}, headers=headers)
print("CREATE ANNOUNCEMENT:", r.status_code, r.json())

r = requests.get(f"{BASE}/api/announcements")
print("LIST ANNOUNCEMENTS:", r.status_code, len(r.json().get("announcements", [])), "announcement(s)")
