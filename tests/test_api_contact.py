"""Tests for the contact inbox."""

import pytest

MESSAGE = {
    "name": "Yael",
    "email": "yael@mail.com",
    "subject": "Delivery question",
    "message": "When will my rug arrive in Haifa?",
    "category": "order",
}


@pytest.fixture
def message_id(client):
    response = client.post("/api/contact", json=MESSAGE)
    assert response.status_code == 201
    return response.json()["data"]["id"]


class TestSubmit:
    def test_public_submission(self, client):
        response = client.post("/api/contact", json=MESSAGE)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"]

    def test_message_too_short(self, client):
        response = client.post("/api/contact", json={**MESSAGE, "message": "hi"})
        assert response.status_code == 400

    def test_optional_phone_validated(self, client):
        response = client.post("/api/contact", json={**MESSAGE, "phone": "not-a-phone"})
        assert response.status_code == 400


class TestInbox:
    def test_listing_is_admin_only(self, client, customer_headers, message_id):
        assert client.get("/api/contact").status_code == 401
        assert client.get("/api/contact", headers=customer_headers).status_code == 403

    def test_list_and_filter(self, client, admin_headers, message_id):
        client.post("/api/contact", json={**MESSAGE, "category": "support", "name": "Omer"})

        all_messages = client.get("/api/contact", headers=admin_headers).json()
        assert all_messages["pagination"]["total"] == 2

        support = client.get("/api/contact?category=support", headers=admin_headers).json()
        assert [m["name"] for m in support["data"]] == ["Omer"]

        found = client.get("/api/contact?search=HAIFA", headers=admin_headers).json()
        assert found["pagination"]["total"] == 2

    def test_opening_marks_read(self, client, admin_headers, message_id):
        response = client.get(f"/api/contact/{message_id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "read"

    def test_reply_records_admin(self, client, admin, admin_headers, message_id):
        response = client.put(
            f"/api/contact/{message_id}/status",
            json={"status": "replied", "admin_notes": "Sent tracking link"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "replied"
        assert data["replied_by"] == str(admin.id)
        assert data["replied_at"] is not None
        assert data["admin_notes"] == "Sent tracking link"

    def test_priority(self, client, admin_headers, message_id):
        response = client.put(
            f"/api/contact/{message_id}/priority",
            json={"priority": "urgent"},
            headers=admin_headers,
        )
        assert response.json()["data"]["priority"] == "urgent"

        bad = client.put(
            f"/api/contact/{message_id}/priority",
            json={"priority": "whenever"},
            headers=admin_headers,
        )
        assert bad.status_code == 400

    def test_stats(self, client, admin_headers, message_id):
        data = client.get("/api/contact/stats", headers=admin_headers).json()["data"]
        assert data["status_stats"] == [{"key": "new", "count": 1}]
        assert data["priority_stats"] == [{"key": "medium", "count": 1}]
        assert data["category_stats"] == [{"key": "order", "count": 1}]
        assert len(data["recent_messages"]) == 1

    def test_delete(self, client, admin_headers, message_id):
        assert client.delete(f"/api/contact/{message_id}", headers=admin_headers).status_code == 200
        response = client.get(f"/api/contact/{message_id}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Message not found"
