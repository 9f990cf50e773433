"""Tests for the contact routes and notification side effect."""

from conftest import FakeMail, make_contact
from portfolio_api.notifications import ContactNotifier


def test_submit_contact_and_read_back_as_admin(client, admin_headers):
    response = client.post("/api/contact", json=make_contact())

    assert response.status_code == 201
    submission = response.json()
    assert submission["read"] is False
    assert submission["email"] == "ada@example.com"

    listing = client.get("/api/contact", headers=admin_headers)
    assert listing.status_code == 200
    assert [s["id"] for s in listing.json()] == [submission["id"]]
    assert listing.json()[0]["read"] is False


def test_submit_contact_ignores_client_controlled_fields(client, admin_headers):
    response = client.post(
        "/api/contact", json=make_contact(id="forced-id", read=True)
    )

    assert response.status_code == 201
    assert response.json()["id"] != "forced-id"
    assert response.json()["read"] is False


def test_submit_contact_without_subject(client):
    response = client.post("/api/contact", json=make_contact(subject=None))

    assert response.status_code == 201
    assert response.json()["subject"] is None


def test_message_too_long(client):
    response = client.post("/api/contact", json=make_contact(message="x" * 5001))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid contact submission data"
    assert [d["field"] for d in body["details"]] == ["message"]


def test_invalid_contact_fields_are_reported(client):
    response = client.post(
        "/api/contact",
        json={"name": "", "email": "not-an-email", "subject": "s" * 201, "message": ""},
    )

    assert response.status_code == 400
    fields = {d["field"] for d in response.json()["details"]}
    assert fields == {"name", "email", "subject", "message"}


def test_malformed_json_is_a_bad_request(client):
    response = client.post(
        "/api/contact",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_notification_sent_after_submission(client, fake_mail):
    client.post("/api/contact", json=make_contact(subject="Collaboration"))

    assert len(fake_mail.messages) == 1
    message = fake_mail.messages[0]
    assert message.subject == "Contact Form: Collaboration"
    assert "Ada Lovelace" in message.body


def test_notification_failure_does_not_fail_submission(client, admin_headers, settings):
    client.app.state.notifier = ContactNotifier(settings, fastmail=FakeMail(fail=True))

    response = client.post("/api/contact", json=make_contact())

    assert response.status_code == 201
    assert len(client.get("/api/contact", headers=admin_headers).json()) == 1


def test_mark_submission_read(client, admin_headers):
    submission = client.post("/api/contact", json=make_contact()).json()

    response = client.patch(f"/api/contact/{submission['id']}/read", headers=admin_headers)

    assert response.status_code == 204
    listing = client.get("/api/contact", headers=admin_headers).json()
    assert listing[0]["read"] is True


def test_mark_missing_submission_read(client, admin_headers):
    response = client.patch("/api/contact/missing/read", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Contact submission not found"}


def test_contact_admin_routes_require_admin(client):
    assert client.get("/api/contact").status_code == 401
    assert client.patch("/api/contact/any/read").status_code == 401


def test_whitespace_name_and_message_are_accepted(client):
    response = client.post("/api/contact", json=make_contact(name=" ", message="  "))

    assert response.status_code == 201
    assert response.json()["name"] == " "
