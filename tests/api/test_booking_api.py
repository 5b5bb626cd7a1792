"""HTTP tests for the booking endpoint."""

VALID = {
    "name": "Jane Doe",
    "email": "jane@example.org",
    "serviceType": "photography",
    "date": "2024-06-01T00:00:00.000Z",
    "message": "Looking for engagement photos in June.",
}


def test_valid_booking_sends_email(client, email_client):
    response = client.post("/api/booking", json=VALID)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Booking request sent successfully!"
    assert body["emailId"].startswith("mock-")

    [sent] = email_client.sent
    assert sent.subject == "New Booking Request from Jane Doe"
    assert sent.reply_to == "jane@example.org"
    assert "June 1st, 2024" in sent.html
    assert "Photography" in sent.html


def test_short_message_is_rejected(client, email_client):
    response = client.post("/api/booking", json={**VALID, "message": "Hi"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid form data"
    assert any("message" in issue["loc"] for issue in body["details"])
    assert email_client.sent == []


def test_every_invalid_field_is_reported(client):
    response = client.post("/api/booking", json={
        "name": "J",
        "email": "not-an-email",
        "serviceType": "",
        "date": "someday",
        "message": "short",
    })

    assert response.status_code == 400
    fields = {issue["loc"][0] for issue in response.json()["details"]}
    assert fields == {"name", "email", "serviceType", "date", "message"}


def test_date_only_is_accepted(client):
    response = client.post("/api/booking", json={**VALID, "date": "2024-12-25"})

    assert response.status_code == 200


def test_malformed_body_is_rejected(client):
    response = client.post(
        "/api/booking",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid form data"


def test_send_failure(client, email_client):
    email_client.fail_with = "provider down"

    response = client.post("/api/booking", json=VALID)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to send email"}
