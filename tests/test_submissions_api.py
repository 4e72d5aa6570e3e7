import json

import aiosmtplib
import pytest

from app.constants.constants import DRIVER_REQUIRED_FIELDS, HIRING_REQUIRED_FIELDS

DRIVER = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@x.com",
    "phone": "555-1234",
}
COMPANY = {
    "companyName": "Acme Freight",
    "contactPerson": "Sam Lee",
    "email": "sam@acme.com",
    "phone": "555-9876",
}
PDF = "application/pdf"


def html_body(message) -> str:
    return message.get_body(preferencelist=("html",)).get_content()


def stored_files(upload_dir):
    return list(upload_dir.iterdir()) if upload_dir.exists() else []


# ------------------------------
# Driver applications
# ------------------------------

def test_driver_application_sends_admin_notice_and_confirmation(client, outbox):
    response = client.post("/api/submit-application", data=DRIVER)

    assert response.status_code == 200
    assert response.json() == {"message": "Application submitted successfully"}
    assert [message["To"] for message in outbox] == ["admin@abchires.com", "jane@x.com"]


def test_driver_application_with_resume(client, outbox, upload_dir):
    response = client.post(
        "/api/submit-application",
        data={**DRIVER, "routeType": '["OTR", "Regional"]', "additionalInfo": " <b>Team</b> driver "},
        files={"resume": ("jane-cv.pdf", b"%PDF-1.4 resume", PDF)},
    )

    assert response.status_code == 200
    admin = outbox[0]
    attachment = next(admin.iter_attachments())
    assert attachment.get_filename() == "jane-cv.pdf"
    assert attachment.get_content() == b"%PDF-1.4 resume"

    body = html_body(admin)
    assert "OTR, Regional" in body
    assert "bTeam/b driver" in body
    assert stored_files(upload_dir) == []


def test_repeated_route_keys_render_as_list(client, outbox):
    response = client.post(
        "/api/submit-application",
        data={**DRIVER, "routeType": ["Local", "Dedicated"]},
    )
    assert response.status_code == 200
    assert "Local, Dedicated" in html_body(outbox[0])


@pytest.mark.parametrize("field", DRIVER_REQUIRED_FIELDS)
def test_driver_missing_required_field(client, outbox, field):
    empty = client.post("/api/submit-application", data={**DRIVER, field: "   "})
    absent = client.post(
        "/api/submit-application",
        data={key: value for key, value in DRIVER.items() if key != field},
    )

    for response in (empty, absent):
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
    assert outbox == []


@pytest.mark.parametrize("email", ["jane", "jane@x", "jane@x.", "jane doe@x.com"])
def test_driver_invalid_email(client, outbox, email):
    response = client.post("/api/submit-application", data={**DRIVER, "email": email})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email format"}
    assert outbox == []


def test_invalid_email_still_removes_uploaded_resume(client, outbox, upload_dir):
    response = client.post(
        "/api/submit-application",
        data={**DRIVER, "email": "not-an-email"},
        files={"resume": ("cv.pdf", b"%PDF-1.4", PDF)},
    )
    assert response.status_code == 400
    assert stored_files(upload_dir) == []


@pytest.mark.parametrize(
    ("filename", "content_type"),
    [("cv.pdf", "image/png"), ("cv.png", PDF), ("cv.txt", "text/plain")]
)
def test_resume_type_rejected(client, outbox, upload_dir, filename, content_type):
    response = client.post(
        "/api/submit-application",
        data=DRIVER,
        files={"resume": (filename, b"data", content_type)},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Only PDF and Word documents are allowed"}
    assert outbox == []
    assert stored_files(upload_dir) == []


def test_oversize_resume_rejected(client, outbox, upload_dir):
    response = client.post(
        "/api/submit-application",
        data=DRIVER,
        files={"resume": ("cv.pdf", b"0" * (6 * 1024 * 1024), PDF)},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "File too large. Maximum size is 5MB."}
    assert outbox == []
    assert stored_files(upload_dir) == []


def test_resume_under_unexpected_field_rejected(client, outbox):
    response = client.post(
        "/api/submit-application",
        data=DRIVER,
        files={"coverLetter": ("letter.pdf", b"%PDF-1.4", PDF)},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Unexpected file field: coverLetter"}


def test_test_mode_skips_mail_and_removes_resume(client, mail_client, outbox, upload_dir):
    mail_client.disabled = True
    response = client.post(
        "/api/submit-application",
        data=DRIVER,
        files={"resume": ("cv.docx", b"PK docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Application submitted successfully (test mode)"}
    assert outbox == []
    assert stored_files(upload_dir) == []


def test_driver_delivery_failure(client, monkeypatch, upload_dir):
    async def refuse(message, **kwargs):
        raise aiosmtplib.SMTPException("relay down")

    monkeypatch.setattr(aiosmtplib, "send", refuse)
    response = client.post(
        "/api/submit-application",
        data=DRIVER,
        files={"resume": ("cv.pdf", b"%PDF-1.4", PDF)},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Error submitting application. Please try again."}
    assert stored_files(upload_dir) == []


# ------------------------------
# Company hiring requests
# ------------------------------

def test_hiring_request_json_positions_array(client, outbox):
    response = client.post(
        "/api/company-hiring",
        json={**COMPANY, "positions": ["CDL-A Driver", "Owner Operator"], "numberOfDriversNeeded": 4},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Hiring request submitted successfully"}
    admin, confirmation = outbox
    assert admin["Subject"] == "New Hiring Request: Acme Freight"
    assert "<strong>Positions:</strong> CDL-A Driver, Owner Operator" in html_body(admin)
    assert confirmation["To"] == "sam@acme.com"
    assert "4 driver(s)" in html_body(confirmation)


def test_hiring_request_json_encoded_positions(client, outbox):
    response = client.post(
        "/api/company-hiring",
        data={**COMPANY, "positions": json.dumps(["Local", "Regional"])},
    )
    assert response.status_code == 200
    assert "<strong>Positions:</strong> Local, Regional" in html_body(outbox[0])


def test_hiring_request_bare_string_position(client, outbox):
    response = client.post("/api/company-hiring", json={**COMPANY, "positions": "Team Driver"})
    assert response.status_code == 200
    assert "<strong>Positions:</strong> Team Driver" in html_body(outbox[0])


@pytest.mark.parametrize("field", HIRING_REQUIRED_FIELDS)
def test_hiring_missing_required_field(client, outbox, field):
    response = client.post("/api/company-hiring", json={**COMPANY, field: ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    assert outbox == []


def test_hiring_invalid_email(client, outbox):
    response = client.post("/api/company-hiring", json={**COMPANY, "email": "sam@acme"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email format"}


@pytest.mark.parametrize("body", ["[1, 2]", "{not json"])
def test_hiring_rejects_non_object_body(client, outbox, body):
    response = client.post(
        "/api/company-hiring",
        content=body,
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_hiring_test_mode(client, mail_client, outbox):
    mail_client.disabled = True
    response = client.post("/api/company-hiring", json=COMPANY)
    assert response.json() == {"message": "Request submitted successfully (test mode)"}
    assert outbox == []


def test_hiring_delivery_failure(client, monkeypatch):
    async def refuse(message, **kwargs):
        raise aiosmtplib.SMTPException("relay down")

    monkeypatch.setattr(aiosmtplib, "send", refuse)
    response = client.post("/api/company-hiring", json=COMPANY)
    assert response.status_code == 500
    assert response.json() == {"error": "Error submitting hiring request. Please try again."}


# ------------------------------
# Rate limiting
# ------------------------------

def test_eleventh_submission_is_rate_limited(client, outbox):
    for _ in range(10):
        assert client.post("/api/company-hiring", json=COMPANY).status_code == 200
    sent_before = len(outbox)

    response = client.post("/api/company-hiring", json=COMPANY)

    assert response.status_code == 429
    assert response.json() == {"error": "Too many requests, please try again later."}
    assert len(outbox) == sent_before


def test_rate_limit_budget_is_shared_between_endpoints(client):
    for _ in range(5):
        assert client.post("/api/company-hiring", json=COMPANY).status_code == 200
        assert client.post("/api/submit-application", data=DRIVER).status_code == 200

    assert client.post("/api/submit-application", data=DRIVER).status_code == 429
    assert client.post("/api/company-hiring", json=COMPANY).status_code == 429


def test_health_checks_are_not_rate_limited(client):
    for _ in range(12):
        assert client.get("/api/health").status_code == 200


# ------------------------------
# Line breaks inside fields
# ------------------------------

def test_driver_name_with_line_break_is_delivered(client, outbox):
    response = client.post("/api/submit-application", data={**DRIVER, "lastName": "Doe\r\nSmith"})

    assert response.status_code == 200
    assert response.json() == {"message": "Application submitted successfully"}
    admin, confirmation = outbox
    assert admin["Subject"] == "New Driver Application: Jane Doe Smith"
    assert confirmation["To"] == "jane@x.com"


def test_company_name_with_line_break_is_delivered(client, outbox):
    response = client.post("/api/company-hiring", json={**COMPANY, "companyName": "Acme\nFreight"})

    assert response.status_code == 200
    assert len(outbox) == 2
    assert outbox[0]["Subject"] == "New Hiring Request: Acme Freight"
