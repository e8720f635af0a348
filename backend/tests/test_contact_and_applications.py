"""Contact form and worker job application intake."""
import pytest


def _contact(**overrides):
    payload = {
        "first_name": "Priya",
        "last_name": "Shah",
        "email": "priya@example.com",
        "phone": "647-555-0101",
        "inquiry_type": "I'm looking for a job",
        "message": "Do you have night shifts in Mississauga?",
    }
    payload.update(overrides)
    return payload


def _application(**overrides):
    payload = {
        "full_name": "Daniel Okafor",
        "date_of_birth": "1995-04-12",
        "social_insurance_number": "123-456-789",
        "street_address": "12 Main St",
        "city": "Mississauga",
        "province": "ON",
        "postal_code": "L5B 1A1",
        "major_intersection": "Hurontario & Dundas",
        "mobile_number": "416-555-0123",
        "email": "daniel@example.com",
        "emergency_contact_name": "Grace Okafor",
        "emergency_contact_number": "416-555-0456",
        "emergency_contact_relationship": "Sister",
        "legal_status": "Citizen",
        "transportation_mode": "Transit",
        "has_safety_shoes": True,
        "safety_shoe_type": "Steel toe",
        "has_forklift_certification": False,
        "background_check_consent": True,
        "lifting_capability": "25-30 kgs",
        "job_type": "Long-term job",
        "commitment_months": 12,
        "morning_availability": "Mon-Fri",
        "found_via_internet": ["Indeed", "Google"],
        "agrees_to_terms": True,
        "applicant_signature": "Daniel Okafor",
    }
    payload.update(overrides)
    return payload


def test_submit_contact(admin_client):
    resp = admin_client.post("/api/contact", json=_contact())
    assert resp.status_code == 200
    submission_id = resp.json()["id"]

    submissions = admin_client.get("/api/contact-submissions").json()
    assert [s["id"] for s in submissions] == [submission_id]
    assert submissions[0]["inquiry_type"] == "I'm looking for a job"


def test_contact_phone_is_optional(client):
    assert client.post("/api/contact", json=_contact(phone=None)).status_code == 200
    assert client.post("/api/contact", json=_contact(phone="")).status_code == 200


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"email": "bad"}, "email"),
        ({"inquiry_type": "Spam"}, "inquiry_type"),
        ({"first_name": "   "}, "first_name"),
        ({"message": ""}, "message"),
        ({"phone": "12"}, "phone"),
    ],
)
def test_contact_validation(client, overrides, field):
    resp = client.post("/api/contact", json=_contact(**overrides))
    assert resp.status_code == 400
    assert field in {e["field"] for e in resp.json()["errors"]}


def test_contact_submissions_admin_only(client):
    assert client.get("/api/contact-submissions").status_code == 401


def test_contact_submissions_newest_first(admin_client):
    first = admin_client.post("/api/contact", json=_contact()).json()["id"]
    second = admin_client.post("/api/contact", json=_contact(first_name="Ravi")).json()["id"]
    ids = [s["id"] for s in admin_client.get("/api/contact-submissions").json()]
    assert ids == [second, first]


def test_submit_job_application(admin_client):
    resp = admin_client.post("/api/job-applications", json=_application())
    assert resp.status_code == 200
    application_id = resp.json()["id"]

    listing = admin_client.get("/api/job-applications").json()
    assert [a["id"] for a in listing] == [application_id]

    detail = admin_client.get(f"/api/job-applications/{application_id}").json()
    assert detail["full_name"] == "Daniel Okafor"
    assert detail["found_via_internet"] == ["Indeed", "Google"]
    assert detail["date_of_birth"] == "1995-04-12"
    assert detail["aptitude_test_score"] is None


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"mobile_number": "4165550123"}, "mobile_number"),
        ({"social_insurance_number": "12345"}, "social_insurance_number"),
        ({"agrees_to_terms": False}, "agrees_to_terms"),
        ({"legal_status": "Tourist"}, "legal_status"),
        ({"transportation_mode": "Bike"}, "transportation_mode"),
        ({"lifting_capability": "100 kgs"}, "lifting_capability"),
        ({"job_type": "Gig"}, "job_type"),
    ],
)
def test_job_application_validation(client, overrides, field):
    resp = client.post("/api/job-applications", json=_application(**overrides))
    assert resp.status_code == 400
    assert field in {e["field"] for e in resp.json()["errors"]}


def test_office_fields_update(admin_client):
    application_id = admin_client.post("/api/job-applications", json=_application()).json()["id"]
    resp = admin_client.patch(
        f"/api/job-applications/{application_id}",
        json={"additional_notes": "Strong candidate", "recruiter_signature": "K. Lee", "aptitude_test_score": 88},
    )
    assert resp.status_code == 200
    application = resp.json()["application"]
    assert application["aptitude_test_score"] == 88
    assert application["recruiter_signature"] == "K. Lee"
    assert application["full_name"] == "Daniel Okafor"


def test_office_score_range(admin_client):
    application_id = admin_client.post("/api/job-applications", json=_application()).json()["id"]
    resp = admin_client.patch(f"/api/job-applications/{application_id}", json={"aptitude_test_score": 101})
    assert resp.status_code == 400
    assert admin_client.patch("/api/job-applications/9999", json={"additional_notes": "x"}).status_code == 404


def test_applications_admin_only(client):
    assert client.get("/api/job-applications").status_code == 401
    assert client.get("/api/job-applications/1").status_code == 401
