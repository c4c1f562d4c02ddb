"""HTTP API tests through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.data.demo_seed import DEMO_DOCTOR_TOKEN
from app.main import create_app
from app.store.memory import InMemoryRecordStore
from tests.fakes import FakeAIClient, FixedClock, SequentialIdGenerator


API = "/api/v1"
PASSWORD = "Secret123"

LAB_EXTRACTION = {
    "document_type": "Lab Report",
    "report_type": "Lipid Panel",
    "hospital": "City Health Clinic",
    "timestamp": "2024-05-20",
    "extracted_values": {
        "LDL": {"value": 140, "unit": "mg/dL", "ref": "<100", "is_abnormal": True},
    },
}


def _signup(client, email="asha@example.com"):
    response = client.post(f"{API}/auth/signup", json={
        "display_name": "Asha",
        "email": email,
        "password": PASSWORD,
        "confirm_password": PASSWORD,
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def ai_client():
    return FakeAIClient(extraction=LAB_EXTRACTION)


@pytest.fixture
def client(ai_client):
    id_generator = SequentialIdGenerator()
    app = create_app(
        store=InMemoryRecordStore(id_generator=id_generator),
        ai_client=ai_client,
        id_generator=id_generator,
        clock=FixedClock(),
        seed_demo=False,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def demo_client(ai_client):
    id_generator = SequentialIdGenerator()
    app = create_app(
        store=InMemoryRecordStore(id_generator=id_generator, shared_owner_id="demo-user"),
        ai_client=ai_client,
        id_generator=id_generator,
        clock=FixedClock(),
        seed_demo=True,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers(client):
    return _signup(client)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_signup_password_mismatch(client):
    response = client.post(f"{API}/auth/signup", json={
        "display_name": "Asha",
        "email": "asha@example.com",
        "password": PASSWORD,
        "confirm_password": "Secret124",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"


def test_signup_duplicate_email(client, headers):
    response = client.post(f"{API}/auth/signup", json={
        "display_name": "Asha Again",
        "email": "asha@example.com",
        "password": PASSWORD,
        "confirm_password": PASSWORD,
    })
    assert response.status_code == 409


def test_login_and_me(client, headers):
    response = client.post(f"{API}/auth/login", json={"email": "asha@example.com", "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "asha@example.com"
    assert me.json()["display_name"] == "Asha"


def test_login_wrong_password(client, headers):
    response = client.post(f"{API}/auth/login", json={"email": "asha@example.com", "password": "Wrong1234"})
    assert response.status_code == 401


def test_endpoints_require_authentication(client):
    assert client.get(f"{API}/documents").status_code == 401
    assert client.get(f"{API}/family-members").status_code == 401


def test_upload_and_list_documents(client, headers):
    member = client.post(f"{API}/family-members", json={"name": "Lee Park", "relationship": "Child"}, headers=headers)
    assert member.status_code == 201
    assert member.json()["photo_url"].endswith("?u=LeePark")
    member_id = member.json()["id"]

    upload = client.post(
        f"{API}/documents",
        files={"file": ("lipids.txt", b"LDL 140 mg/dL", "text/plain")},
        data={"family_member_id": member_id},
        headers=headers,
    )
    assert upload.status_code == 201, upload.text
    document = upload.json()
    assert document["document_type"] == "Lab Report"
    assert document["extracted_values"]["LDL"]["ref"] == "<100"

    listing = client.get(f"{API}/documents", params={"family_member_id": member_id}, headers=headers)
    assert listing.json()["total"] == 1
    assert listing.json()["documents"][0]["id"] == document["id"]


def test_failed_extraction_returns_422(client, headers, ai_client):
    member_id = client.post(
        f"{API}/family-members", json={"name": "Lee", "relationship": "Child"}, headers=headers
    ).json()["id"]
    ai_client.failing.add("extract")

    response = client.post(
        f"{API}/documents",
        files={"file": ("lipids.txt", b"LDL 140 mg/dL", "text/plain")},
        data={"family_member_id": member_id},
        headers=headers,
    )
    assert response.status_code == 422
    assert client.get(f"{API}/documents", headers=headers).json()["total"] == 0


def test_oversized_upload_is_rejected_before_extraction(client, headers, ai_client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 8)
    member_id = client.post(
        f"{API}/family-members", json={"name": "Lee", "relationship": "Child"}, headers=headers
    ).json()["id"]

    response = client.post(
        f"{API}/documents",
        files={"file": ("lipids.txt", b"LDL 140 mg/dL", "text/plain")},
        data={"family_member_id": member_id},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "The uploaded file is too large"
    assert "extract" not in ai_client.calls
    assert client.get(f"{API}/documents", headers=headers).json()["total"] == 0


def test_claim_status_rejected_for_non_receipt(client, headers):
    member_id = client.post(
        f"{API}/family-members", json={"name": "Lee", "relationship": "Child"}, headers=headers
    ).json()["id"]
    document_id = client.post(
        f"{API}/documents",
        files={"file": ("lipids.txt", b"LDL 140 mg/dL", "text/plain")},
        data={"family_member_id": member_id},
        headers=headers,
    ).json()["id"]

    response = client.patch(
        f"{API}/documents/{document_id}/claim-status",
        json={"claim_status": "Submitted"},
        headers=headers,
    )
    assert response.status_code == 400


def test_directory_search_matches_hospital(client, headers):
    response = client.get(f"{API}/doctors/directory", params={"q": "apollo"}, headers=headers)
    assert response.status_code == 200
    assert [d["id"] for d in response.json()["results"]] == ["dir-dr-101", "dir-dr-104"]


def test_doctor_view_unknown_token_is_forbidden(client):
    response = client.get(f"{API}/doctor-view/not-a-real-token")
    assert response.status_code == 403
    assert response.json()["detail"] == "This link is invalid or access has been revoked"


def test_grant_view_and_revoke(client, headers):
    member_id = client.post(
        f"{API}/family-members", json={"name": "Lee", "relationship": "Child"}, headers=headers
    ).json()["id"]
    directory = client.get(f"{API}/doctors/directory", params={"q": "carter"}, headers=headers).json()

    granted = client.post(
        f"{API}/doctors",
        json={"doctor": directory["results"][0], "family_member_ids": [member_id]},
        headers=headers,
    )
    assert granted.status_code == 201
    token = granted.json()["access_token"]
    doctor_id = granted.json()["id"]
    assert granted.json()["directory_id"] == "dir-dr-106"
    assert granted.json()["access_link"].endswith(f"/doctor-view/{token}")

    view = client.get(f"{API}/doctor-view/{token}")
    assert view.status_code == 200
    assert view.json()["patient_label"] == "Records for Lee"

    assert client.delete(f"{API}/doctors/{doctor_id}", headers=headers).status_code == 200
    assert client.get(f"{API}/doctor-view/{token}").status_code == 403


def test_demo_household_is_shared(demo_client):
    headers = _signup(demo_client)

    members = demo_client.get(f"{API}/family-members", headers=headers).json()
    assert [m["name"] for m in members["family_members"]] == ["Dhanya", "Krishna", "lee"]

    policy = demo_client.get(f"{API}/insurance/policy", headers=headers).json()
    assert policy["policy_number"] == "UHS-987654321"
    assert policy["deductible"]["individual_remaining"] == 3800

    bills = demo_client.get(f"{API}/insurance/bills", headers=headers).json()
    assert [b["id"] for b in bills["bills"]] == ["doc-krishna-2"]
    assert bills["bills"][0]["claim_status"] == "Denied"


def test_demo_doctor_link(demo_client):
    view = demo_client.get(f"{API}/doctor-view/{DEMO_DOCTOR_TOKEN}")
    assert view.status_code == 200
    body = view.json()
    assert body["doctor_name"] == "Dr. Emily Carter"
    assert body["patient_label"] == "Records for Dhanya, Krishna"
    assert [d["id"] for d in body["documents"]] == ["doc-krishna-2", "doc-krishna-1", "doc-1"]


def test_insurance_appeal_for_denied_bill(demo_client):
    headers = _signup(demo_client)
    response = demo_client.post(f"{API}/insurance/bills/doc-krishna-2/appeal", headers=headers)
    assert response.status_code == 200
    assert response.json()["content"] == "Appeal for Krishna to United Health Shield"


def test_assistant_chat_without_documents(client, headers):
    response = client.post(f"{API}/assistant/chat", json={"message": "How am I doing?"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["content"].startswith("I don't have any documents")
