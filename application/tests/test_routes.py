import json
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from sentinelph.core.constants import ObservationStatus
from sentinelph.dependencies import (
    get_alert_service,
    get_observation_service,
    get_otp_service,
    get_registration_service,
    get_sms_service,
)
from sentinelph.main import app
from sentinelph.utils.signatures import SIGNATURE_HEADER, compute_signature

from conftest import WEBHOOK_SECRET


@pytest.fixture
def client(otp_service, registration_service, observation_service, alert_service, sms_service):
    app.dependency_overrides[get_otp_service] = lambda: otp_service
    app.dependency_overrides[get_registration_service] = lambda: registration_service
    app.dependency_overrides[get_observation_service] = lambda: observation_service
    app.dependency_overrides[get_alert_service] = lambda: alert_service
    app.dependency_overrides[get_sms_service] = lambda: sms_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signed_post(client, path, payload, secret=WEBHOOK_SECRET, signature=None):
    body = json.dumps(payload).encode()
    headers = {"content-type": "application/json"}
    if signature is None:
        signature = compute_signature(body, secret)
    if signature:
        headers[SIGNATURE_HEADER] = signature
    return client.post(path, content=body, headers=headers)


def observation_payload(**overrides):
    payload = {
        "observationId": "obs-new",
        "sentinelId": "s-new",
        "description": "Many residents coughing",
        "type": "illness_mention",
        "location": {"lat": 14.6, "lng": 121.0},
        "barangay": "San Roque",
    }
    payload.update(overrides)
    return payload


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_send_otp(client, email_service):
    response = client.post("/webhook/send-otp", json={"email": "Juan@Example.com", "name": "Juan"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "OTP sent to email", "expiresIn": 600}
    assert email_service.last_otp("juan@example.com") is not None


def test_send_otp_validation_error_is_400(client):
    response = client.post("/webhook/send-otp", json={"email": "not-an-email", "name": "Juan"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid request data"}


def test_send_otp_email_failure_is_500(client, email_service):
    email_service.fail = True

    response = client.post("/webhook/send-otp", json={"email": "juan@example.com", "name": "Juan"})

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_verify_otp_registers_sentinel(client, email_service, sentinel_repository):
    client.post("/webhook/send-otp", json={"email": "juan@example.com", "name": "Juan"})
    code = email_service.last_otp("juan@example.com")

    response = client.post("/webhook/verify-otp", json={
        "email": "juan@example.com",
        "otp": code,
        "phoneNumber": "+639171234567",
        "role": "sari-sari store owner",
        "barangay": "San Roque",
        "purok": "Purok 1",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["userId"] == "uid-1"
    assert sentinel_repository.sentinels["uid-1"]["status"] == "trial"


def test_verify_otp_wrong_code_is_400(client, email_service):
    client.post("/webhook/send-otp", json={"email": "juan@example.com", "name": "Juan"})
    code = email_service.last_otp("juan@example.com")
    wrong = "000000" if code != "000000" else "111111"

    response = client.post("/webhook/verify-otp", json={"email": "juan@example.com", "otp": wrong, "barangay": "San Roque"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid OTP"}


def test_resend_otp_without_request_is_400(client):
    response = client.post("/webhook/resend-otp", json={"email": "nobody@example.com"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_observation_webhook_requires_signature(client, observation_repository):
    observation_repository.add_document("obs-new")

    missing = signed_post(client, "/webhook/observation", observation_payload(), signature="")
    wrong = signed_post(client, "/webhook/observation", observation_payload(), secret="not-the-secret")

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert wrong.json()["success"] is False
    assert observation_repository.processed == {}


def test_observation_webhook_invalid_payload_is_400(client):
    response = signed_post(client, "/webhook/observation", {"observationId": "obs-new"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_observation_webhook_raises_alert(client, observation_repository, alert_repository, sms_service, clock):
    observation_repository.add_document("obs-new", sentinelId="s-new")
    for i in range(2):
        observation_repository.add_observation(
            id=f"obs-{i}",
            sentinel_id=f"s-{i}",
            barangay="San Roque",
            category="illness_mention",
            status=ObservationStatus.VERIFIED,
            created_at=clock() - timedelta(hours=5),
        )
    alert_repository.add_bhw("bhw-1", "San Roque", "+639171111111")

    response = signed_post(client, "/webhook/observation", observation_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["alertGenerated"] is True
    assert body["alertId"] == "alert-1"
    assert body["severity"] == "low"
    assert body["notificationsSent"] == 1
    assert sms_service.sent[0][0] == "+639171111111"


def test_observation_webhook_accepts_text_location(client, observation_repository):
    observation_repository.add_document("obs-new", sentinelId="s-new")

    response = signed_post(client, "/webhook/observation", observation_payload(location="Purok 3, San Roque"))

    assert response.status_code == 200
    assert response.json()["category"] == "illness_mention"
    assert response.json()["alertGenerated"] is False
    assert "obs-new" in observation_repository.processed


def test_observation_webhook_unknown_observation_is_404(client):
    response = signed_post(client, "/webhook/observation", observation_payload(observationId="missing"))

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_webhook_without_configured_secret_is_500(client, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "")

    response = signed_post(client, "/webhook/observation", observation_payload())

    assert response.status_code == 500


def test_alert_webhook_notifies_barangay(client, alert_repository):
    alert_repository.add_bhw("bhw-1", "San Roque", "+639171111111")
    alert_repository.add_bhw("bhw-2", "San Roque", None)

    response = signed_post(client, "/webhook/alert", {
        "alertId": "alert-7", "barangay": "San Roque", "severity": "high", "description": "Fever cluster",
    })

    assert response.status_code == 200
    assert response.json() == {"success": True, "notificationsSent": 1, "notificationsFailed": 1}


def test_send_sms(client, sms_service):
    response = signed_post(client, "/webhook/send-sms", {"to": "+639171111111", "message": "Hello"})

    assert response.status_code == 200
    assert response.json()["messageSid"] == "SM1"
    assert sms_service.sent == [("+639171111111", "Hello")]


def test_send_sms_failure_is_500(client, sms_service):
    sms_service.failing_numbers.add("+639171111111")

    response = signed_post(client, "/webhook/send-sms", {"to": "+639171111111", "message": "Hello"})

    assert response.status_code == 500


def test_send_bulk_sms_reports_each_recipient(client, sms_service):
    sms_service.failing_numbers.add("+639172222222")

    response = signed_post(client, "/webhook/send-bulk-sms", {
        "recipients": [{"phoneNumber": "+639171111111"}, {"phoneNumber": "+639172222222"}],
        "message": "Community meeting at 3PM",
    })

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["sent"], body["failed"]) == (2, 1, 1)
    assert [r["status"] for r in body["results"]] == ["sent", "failed"]


def test_complete_training(client, sentinel_repository):
    sentinel_repository.create("uid-9", {"email": "maria@example.com", "name": "Maria", "role": "pharmacist", "barangay": "San Roque"})

    response = client.post("/webhook/complete-training", json={"userId": "uid-9"})

    assert response.status_code == 200
    assert sentinel_repository.sentinels["uid-9"]["status"] == "active"


def test_complete_training_unknown_is_404(client):
    response = client.post("/webhook/complete-training", json={"userId": "missing"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Sentinel not found"}


def test_approve_registration_requires_token(client):
    response = client.post("/webhook/approve-registration", json={"sentinelId": "uid-9", "approvedBy": "bhw-1"})

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_approve_registration_requires_reviewer_role(client, monkeypatch):
    monkeypatch.setattr(
        "sentinelph.middlewares.firebase_auth.verify_id_token_with_cache",
        lambda token: {"uid": "user-1", "role": "sentinel"},
    )

    response = client.post(
        "/webhook/approve-registration",
        json={"sentinelId": "uid-9", "approvedBy": "bhw-1"},
        headers={"Authorization": "Bearer token"},
    )

    assert response.status_code == 403


def test_approve_registration_invalid_token(client, monkeypatch):
    def reject(token):
        raise ValueError("bad token")

    monkeypatch.setattr("sentinelph.middlewares.firebase_auth.verify_id_token_with_cache", reject)

    response = client.post(
        "/webhook/approve-registration",
        json={"sentinelId": "uid-9", "approvedBy": "bhw-1"},
        headers={"Authorization": "Bearer token"},
    )

    assert response.status_code == 401


def test_reviewer_can_approve_and_reject(client, monkeypatch, sentinel_repository):
    monkeypatch.setattr(
        "sentinelph.middlewares.firebase_auth.verify_id_token_with_cache",
        lambda token: {"uid": "bhw-1", "role": "bhw"},
    )
    sentinel_repository.create("uid-9", {"email": "maria@example.com", "name": "Maria", "barangay": "San Roque"})
    sentinel_repository.create("uid-10", {"email": "pedro@example.com", "name": "Pedro", "barangay": "San Roque"})
    headers = {"Authorization": "Bearer token"}

    approved = client.post("/webhook/approve-registration", json={"sentinelId": "uid-9", "approvedBy": "bhw-1"}, headers=headers)
    rejected = client.post(
        "/webhook/reject-registration",
        json={"sentinelId": "uid-10", "rejectedBy": "bhw-1", "reason": "Duplicate account"},
        headers=headers,
    )

    assert approved.status_code == 200
    assert rejected.status_code == 200
    assert sentinel_repository.sentinels["uid-9"]["status"] == "active"
    assert sentinel_repository.sentinels["uid-10"]["rejectionReason"] == "Duplicate account"


def test_admin_login(client, sentinel_repository):
    sentinel_repository.admins["admin1"] = {"email": "admin@example.com", "uid": "admin-uid", "role": "admin"}

    found = client.post("/auth/admin-login", json={"username": "admin1"})
    missing = client.post("/auth/admin-login", json={"username": "ghost"})

    assert found.json() == {"email": "admin@example.com", "uid": "admin-uid", "role": "admin"}
    assert missing.status_code == 404
