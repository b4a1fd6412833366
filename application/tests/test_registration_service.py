import pytest

from sentinelph.core.exceptions import AdminNotFoundError, OTPMismatchError, OTPNotFoundError, SentinelNotFoundError
from sentinelph.dto.auth_otp import VerifyOTPRequest

EMAIL = "maria@example.com"


def verify_request(otp, **overrides):
    body = {
        "email": EMAIL,
        "otp": otp,
        "phoneNumber": "09171234567",
        "role": "pharmacist",
        "barangay": "San Roque",
        "purok": "Purok 3",
    }
    body.update(overrides)
    return VerifyOTPRequest.model_validate(body)


def seed_sentinel(repository, sentinel_id="uid-9", **fields):
    data = {"email": EMAIL, "name": "Maria", "role": "pharmacist", "barangay": "San Roque", "status": "trial"}
    data.update(fields)
    repository.create(sentinel_id, data)


def test_register_creates_trial_sentinel(registration_service, otp_service, sentinel_repository, email_service, created_users, clock):
    _, code = otp_service.issue(EMAIL, "Maria")

    uid = registration_service.register(verify_request(code))

    assert uid == "uid-1"
    assert created_users == [(EMAIL, "+639171234567", "Maria")]
    profile = sentinel_repository.sentinels[uid]
    assert profile["status"] == "trial"
    assert profile["trustScore"] == 50
    assert profile["totalObservations"] == 0
    assert profile["phoneNumber"] == "+639171234567"
    assert profile["barangay"] == "San Roque"
    assert profile["createdAt"] == clock()
    assert email_service.sent[-1]["kind"] == "registration"


def test_register_consumes_otp(registration_service, otp_service):
    _, code = otp_service.issue(EMAIL, "Maria")
    registration_service.register(verify_request(code))

    with pytest.raises(OTPNotFoundError):
        registration_service.register(verify_request(code))


def test_register_with_wrong_otp_creates_nothing(registration_service, otp_service, sentinel_repository, created_users):
    _, code = otp_service.issue(EMAIL, "Maria")
    wrong = "000000" if code != "000000" else "111111"

    with pytest.raises(OTPMismatchError):
        registration_service.register(verify_request(wrong))

    assert created_users == []
    assert sentinel_repository.sentinels == {}


def test_confirmation_email_failure_keeps_registration(registration_service, otp_service, sentinel_repository, email_service):
    _, code = otp_service.issue(EMAIL, "Maria")
    email_service.fail = True

    uid = registration_service.register(verify_request(code))

    assert uid in sentinel_repository.sentinels


def test_complete_training_activates_and_welcomes(registration_service, sentinel_repository, email_service):
    seed_sentinel(sentinel_repository)

    registration_service.complete_training("uid-9")

    assert sentinel_repository.sentinels["uid-9"]["status"] == "active"
    assert "trainingCompletedAt" in sentinel_repository.sentinels["uid-9"]
    assert email_service.sent[-1] == {
        "kind": "welcome", "to": EMAIL, "name": "Maria", "role": "pharmacist", "barangay": "San Roque",
    }


def test_complete_training_unknown_sentinel(registration_service):
    with pytest.raises(SentinelNotFoundError):
        registration_service.complete_training("missing")


def test_approve_records_reviewer(registration_service, sentinel_repository, email_service):
    seed_sentinel(sentinel_repository)

    registration_service.approve("uid-9", "bhw-1")

    profile = sentinel_repository.sentinels["uid-9"]
    assert profile["status"] == "active"
    assert profile["approvedBy"] == "bhw-1"
    assert email_service.sent[-1]["kind"] == "approval"


def test_reject_uses_default_reason(registration_service, sentinel_repository, email_service):
    seed_sentinel(sentinel_repository)

    registration_service.reject("uid-9", "bhw-1")

    profile = sentinel_repository.sentinels["uid-9"]
    assert profile["status"] == "rejected"
    assert profile["rejectionReason"] == "Not specified"
    assert email_service.sent[-1]["reason"] == "Your registration did not meet the requirements"


def test_admin_login(registration_service, sentinel_repository):
    sentinel_repository.admins["admin1"] = {"email": "admin@example.com", "uid": "admin-uid", "role": "admin", "username": "admin1"}

    assert registration_service.admin_login("admin1") == {"email": "admin@example.com", "uid": "admin-uid", "role": "admin"}

    with pytest.raises(AdminNotFoundError):
        registration_service.admin_login("ghost")
