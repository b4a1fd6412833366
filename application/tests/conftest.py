import json
import os
import tempfile
from datetime import datetime, timedelta

import pytest

# Test-friendly environment before any sentinelph module reads its settings
os.environ["FIREBASE_ENABLED"] = "false"
os.environ["FIREBASE_AUTH_CACHE_ENABLED"] = "false"
os.environ["WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["EMAIL_ENABLED"] = "false"
os.environ["TWILIO_INTEGRATION_ENABLED"] = "false"
os.environ["OPENAI_CATEGORIZATION_ENABLED"] = "false"
os.environ["SENTRY_ENABLED"] = "false"
os.environ["FIREHOSE_ENABLED"] = "false"
os.environ["AUDIT_LOGGING_ENABLED"] = "false"
os.environ["SLACK_WEBHOOK_URL"] = ""
os.environ["DEBUG"] = "false"
os.environ["LOG_DIRECTORY"] = tempfile.mkdtemp(prefix="sentinelph-logs-")

from sentinelph.core.exceptions import (  # noqa: E402
    AdminNotFoundError,
    NotificationDeliveryError,
    ObservationNotFoundError,
    SentinelNotFoundError,
)
from sentinelph.models.alerts import BHWContact  # noqa: E402
from sentinelph.models.observations import Observation  # noqa: E402
from sentinelph.utils.datetime_helpers import PHT  # noqa: E402

WEBHOOK_SECRET = os.environ["WEBHOOK_SECRET"]


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeRedisJSONWrapper:
    """Dict-backed stand-in for RedisJSONWrapper; TTLs are recorded, not enforced."""

    def __init__(self, connected: bool = True):
        self.connected = connected
        self.store = {}
        self.ttls = {}

    def set_with_ttl(self, key, data, ttl_seconds: int):
        self.store[key] = json.dumps(data)
        self.ttls[key] = ttl_seconds

    def get(self, key):
        data = self.store.get(key)
        return json.loads(data) if data else None

    def delete(self, key):
        self.ttls.pop(key, None)
        return self.store.pop(key, None) is not None


class FakeEmailService:
    def __init__(self):
        self.sent = []
        self.fail = False

    def _record(self, kind, to, **fields):
        if self.fail:
            raise NotificationDeliveryError(f"Failed to send email to {to}")
        self.sent.append({"kind": kind, "to": to, **fields})

    def send_otp_email(self, email, otp, name, expiry_minutes):
        self._record("otp", email, otp=otp, name=name, expiry_minutes=expiry_minutes)

    def send_registration_confirmation(self, email, name, role):
        self._record("registration", email, name=name, role=role)

    def send_welcome_email(self, email, name, role, barangay):
        self._record("welcome", email, name=name, role=role, barangay=barangay)

    def send_approval_email(self, email, name, barangay):
        self._record("approval", email, name=name, barangay=barangay)

    def send_rejection_email(self, email, name, reason):
        self._record("rejection", email, name=name, reason=reason)

    def last_otp(self, email):
        for entry in reversed(self.sent):
            if entry["kind"] == "otp" and entry["to"] == email:
                return entry["otp"]
        return None


class FakeSMSService:
    def __init__(self):
        self.sent = []
        self.failing_numbers = set()
        self.raising_numbers = set()

    def send_sms(self, to, message):
        if to in self.raising_numbers:
            raise RuntimeError("connection reset")
        if to in self.failing_numbers:
            return {'success': False, 'message': 'Invalid number', 'sid': None, 'status': None}
        self.sent.append((to, message))
        return {'success': True, 'message': 'SMS sent successfully', 'sid': f"SM{len(self.sent)}", 'status': 'queued'}


class FakeObservationRepository:
    """
    Returns every stored observation from find_recent_verified so the
    service-side filtering is exercised.
    """

    def __init__(self):
        self.documents = {}
        self.observations = []
        self.processed = {}

    def add_document(self, observation_id, **data):
        self.documents[observation_id] = data

    def add_observation(self, **fields):
        observation = Observation(**fields)
        self.observations.append(observation)
        return observation

    def mark_processed(self, observation_id, category, is_spam, processed_at):
        if observation_id not in self.documents:
            raise ObservationNotFoundError(observation_id)
        fields = {
            "aiCategory": category,
            "spamScore": 1 if is_spam else 0,
            "status": "spam" if is_spam else "pending",
            "processedAt": processed_at,
        }
        self.processed[observation_id] = fields
        data = dict(self.documents[observation_id])
        data.update(fields)
        return data

    def find_recent_verified(self, barangay, category, since):
        return list(self.observations)


class FakeAlertRepository:
    def __init__(self):
        self.alerts = []
        self.notification_logs = []
        self.bhws = {}
        self.fail_lookup = False
        self.fail_log = False

    def add_bhw(self, bhw_id, barangay, phone_number=None):
        self.bhws.setdefault(barangay, []).append(BHWContact(id=bhw_id, barangay=barangay, phone_number=phone_number))

    def create(self, alert):
        self.alerts.append(alert)
        return f"alert-{len(self.alerts)}"

    def record_notifications(self, alert_id, results, sent_at):
        if self.fail_log:
            raise RuntimeError("firestore unavailable")
        self.notification_logs.append((alert_id, list(results), sent_at))

    def list_bhws(self, barangay):
        if self.fail_lookup:
            raise RuntimeError("firestore unavailable")
        return list(self.bhws.get(barangay, []))


class FakeSentinelRepository:
    def __init__(self):
        self.sentinels = {}
        self.admins = {}

    def create(self, sentinel_id, data):
        self.sentinels[sentinel_id] = dict(data)

    def get(self, sentinel_id):
        if sentinel_id not in self.sentinels:
            raise SentinelNotFoundError(sentinel_id)
        return dict(self.sentinels[sentinel_id])

    def update(self, sentinel_id, fields):
        self.sentinels[sentinel_id].update(fields)

    def find_admin(self, username):
        if username not in self.admins:
            raise AdminNotFoundError(username)
        return dict(self.admins[username])


@pytest.fixture
def clock():
    return MutableClock(datetime(2025, 1, 15, 10, 0, tzinfo=PHT))


@pytest.fixture
def fake_redis():
    return FakeRedisJSONWrapper()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def sms_service():
    return FakeSMSService()


@pytest.fixture
def observation_repository():
    return FakeObservationRepository()


@pytest.fixture
def alert_repository():
    return FakeAlertRepository()


@pytest.fixture
def sentinel_repository():
    return FakeSentinelRepository()


@pytest.fixture
def otp_service(fake_redis, email_service, clock):
    from sentinelph.repository.otp import OTPRepository
    from sentinelph.services.otp_service import OTPService

    return OTPService(OTPRepository(redis_client=fake_redis), email_service, clock=clock)


@pytest.fixture
def alert_service(observation_repository, alert_repository, sms_service, clock):
    from sentinelph.services.alert_service import AlertService

    return AlertService(observation_repository, alert_repository, sms_service, clock=clock)


@pytest.fixture
def observation_service(observation_repository, alert_service, clock):
    from sentinelph.integrations.openai_categorizer import TypeCategorizer
    from sentinelph.services.observation_service import ObservationService

    return ObservationService(observation_repository, alert_service, TypeCategorizer(), clock=clock)


@pytest.fixture
def created_users():
    return []


@pytest.fixture
def registration_service(otp_service, sentinel_repository, email_service, clock, created_users):
    from sentinelph.services.registration_service import RegistrationService

    def user_creator(email, phone_number, display_name):
        created_users.append((email, phone_number, display_name))
        return f"uid-{len(created_users)}"

    return RegistrationService(otp_service, sentinel_repository, email_service, user_creator=user_creator, clock=clock)
