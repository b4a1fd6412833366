from types import SimpleNamespace

import pytest

from sentinelph.integrations import twilio_sms
from sentinelph.integrations.twilio_sms import TwilioSMSService


class FakeMessages:
    def __init__(self):
        self.created = []

    def create(self, **kwargs):
        self.created.append(kwargs)
        return SimpleNamespace(sid="SM123", status="queued")


@pytest.fixture
def twilio_configs(monkeypatch):
    monkeypatch.setattr(twilio_sms.configs, "TWILIO_INTEGRATION_ENABLED", True)
    monkeypatch.setattr(twilio_sms.configs, "TWILIO_ACCOUNT_SID", "")
    monkeypatch.setattr(twilio_sms.configs, "TWILIO_AUTH_TOKEN", "")
    monkeypatch.setattr(twilio_sms.configs, "TWILIO_PHONE_NUMBER", "+15005550006")
    return twilio_sms.configs


def test_disabled_integration_skips_send(monkeypatch):
    monkeypatch.setattr(twilio_sms.configs, "TWILIO_INTEGRATION_ENABLED", False)

    result = TwilioSMSService().send_sms("+639171234567", "hello")

    assert result["success"] is False
    assert result["message"] == "SMS integration disabled"


def test_missing_credentials_fail_per_send(twilio_configs):
    service = TwilioSMSService()

    result = service.send_sms("+639171234567", "hello")

    assert service.client is None
    assert result == {'success': False, 'message': 'Twilio credentials not configured', 'sid': None, 'status': None}


def test_send_uses_configured_sender(twilio_configs):
    service = TwilioSMSService()
    messages = FakeMessages()
    service.client = SimpleNamespace(messages=messages)

    result = service.send_sms("+639171234567", "hello")

    assert result["success"] is True
    assert result["sid"] == "SM123"
    assert messages.created == [{"body": "hello", "from_": "+15005550006", "to": "+639171234567"}]
