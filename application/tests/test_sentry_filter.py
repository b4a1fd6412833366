from sentinelph.config.sentry import before_send_filter
from sentinelph.middlewares.request_context import clear_request_context, create_request_id, request_context


def test_scrubs_signature_header_and_otp_fields():
    clear_request_context()
    event = {
        "request": {
            "headers": {"X-Webhook-Signature": "abc", "Content-Type": "application/json"},
            "data": {"email": "juan@example.com", "otp": "123456", "phoneNumber": "+639171234567"},
        }
    }

    filtered = before_send_filter(event, None)

    assert filtered["request"]["headers"]["X-Webhook-Signature"] == "[Filtered]"
    assert filtered["request"]["headers"]["Content-Type"] == "application/json"
    assert filtered["request"]["data"] == {"email": "juan@example.com", "otp": "[Filtered]", "phoneNumber": "[Filtered]"}
    assert filtered["tags"] == {}


def test_tags_event_with_observation_context():
    create_request_id()
    request_context.barangay = "San Roque"
    request_context.observation_id = "obs-1"
    try:
        filtered = before_send_filter({}, None)
    finally:
        clear_request_context()

    assert filtered["tags"] == {"barangay": "San Roque", "observation_id": "obs-1"}
