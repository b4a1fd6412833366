from datetime import timedelta

import pytest

from sentinelph.core.constants import ObservationStatus
from sentinelph.core.exceptions import ObservationNotFoundError
from sentinelph.dto.observations import ObservationWebhookRequest
from sentinelph.services.observation_service import ObservationService


def payload(observation_id="obs-new", sentinel_id="s-new", **overrides):
    body = {
        "observationId": observation_id,
        "sentinelId": sentinel_id,
        "description": "Several neighbours buying paracetamol for fever",
        "type": "illness_mention",
        "barangay": "San Roque",
    }
    body.update(overrides)
    return ObservationWebhookRequest.model_validate(body)


def seed_verified(repository, clock, count):
    for i in range(count):
        repository.add_observation(
            id=f"obs-{i}",
            sentinel_id=f"s-{i}",
            barangay="San Roque",
            category="illness_mention",
            status=ObservationStatus.VERIFIED,
            created_at=clock() - timedelta(hours=2),
        )


class SpamCategorizer:
    def categorize(self, description, observation_type=None):
        return "other"

    def detect_spam(self, description):
        return True


def test_process_records_category_and_evaluates(observation_service, observation_repository, clock):
    observation_repository.add_document("obs-new", createdAt=clock().isoformat(), sentinelId="s-new")
    seed_verified(observation_repository, clock, 2)

    result = observation_service.process(payload())

    assert result.is_spam is False
    assert result.observation.category == "illness_mention"
    assert observation_repository.processed["obs-new"]["aiCategory"] == "illness_mention"
    assert observation_repository.processed["obs-new"]["status"] == "pending"
    assert result.evaluation.alert_raised is True


def test_process_uses_stored_creation_time(observation_service, observation_repository, clock):
    created = clock() - timedelta(hours=3)
    observation_repository.add_document("obs-new", createdAt=created)

    result = observation_service.process(payload())

    assert result.observation.created_at == created


def test_missing_type_falls_back_to_other(observation_service, observation_repository):
    observation_repository.add_document("obs-new")

    result = observation_service.process(payload(type=None))

    assert result.observation.category == "other"


def test_spam_is_not_evaluated(observation_repository, alert_service, alert_repository, clock):
    observation_repository.add_document("obs-new")
    seed_verified(observation_repository, clock, 5)
    service = ObservationService(observation_repository, alert_service, SpamCategorizer(), clock=clock)

    result = service.process(payload())

    assert result.is_spam is True
    assert result.observation.status == ObservationStatus.SPAM
    assert result.evaluation.alert_raised is False
    assert alert_repository.alerts == []
    assert observation_repository.processed["obs-new"]["spamScore"] == 1


def test_unknown_observation_raises(observation_service):
    with pytest.raises(ObservationNotFoundError):
        observation_service.process(payload(observation_id="missing"))
