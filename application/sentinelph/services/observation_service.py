from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel

from sentinelph.core.constants import ObservationStatus
from sentinelph.dto.observations import ObservationWebhookRequest
from sentinelph.logging.utils import get_app_logger
from sentinelph.middlewares.request_context import request_context
from sentinelph.models.alerts import AlertEvaluation
from sentinelph.models.observations import Observation
from sentinelph.repository.observations import ObservationRepository
from sentinelph.services.alert_service import AlertService
from sentinelph.utils.datetime_helpers import get_pht_now, parse_datetime

logger = get_app_logger(__name__)


class ObservationProcessingResult(BaseModel):
    observation: Observation
    is_spam: bool
    evaluation: AlertEvaluation


class ObservationService:
    """Intake of a newly submitted observation: categorize, record, evaluate."""

    def __init__(
        self,
        repository: ObservationRepository,
        alert_service: AlertService,
        categorizer,
        clock: Callable[[], datetime] = get_pht_now,
    ):
        self.repository = repository
        self.alert_service = alert_service
        self.categorizer = categorizer
        self.clock = clock

    def process(self, payload: ObservationWebhookRequest) -> ObservationProcessingResult:
        """
        Raises:
            ObservationNotFoundError: the observation document does not exist
        """
        request_context.observation_id = payload.observation_id
        request_context.barangay = payload.barangay

        description = payload.description or ""
        category = self.categorizer.categorize(description, payload.type)
        is_spam = self.categorizer.detect_spam(description)
        now = self.clock()

        stored = self.repository.mark_processed(payload.observation_id, category, is_spam, now)
        created_at: Optional[datetime] = parse_datetime(stored.get("createdAt")) or now

        observation = Observation(
            id=payload.observation_id,
            sentinel_id=payload.sentinel_id,
            barangay=payload.barangay,
            category=category,
            status=ObservationStatus.SPAM if is_spam else ObservationStatus.PENDING,
            created_at=created_at,
        )

        if is_spam:
            logger.info(f"observation_flagged_spam | observation_id={observation.id}")
            evaluation = AlertEvaluation(alert_raised=False)
        else:
            evaluation = self.alert_service.evaluate(observation)

        return ObservationProcessingResult(observation=observation, is_spam=is_spam, evaluation=evaluation)
