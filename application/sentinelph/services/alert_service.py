from datetime import datetime, timedelta
from typing import Callable, List

from sentinelph.config.settings import SentinelConfigs
from sentinelph.core.constants import AlertSeverity, AlertStatus, NotificationStatus, ObservationStatus, SEVERITY_THRESHOLDS
from sentinelph.integrations.twilio_sms import TwilioSMSService
from sentinelph.logging.utils import get_app_logger
from sentinelph.models.alerts import Alert, AlertEvaluation, NotificationResult, NotificationSummary
from sentinelph.models.observations import Observation
from sentinelph.repository.alerts import AlertRepository
from sentinelph.repository.observations import ObservationRepository
from sentinelph.utils.datetime_helpers import ensure_aware, get_pht_now

logger = get_app_logger(__name__)
configs = SentinelConfigs()


def classify(count: int) -> AlertSeverity:
    """Severity for a number of matching observations, highest threshold first."""
    for minimum, severity in SEVERITY_THRESHOLDS:
        if count >= minimum:
            return severity
    return AlertSeverity.LOW


class AlertService:
    """
    Raises a community alert when enough distinct sentinels report the same
    category in the same barangay within the trailing window, then texts
    every BHW of that barangay.

    The query-then-insert is not transactional; two observations landing at
    the threshold at the same moment can both raise an alert.
    """

    def __init__(
        self,
        observation_repository: ObservationRepository,
        alert_repository: AlertRepository,
        sms_service: TwilioSMSService,
        clock: Callable[[], datetime] = get_pht_now,
        sentinel_threshold: int = configs.ALERT_SENTINEL_THRESHOLD,
        window_hours: int = configs.ALERT_WINDOW_HOURS,
    ):
        self.observation_repository = observation_repository
        self.alert_repository = alert_repository
        self.sms_service = sms_service
        self.clock = clock
        self.sentinel_threshold = sentinel_threshold
        self.window = timedelta(hours=window_hours)

    def _in_window(self, candidate: Observation, observation: Observation, since: datetime) -> bool:
        return (
            candidate.barangay == observation.barangay
            and candidate.category == observation.category
            and ensure_aware(candidate.created_at) > since
        )

    def _counts_toward(self, candidate: Observation, observation: Observation, since: datetime) -> bool:
        return candidate.status == ObservationStatus.VERIFIED and self._in_window(candidate, observation, since)

    def matching_observations(self, observation: Observation) -> List[Observation]:
        """
        Verified observations in the window for the observation's barangay and
        category. The observation itself counts unless it was flagged as spam
        or falls outside the window.
        """
        since = ensure_aware(self.clock()) - self.window
        candidates = self.observation_repository.find_recent_verified(observation.barangay, observation.category, since)
        matches = [c for c in candidates if self._counts_toward(c, observation, since)]

        if (
            observation.status != ObservationStatus.SPAM
            and self._in_window(observation, observation, since)
            and all(m.id != observation.id for m in matches)
        ):
            matches.append(observation)
        return matches

    def evaluate(self, observation: Observation) -> AlertEvaluation:
        matches = self.matching_observations(observation)
        sentinel_ids = sorted({m.sentinel_id for m in matches})

        logger.info(
            f"alert_evaluation | observation_id={observation.id} barangay={observation.barangay} "
            f"category={observation.category} matches={len(matches)} distinct_sentinels={len(sentinel_ids)}"
        )

        if len(sentinel_ids) < self.sentinel_threshold:
            return AlertEvaluation(alert_raised=False)

        alert = Alert(
            barangay=observation.barangay,
            category=observation.category,
            observation_ids=[m.id for m in matches],
            sentinel_ids=sentinel_ids,
            severity=classify(len(matches)),
            status=AlertStatus.ACTIVE,
            created_at=self.clock(),
        )
        alert.id = self.alert_repository.create(alert)

        notifications = self.notify_barangay(alert.id, alert.barangay, alert.sms_message())
        return AlertEvaluation(alert_raised=True, alert=alert, notifications=notifications)

    def notify_barangay(self, alert_id: str, barangay: str, message: str) -> NotificationSummary:
        """
        Text every BHW of the barangay. Each recipient is independent: a failed
        send is recorded and the loop moves on.
        """
        summary = NotificationSummary()
        try:
            recipients = self.alert_repository.list_bhws(barangay)
        except Exception as e:
            logger.error(f"alert_recipients_lookup_failed | alert_id={alert_id} barangay={barangay} error={e}", exc_info=True)
            return summary

        for bhw in recipients:
            if not bhw.phone_number:
                summary.results.append(NotificationResult(bhw_id=bhw.id, status=NotificationStatus.FAILED, error="No phone number"))
                continue

            try:
                result = self.sms_service.send_sms(bhw.phone_number, message)
            except Exception as e:
                logger.error(f"alert_sms_error | alert_id={alert_id} bhw_id={bhw.id} error={e}", exc_info=True)
                result = {'success': False, 'message': str(e)}

            summary.results.append(NotificationResult(
                bhw_id=bhw.id,
                phone_number=bhw.phone_number,
                status=NotificationStatus.SENT if result.get('success') else NotificationStatus.FAILED,
                error=None if result.get('success') else result.get('message'),
            ))

        try:
            self.alert_repository.record_notifications(alert_id, summary.results, self.clock())
        except Exception as e:
            logger.error(f"alert_notification_log_failed | alert_id={alert_id} error={e}", exc_info=True)

        logger.info(f"alert_notifications | alert_id={alert_id} barangay={barangay} sent={summary.sent} failed={summary.failed}")
        return summary
