"""
Observation webhooks called by the automation layer.
Both routes require an x-webhook-signature over the raw body.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from sentinelph.core.exceptions import ObservationNotFoundError
from sentinelph.dependencies import get_alert_service, get_observation_service
from sentinelph.dto.observations import (
    AlertWebhookRequest,
    AlertWebhookResponse,
    ObservationWebhookRequest,
    ObservationWebhookResponse,
)
from sentinelph.logging.utils import get_app_logger
from sentinelph.middlewares.request_context import request_context
from sentinelph.services.alert_service import AlertService
from sentinelph.services.observation_service import ObservationService
from sentinelph.utils.signatures import parse_signed_body, require_webhook_signature

logger = get_app_logger('observation_webhook')

observation_webhook_router = APIRouter(tags=["observation-webhook"])


@observation_webhook_router.post("/observation", response_model=ObservationWebhookResponse, response_model_by_alias=True)
async def observation_webhook(
    raw_body: bytes = Depends(require_webhook_signature),
    observation_service: ObservationService = Depends(get_observation_service),
):
    """
    Process a newly submitted observation.
    Categorizes it, records the result and evaluates the barangay for an alert.
    """
    payload = parse_signed_body(ObservationWebhookRequest, raw_body)
    logger.info(f"observation_webhook_received | observation_id={payload.observation_id} barangay={payload.barangay}")

    try:
        result = observation_service.process(payload)
    except ObservationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    evaluation = result.evaluation
    alert = evaluation.alert
    return ObservationWebhookResponse(
        success=True,
        observation_id=result.observation.id,
        category=result.observation.category,
        is_spam=result.is_spam,
        alert_generated=evaluation.alert_raised,
        alert_id=alert.id if alert else None,
        severity=alert.severity if alert else None,
        notifications_sent=evaluation.notifications.sent,
        notifications_failed=evaluation.notifications.failed,
    )


@observation_webhook_router.post("/alert", response_model=AlertWebhookResponse, response_model_by_alias=True)
async def alert_webhook(
    raw_body: bytes = Depends(require_webhook_signature),
    alert_service: AlertService = Depends(get_alert_service),
):
    """Re-dispatch the SMS for an existing alert to every BHW of its barangay."""
    payload = parse_signed_body(AlertWebhookRequest, raw_body)
    request_context.barangay = payload.barangay
    logger.info(f"alert_webhook_received | alert_id={payload.alert_id} severity={payload.severity.value}")

    summary = alert_service.notify_barangay(payload.alert_id, payload.barangay, payload.sms_message())
    return AlertWebhookResponse(success=True, notifications_sent=summary.sent, notifications_failed=summary.failed)
