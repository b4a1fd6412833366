"""
SMS relay webhooks: single and bulk sends through Twilio.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from sentinelph.dependencies import get_sms_service
from sentinelph.dto.observations import (
    BulkSMSRequest,
    BulkSMSResponse,
    BulkSMSResult,
    SendSMSRequest,
    SendSMSResponse,
)
from sentinelph.integrations.twilio_sms import TwilioSMSService
from sentinelph.logging.utils import get_app_logger
from sentinelph.utils.signatures import parse_signed_body, require_webhook_signature

logger = get_app_logger('sms_webhook')

sms_webhook_router = APIRouter(tags=["sms-webhook"])


@sms_webhook_router.post("/send-sms", response_model=SendSMSResponse, response_model_by_alias=True)
async def send_sms(
    raw_body: bytes = Depends(require_webhook_signature),
    sms_service: TwilioSMSService = Depends(get_sms_service),
):
    payload = parse_signed_body(SendSMSRequest, raw_body)
    result = sms_service.send_sms(payload.to, payload.message)
    if not result['success']:
        logger.error(f"send_sms_failed | to={payload.to} error={result['message']}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send SMS")

    return SendSMSResponse(success=True, message_sid=result['sid'], status=result['status'], to=payload.to)


@sms_webhook_router.post("/send-bulk-sms", response_model=BulkSMSResponse, response_model_by_alias=True)
async def send_bulk_sms(
    raw_body: bytes = Depends(require_webhook_signature),
    sms_service: TwilioSMSService = Depends(get_sms_service),
):
    """
    Send the same message to every recipient.
    A failed recipient does not stop the batch; each gets its own status.
    """
    payload = parse_signed_body(BulkSMSRequest, raw_body)

    results = []
    for recipient in payload.recipients:
        result = sms_service.send_sms(recipient.phone_number, payload.message)
        results.append(BulkSMSResult(
            phone_number=recipient.phone_number,
            status="sent" if result['success'] else "failed",
            message_sid=result['sid'],
            error=None if result['success'] else result['message'],
        ))

    sent = sum(1 for r in results if r.status == "sent")
    logger.info(f"bulk_sms_complete | total={len(results)} sent={sent} failed={len(results) - sent}")
    return BulkSMSResponse(success=True, total=len(results), sent=sent, failed=len(results) - sent, results=results)
