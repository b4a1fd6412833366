"""
HMAC-SHA256 signing for webhook payloads exchanged with the automation layer.
"""
import hashlib
import hmac
from typing import Type, TypeVar

from fastapi import HTTPException, Request, status
from pydantic import BaseModel, ValidationError

from sentinelph.config.settings import SentinelConfigs
from sentinelph.logging.utils import get_app_logger

logger = get_app_logger(__name__)

SIGNATURE_HEADER = "x-webhook-signature"

ModelT = TypeVar("ModelT", bound=BaseModel)


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(raw_body: bytes, signature: str | None, secret: str) -> bool:
    if not signature:
        return False
    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(expected, signature.strip().lower())


async def require_webhook_signature(request: Request) -> bytes:
    """
    FastAPI dependency rejecting unsigned or wrongly signed webhook calls.

    Returns:
        bytes: the raw request body that was verified
    """
    secret = SentinelConfigs().WEBHOOK_SECRET
    if not secret:
        logger.error("webhook_secret_not_configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook secret not configured")

    raw_body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    if not signature:
        logger.warning(f"webhook_signature_missing | path={request.url.path}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing signature")

    if not verify_signature(raw_body, signature, secret):
        logger.warning(f"webhook_signature_invalid | path={request.url.path}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")

    return raw_body


def parse_signed_body(model: Type[ModelT], raw_body: bytes) -> ModelT:
    """Validate a verified raw body against a request model; bad payloads are 400."""
    try:
        return model.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning(f"webhook_payload_invalid | model={model.__name__} errors={e.error_count()}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request data")
