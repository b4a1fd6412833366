from fastapi import APIRouter, Depends, HTTPException, Request, status

from sentinelph.core.exceptions import SentinelNotFoundError
from sentinelph.dependencies import get_registration_service
from sentinelph.dto.registrations import (
    ApproveRegistrationRequest,
    CompleteTrainingRequest,
    RegistrationActionResponse,
    RejectRegistrationRequest,
)
from sentinelph.logging.utils import get_app_logger
from sentinelph.services.registration_service import RegistrationService

logger = get_app_logger(__name__)

router = APIRouter(tags=["registrations"])


@router.post("/complete-training", response_model=RegistrationActionResponse)
async def complete_training(
    request: CompleteTrainingRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """Activate a trial sentinel after training and send the welcome email."""
    try:
        registration_service.complete_training(request.user_id)
    except SentinelNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return RegistrationActionResponse(success=True, message="Training completed, welcome email sent")


@router.post("/approve-registration", response_model=RegistrationActionResponse)
async def approve_registration(
    request: Request,
    body: ApproveRegistrationRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    logger.info(f"registration_approve | sentinel_id={body.sentinel_id} reviewer={getattr(request.state, 'user_id', None)}")
    try:
        registration_service.approve(body.sentinel_id, body.approved_by)
    except SentinelNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return RegistrationActionResponse(success=True, message="Registration approved")


@router.post("/reject-registration", response_model=RegistrationActionResponse)
async def reject_registration(
    request: Request,
    body: RejectRegistrationRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    logger.info(f"registration_reject | sentinel_id={body.sentinel_id} reviewer={getattr(request.state, 'user_id', None)}")
    try:
        registration_service.reject(body.sentinel_id, body.rejected_by, body.reason)
    except SentinelNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return RegistrationActionResponse(success=True, message="Registration rejected")
