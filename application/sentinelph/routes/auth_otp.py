from fastapi import APIRouter, Depends, HTTPException, status

from sentinelph.core.exceptions import (
    NotificationDeliveryError,
    OTPError,
    OTPStoreUnavailableError,
    UserCreationError,
)
from sentinelph.dependencies import get_otp_service, get_registration_service
from sentinelph.dto.auth_otp import (
    OTPSentResponse,
    ResendOTPRequest,
    SendOTPRequest,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from sentinelph.logging.utils import get_app_logger
from sentinelph.services.otp_service import OTPService
from sentinelph.services.registration_service import RegistrationService

logger = get_app_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/send-otp", response_model=OTPSentResponse, response_model_by_alias=True)
async def send_otp(request: SendOTPRequest, otp_service: OTPService = Depends(get_otp_service)):
    """
    Issue an OTP for the email and send it.
    Any code issued earlier for the same email stops working.
    """
    try:
        otp_service.issue(request.email, request.name)
    except OTPStoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except NotificationDeliveryError as e:
        logger.error(f"send_otp_email_failed | email={request.email} error={e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send OTP email")

    return OTPSentResponse(success=True, message="OTP sent to email", expires_in=otp_service.expiry_seconds)


@router.post("/verify-otp", response_model=VerifyOTPResponse, response_model_by_alias=True)
async def verify_otp(
    request: VerifyOTPRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """
    Verify the OTP and register the sentinel.
    Steps:
    1. Consume the OTP (single use)
    2. Create the Firebase Auth user
    3. Create the sentinel profile in trial status
    4. Send the registration confirmation email
    """
    try:
        uid = registration_service.register(request)
    except OTPError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except UserCreationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except OTPStoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    return VerifyOTPResponse(success=True, message="Registration successful", user_id=uid)


@router.post("/resend-otp", response_model=OTPSentResponse, response_model_by_alias=True)
async def resend_otp(request: ResendOTPRequest, otp_service: OTPService = Depends(get_otp_service)):
    try:
        otp_service.resend(request.email)
    except OTPError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except OTPStoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except NotificationDeliveryError as e:
        logger.error(f"resend_otp_email_failed | email={request.email} error={e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send OTP email")

    return OTPSentResponse(success=True, message="New OTP sent to email", expires_in=otp_service.expiry_seconds)
