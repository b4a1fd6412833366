from fastapi import APIRouter, Depends, HTTPException, status

from sentinelph.core.exceptions import AdminNotFoundError
from sentinelph.dependencies import get_registration_service
from sentinelph.dto.registrations import AdminLoginRequest, AdminLoginResponse
from sentinelph.services.registration_service import RegistrationService

router = APIRouter(tags=["auth"])


@router.post("/admin-login", response_model=AdminLoginResponse)
async def admin_login(
    request: AdminLoginRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """Resolve an admin username to the email used for Firebase sign-in."""
    try:
        admin = registration_service.admin_login(request.username)
    except AdminNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return AdminLoginResponse(**admin)
