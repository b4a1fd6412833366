from datetime import datetime
from typing import Callable, Dict, Optional

from sentinelph.core.constants import INITIAL_TRUST_SCORE, SentinelStatus
from sentinelph.core.exceptions import NotificationDeliveryError
from sentinelph.dto.auth_otp import VerifyOTPRequest
from sentinelph.integrations.email_service import EmailService
from sentinelph.logging.utils import get_app_logger
from sentinelph.repository.sentinels import SentinelRepository
from sentinelph.services.otp_service import OTPService
from sentinelph.utils.datetime_helpers import get_pht_now
from sentinelph.utils.firebase_utils import create_auth_user

logger = get_app_logger(__name__)


class RegistrationService:
    """Sentinel account lifecycle: OTP-gated sign-up, training, BHW review."""

    def __init__(
        self,
        otp_service: OTPService,
        sentinel_repository: SentinelRepository,
        email_service: EmailService,
        user_creator: Callable[[str, Optional[str], str], str] = create_auth_user,
        clock: Callable[[], datetime] = get_pht_now,
    ):
        self.otp_service = otp_service
        self.sentinel_repository = sentinel_repository
        self.email_service = email_service
        self.user_creator = user_creator
        self.clock = clock

    def _send_best_effort(self, send: Callable[[], None], event: str, email: str) -> None:
        # The account change is already committed; a lost email is only logged
        try:
            send()
        except NotificationDeliveryError as e:
            logger.error(f"{event}_email_failed | email={email} error={e}")

    def register(self, request: VerifyOTPRequest) -> str:
        """
        Verify the OTP, then create the Firebase user and sentinel profile.

        Returns:
            str: the new user's UID

        Raises:
            OTPError: verification failed (not found, mismatch or expired)
            UserCreationError: Firebase refused the account
        """
        record = self.otp_service.verify(request.email, request.otp)

        uid = self.user_creator(record.email, request.phone_number, record.display_name)
        now = self.clock()
        self.sentinel_repository.create(uid, {
            "email": record.email,
            "phoneNumber": request.phone_number,
            "name": record.display_name,
            "role": request.role,
            "barangay": request.barangay,
            "purok": request.purok,
            "trustScore": INITIAL_TRUST_SCORE,
            "verifiedObservations": 0,
            "falseObservations": 0,
            "totalObservations": 0,
            "status": SentinelStatus.TRIAL.value,
            "createdAt": now,
            "updatedAt": now,
        })

        self._send_best_effort(
            lambda: self.email_service.send_registration_confirmation(record.email, record.display_name, request.role),
            "registration_confirmation",
            record.email,
        )
        logger.info(f"sentinel_registered | uid={uid} barangay={request.barangay}")
        return uid

    def complete_training(self, user_id: str) -> None:
        sentinel = self.sentinel_repository.get(user_id)
        now = self.clock()
        self.sentinel_repository.update(user_id, {
            "status": SentinelStatus.ACTIVE.value,
            "trainingCompletedAt": now,
            "updatedAt": now,
        })
        self._send_best_effort(
            lambda: self.email_service.send_welcome_email(
                sentinel.get("email", ""),
                sentinel.get("name", ""),
                sentinel.get("role", "sentinel"),
                sentinel.get("barangay", ""),
            ),
            "welcome",
            sentinel.get("email", ""),
        )

    def approve(self, sentinel_id: str, approved_by: str) -> None:
        sentinel = self.sentinel_repository.get(sentinel_id)
        now = self.clock()
        self.sentinel_repository.update(sentinel_id, {
            "status": SentinelStatus.ACTIVE.value,
            "approvedBy": approved_by,
            "approvedAt": now,
            "updatedAt": now,
        })
        self._send_best_effort(
            lambda: self.email_service.send_approval_email(sentinel.get("email", ""), sentinel.get("name", ""), sentinel.get("barangay", "")),
            "approval",
            sentinel.get("email", ""),
        )

    def reject(self, sentinel_id: str, rejected_by: str, reason: Optional[str] = None) -> None:
        sentinel = self.sentinel_repository.get(sentinel_id)
        now = self.clock()
        self.sentinel_repository.update(sentinel_id, {
            "status": SentinelStatus.REJECTED.value,
            "rejectedBy": rejected_by,
            "rejectionReason": reason or "Not specified",
            "rejectedAt": now,
            "updatedAt": now,
        })
        self._send_best_effort(
            lambda: self.email_service.send_rejection_email(
                sentinel.get("email", ""),
                sentinel.get("name", ""),
                reason or "Your registration did not meet the requirements",
            ),
            "rejection",
            sentinel.get("email", ""),
        )

    def admin_login(self, username: str) -> Dict[str, Optional[str]]:
        admin = self.sentinel_repository.find_admin(username)
        return {"email": admin.get("email"), "uid": admin.get("uid"), "role": admin.get("role")}
