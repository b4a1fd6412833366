import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from sentinelph.config.settings import SentinelConfigs
from sentinelph.core.exceptions import OTPNotFoundError, OTPMismatchError, OTPExpiredError
from sentinelph.integrations.email_service import EmailService
from sentinelph.logging.utils import get_app_logger
from sentinelph.models.otp import OTPRecord, hash_otp
from sentinelph.repository.otp import OTPRepository
from sentinelph.utils.datetime_helpers import get_pht_now

logger = get_app_logger(__name__)
configs = SentinelConfigs()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class OTPService:
    """
    OTP lifecycle for email registration:
    - issue: generate, store (overwriting any live code) and email a code
    - verify: single-use check against the one live code
    - resend: re-issue for an email that already requested one

    Expiry is checked lazily at verify time.
    """

    def __init__(
        self,
        repository: OTPRepository,
        email_service: EmailService,
        clock: Callable[[], datetime] = get_pht_now,
        otp_length: int = configs.OTP_LENGTH,
        expiry_seconds: int = configs.OTP_EXPIRY_SECONDS,
        retention_seconds: int = configs.OTP_RETENTION_SECONDS,
    ):
        self.repository = repository
        self.email_service = email_service
        self.clock = clock
        self.otp_length = otp_length
        self.expiry_seconds = expiry_seconds
        self.retention_seconds = retention_seconds

    def generate_otp(self) -> str:
        """
        Generate a uniformly random numeric OTP without a leading zero.

        Returns:
            str: e.g. 100000..999999 for the default length of 6
        """
        low = 10 ** (self.otp_length - 1)
        return str(low + secrets.randbelow(9 * low))

    def issue(self, email: str, display_name: str) -> Tuple[OTPRecord, str]:
        """
        Store a fresh code for the email and send it.

        The record is stored before the email goes out and is kept even if
        delivery fails, so a later resend can reuse the display name.

        Returns:
            tuple: (stored record, plain code)

        Raises:
            NotificationDeliveryError: the OTP email could not be sent
        """
        email = normalize_email(email)
        code = self.generate_otp()
        now = self.clock()
        record = OTPRecord(
            email=email,
            code_hash=hash_otp(code),
            display_name=display_name,
            issued_at=now,
            expires_at=now + timedelta(seconds=self.expiry_seconds),
        )
        self.repository.save(record, self.expiry_seconds + self.retention_seconds)
        logger.info(f"otp_issued | email={email}")

        self.email_service.send_otp_email(email, code, display_name, self.expiry_seconds // 60)
        return record, code

    def verify(self, email: str, code: str) -> OTPRecord:
        """
        Consume the live code for the email.

        Returns:
            OTPRecord: the record that was consumed (and deleted)

        Raises:
            OTPNotFoundError: nothing issued for this email (or already consumed)
            OTPMismatchError: wrong code; the stored record is left untouched
            OTPExpiredError: code matched but expired; the record is deleted
        """
        email = normalize_email(email)
        record: Optional[OTPRecord] = self.repository.get(email)

        if record is None:
            logger.warning(f"otp_verify_failed | email={email} reason=not_found")
            raise OTPNotFoundError()

        if not record.matches(code):
            logger.warning(f"otp_verify_failed | email={email} reason=mismatch")
            raise OTPMismatchError()

        if record.is_expired(self.clock()):
            self.repository.delete(email)
            logger.warning(f"otp_verify_failed | email={email} reason=expired")
            raise OTPExpiredError()

        self.repository.delete(email)
        logger.info(f"otp_verified | email={email}")
        return record

    def resend(self, email: str) -> Tuple[OTPRecord, str]:
        """
        Re-issue a code for an email with a prior request.

        Raises:
            OTPNotFoundError: no prior request for this email
        """
        email = normalize_email(email)
        existing = self.repository.get(email)
        if existing is None:
            logger.warning(f"otp_resend_failed | email={email} reason=no_prior_request")
            raise OTPNotFoundError("No OTP request found for this email")
        return self.issue(email, existing.display_name)
