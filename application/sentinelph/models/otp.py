"""
OTP Model
A pending registration verification, keyed by email
"""
import hashlib
import hmac
from datetime import datetime

from pydantic import BaseModel

from sentinelph.utils.datetime_helpers import ensure_aware


def hash_otp(otp: str) -> str:
    return hashlib.sha256(otp.encode()).hexdigest()


class OTPRecord(BaseModel):
    """
    One live OTP per email. Only the SHA256 of the code is kept; the plain
    code exists only in the email sent to the user.
    """
    email: str
    code_hash: str
    display_name: str
    issued_at: datetime
    expires_at: datetime

    def matches(self, code: str) -> bool:
        return hmac.compare_digest(self.code_hash, hash_otp(str(code)))

    def is_expired(self, now: datetime) -> bool:
        return ensure_aware(now) > ensure_aware(self.expires_at)

    def to_cache(self) -> dict:
        return self.model_dump(mode="json")
