"""
OTP Repository

Redis-backed, time-bounded store of pending OTP records keyed by email.
"""
from typing import Optional

from pydantic import ValidationError

from sentinelph.config.settings import SentinelConfigs
from sentinelph.connections.redis_wrapper import RedisJSONWrapper
from sentinelph.core.exceptions import OTPStoreUnavailableError
from sentinelph.logging.utils import get_app_logger
from sentinelph.models.otp import OTPRecord

logger = get_app_logger("sentinelph.otp_repository")
configs = SentinelConfigs()


class OTPRepository:
    """Repository for OTP records"""

    def __init__(self, redis_client: Optional[RedisJSONWrapper] = None, prefix: str = configs.OTP_CACHE_PREFIX):
        self._redis_client = redis_client
        self.prefix = prefix

    def get_cache_key(self, email: str) -> str:
        return f"{self.prefix}{email}"

    def _client(self) -> RedisJSONWrapper:
        if self._redis_client is None:
            self._redis_client = RedisJSONWrapper(database=configs.REDIS_CACHE_DB)
        if not getattr(self._redis_client, "connected", False):
            # retry the connection on the next call
            self._redis_client = None
            logger.error("otp_store_unavailable | reason=redis_not_connected")
            raise OTPStoreUnavailableError()
        return self._redis_client

    def save(self, record: OTPRecord, ttl_seconds: int) -> None:
        """Store or overwrite the record for record.email; last write wins."""
        self._client().set_with_ttl(self.get_cache_key(record.email), record.to_cache(), ttl_seconds)
        logger.info(f"otp_stored | email={record.email} expires_at={record.expires_at.isoformat()}")

    def get(self, email: str) -> Optional[OTPRecord]:
        data = self._client().get(self.get_cache_key(email))
        if not data:
            return None
        try:
            return OTPRecord.model_validate(data)
        except ValidationError as e:
            logger.warning(f"otp_record_corrupt | email={email} error={e}")
            return None

    def delete(self, email: str) -> bool:
        deleted = self._client().delete(self.get_cache_key(email))
        logger.info(f"otp_deleted | email={email} deleted={deleted}")
        return deleted
