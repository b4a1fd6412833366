"""
Firebase Auth helpers: account creation and cached ID-token verification.
"""
import hashlib
import time
from typing import Any, Dict, Optional

from firebase_admin import auth

from sentinelph.connections.firebase import get_firebase_app
from sentinelph.connections.redis_wrapper import RedisJSONWrapper
from sentinelph.config.settings import SentinelConfigs
from sentinelph.core.exceptions import UserCreationError
from sentinelph.logging.utils import get_app_logger

configs = SentinelConfigs()
logger = get_app_logger(__name__)

CACHE_ENABLED = configs.FIREBASE_AUTH_CACHE_ENABLED
CACHE_TTL_DEFAULT = configs.FIREBASE_AUTH_CACHE_TTL_SECONDS
CACHE_PREFIX = configs.FIREBASE_AUTH_CACHE_PREFIX


def create_auth_user(email: str, phone_number: Optional[str], display_name: str) -> str:
    """
    Create a Firebase Auth account for a verified email.

    Returns:
        str: Firebase UID

    Raises:
        UserCreationError: Firebase rejected the account (duplicate email/phone, bad format)
    """
    try:
        user_record = auth.create_user(
            email=email,
            phone_number=phone_number,
            display_name=display_name,
            email_verified=True,
            app=get_firebase_app(),
        )
    except auth.EmailAlreadyExistsError as e:
        logger.warning(f"create_user_failed | email={email} reason=email_exists")
        raise UserCreationError("Email already registered") from e
    except auth.PhoneNumberAlreadyExistsError as e:
        logger.warning(f"create_user_failed | email={email} reason=phone_exists")
        raise UserCreationError("Phone number already registered") from e
    except ValueError as e:
        logger.warning(f"create_user_failed | email={email} reason=invalid_argument error={e}")
        raise UserCreationError("Invalid account details") from e

    logger.info(f"user_created | uid={user_record.uid} email={email}")
    return user_record.uid


def build_cache_key(token: str, prefix: str = CACHE_PREFIX) -> str:
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"{prefix}:{digest}"


def determine_ttl(decoded_token: Dict[str, Any]) -> int:
    exp = decoded_token.get("exp")
    if not isinstance(exp, (int, float)):
        return CACHE_TTL_DEFAULT

    remaining = int(exp) - int(time.time())
    if remaining <= 0:
        return 0

    if CACHE_TTL_DEFAULT > 0:
        return min(remaining, CACHE_TTL_DEFAULT)
    return remaining


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None

    header = header_value.strip()
    if len(header) >= 7 and header[:7].lower() == "bearer ":
        return header[7:].strip() or None
    return None


def verify_id_token_with_cache(token: str) -> Dict[str, Any]:
    """Verify a Firebase ID token, using Redis to skip repeat verifications."""
    if not token:
        raise ValueError("Token cannot be empty for verification")

    cache_key = None
    redis_cache_client: Optional[RedisJSONWrapper] = None

    if CACHE_ENABLED:
        redis_instance = RedisJSONWrapper(database=configs.REDIS_CACHE_DB)
        if getattr(redis_instance, "connected", False):
            redis_cache_client = redis_instance
            cache_key = build_cache_key(token)
            cached = redis_cache_client.get(cache_key)
            if cached:
                return cached
        else:
            logger.warning("Redis cache for Firebase auth is disabled due to connection failure")

    decoded_token = auth.verify_id_token(token, app=get_firebase_app())

    if cache_key and decoded_token and redis_cache_client:
        ttl = determine_ttl(decoded_token)
        if ttl > 0:
            try:
                redis_cache_client.set_with_ttl(cache_key, decoded_token, ttl)
            except Exception as exc:
                logger.warning(f"firebase_token_cache_failed | error={exc}")

    return decoded_token
