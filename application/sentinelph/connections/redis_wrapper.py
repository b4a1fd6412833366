import json
import redis

# Logger
from sentinelph.logging.utils import get_app_logger
logger = get_app_logger("redis_wrapper")

# Settings
from sentinelph.config.settings import SentinelConfigs
configs = SentinelConfigs()

REDIS_URL = configs.REDIS_URL


class RedisJSONWrapper:
    def __init__(self, redis_uri=REDIS_URL, database=None):
        if database is not None:
            redis_uri = f"{redis_uri}/{database}"
        try:
            self.redis_client = redis.from_url(redis_uri)
            self.redis_client.ping()
            self.connected = True
        except redis.exceptions.RedisError as e:
            logger.error(f"Failed to connect to Redis at {redis_uri}: {e}")
            self.redis_client = None
            self.connected = False

    def set_with_ttl(self, key, data, ttl_seconds: int):
        """Set a key with a TTL (in seconds). Stores data as JSON string.

        Falls back to a plain set when ttl_seconds is not positive.
        """
        value = json.dumps(data)
        if isinstance(ttl_seconds, int) and ttl_seconds > 0:
            # SETEX attaches the expiry atomically with the value
            self.redis_client.setex(key, ttl_seconds, value)
        else:
            self.redis_client.set(key, value)

    def get(self, key):
        data = self.redis_client.get(key)
        if data:
            return json.loads(data)
        return None

    def delete(self, key):
        return self.redis_client.delete(key) > 0
