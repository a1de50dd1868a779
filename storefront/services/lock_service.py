from contextlib import contextmanager
import uuid

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import ConflictError, ErrorCode
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete in one atomic step, a lock is only removed by its owner
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user checkout lock kept in Redis.

    Two checkouts of the same cart are serialized here before they reach the
    database; the lock expires on its own if the holder dies.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _checkout_key(user_id: int) -> str:
        return f"checkout:user:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._checkout_key(user_id)
        logger.info(f"Acquire lock {key}")
        # SET checkout:user:1:lock <token> NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self._checkout_key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def checkout_lock(self, user_id: int, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        token = uuid.uuid4().hex

        if not self.acquire_checkout_lock(user_id, token, ttl):
            raise ConflictError(
                "Checkout already in progress",
                ErrorCode.CHECKOUT_IN_PROGRESS,
            )

        try:
            yield
        finally:
            try:
                self.release_checkout_lock(user_id, token)
            except RedisError as e:
                # the key still expires after ttl
                logger.warning(f"Failed to release checkout lock for user {user_id}: {e}")
