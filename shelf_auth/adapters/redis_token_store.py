"""
Redis Token Store - Redis-backed refresh token storage.
"""

import json
import logging
from datetime import datetime
from typing import Optional, List
from shelf_auth.ports.token_store_port import TokenStorePort
from shelf_auth.domain.refresh_token import RefreshToken
from shelf_auth.domain.clock import utcnow

logger = logging.getLogger("shelf_auth.redis_store")


class RedisTokenStore(TokenStorePort):
    """
    Redis-backed refresh token storage.

    Records are stored as JSON under their lookup key and expire from Redis
    once expires_at has passed. A per-user set indexes the lookup keys.
    Revocation uses WATCH/MULTI so concurrent revokes resolve to one winner.
    """

    def __init__(self, redis_client=None, prefix: str = "shelf:refresh:", url: Optional[str] = None):
        """
        Initialize Redis token store.

        Args:
            redis_client: Redis client instance (redis.Redis)
            prefix: Key prefix for records
            url: Connection URL used when no client is given
        """
        self._redis = redis_client
        self._prefix = prefix
        self._url = url or "redis://localhost:6379/0"

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            try:
                import redis
                self._redis = redis.Redis.from_url(self._url, decode_responses=True)
            except ImportError:
                raise ImportError("redis package required: pip install redis")
        return self._redis

    def _key(self, lookup_key: str) -> str:
        """Generate Redis key for a record."""
        return f"{self._prefix}token:{lookup_key}"

    def _user_key(self, user_id: str) -> str:
        """Generate Redis set key for a user's records."""
        return f"{self._prefix}user:{user_id}"

    @staticmethod
    def _text(value) -> str:
        return value.decode() if isinstance(value, bytes) else value

    @staticmethod
    def _ttl_seconds(token: RefreshToken) -> int:
        remaining = int((token.expires_at - utcnow()).total_seconds())
        return max(remaining, 1)

    def save(self, token: RefreshToken) -> None:
        """
        Store a new record in Redis.

        Args:
            token: Record to store
        """
        redis = self._get_redis()
        ttl = self._ttl_seconds(token)
        user_key = self._user_key(token.user_id)

        pipe = redis.pipeline(transaction=True)
        pipe.set(self._key(token.lookup_key), json.dumps(token.to_dict()), ex=ttl, nx=True)
        pipe.sadd(user_key, token.lookup_key)
        # The newest record outlives the others, so the index follows it
        pipe.expire(user_key, ttl)
        stored, _, _ = pipe.execute()

        if not stored:
            raise ValueError("lookup_key already stored")

    def find_by_lookup_key(self, lookup_key: str) -> Optional[RefreshToken]:
        """
        Get a record from Redis.

        Args:
            lookup_key: Record key

        Returns:
            Record if found and decodable, None otherwise
        """
        data = self._get_redis().get(self._key(lookup_key))
        if not data:
            return None

        try:
            return RefreshToken.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError):
            logger.warning("Discarding undecodable refresh token record")
            return None

    def revoke(self, lookup_key: str, revoked_at: datetime) -> bool:
        """
        Revoke one record with an optimistic WATCH/MULTI transaction.

        Args:
            lookup_key: Record key
            revoked_at: Revocation timestamp

        Returns:
            True if this call revoked it, False if not found or already revoked
        """
        from redis.exceptions import WatchError

        key = self._key(lookup_key)
        with self._get_redis().pipeline() as pipe:
            while True:
                try:
                    pipe.watch(key)
                    data = pipe.get(key)
                    if not data:
                        pipe.unwatch()
                        return False

                    token = RefreshToken.from_dict(json.loads(data))
                    if not token.revoke(revoked_at):
                        pipe.unwatch()
                        return False

                    pipe.multi()
                    pipe.set(key, json.dumps(token.to_dict()), keepttl=True)
                    pipe.execute()
                    return True
                except WatchError:
                    continue

    def revoke_all_for_user(self, user_id: str, revoked_at: datetime) -> int:
        """
        Revoke the user's current records in one MULTI/EXEC.

        The user's index is read once; records added after that snapshot
        are not touched.

        Args:
            user_id: Owning principal
            revoked_at: Revocation timestamp

        Returns:
            Number of records moved to REVOKED
        """
        from redis.exceptions import WatchError

        redis = self._get_redis()
        lookup_keys = [self._text(k) for k in redis.smembers(self._user_key(user_id))]
        keys = [self._key(k) for k in lookup_keys]
        if not keys:
            return 0

        with redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(*keys)
                    pending = []
                    for key in keys:
                        data = pipe.get(key)
                        if not data:
                            continue
                        token = RefreshToken.from_dict(json.loads(data))
                        if token.revoke(revoked_at):
                            pending.append((key, token))

                    pipe.multi()
                    for key, token in pending:
                        pipe.set(key, json.dumps(token.to_dict()), keepttl=True)
                    pipe.execute()
                    return len(pending)
                except WatchError:
                    continue

    def list_by_user(self, user_id: str) -> List[RefreshToken]:
        """
        List all records for a user.

        Args:
            user_id: Owning principal

        Returns:
            List of records still held by Redis
        """
        redis = self._get_redis()
        user_key = self._user_key(user_id)

        tokens = []
        for lookup_key in redis.smembers(user_key):
            lookup_key = self._text(lookup_key)
            token = self.find_by_lookup_key(lookup_key)
            if token:
                tokens.append(token)
            else:
                # Record expired out of Redis
                redis.srem(user_key, lookup_key)

        return tokens
