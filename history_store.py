"""Served-history store backed by a Redis sorted set.

Each key holds candidate ids scored by the epoch second they were served.
"""
import logging
import threading

import redis
from redis.connection import ConnectionPool

logger = logging.getLogger(__name__)

# One pooled client per URL
_clients = {}
_clients_lock = threading.Lock()


def get_redis(url):
    """Get a pooled sync Redis client for ``url``."""
    with _clients_lock:
        client = _clients.get(url)
        if client is None:
            pool = ConnectionPool.from_url(
                url,
                decode_responses=True,
                max_connections=50,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            client = redis.Redis(connection_pool=pool)
            _clients[url] = client
        return client


class RedisHistoryStore:
    def __init__(self, client):
        self.client = client

    @classmethod
    def from_url(cls, url):
        return cls(get_redis(url))

    def append(self, key, members, score):
        """ZADD every member under ``key`` with the same score."""
        mapping = {str(member): score for member in members}
        if not mapping:
            return 0
        added = self.client.zadd(key, mapping)
        logger.debug("appended %d ids to %s (%d new)", len(mapping), key, added)
        return added

    def served(self, key):
        """All ids ever appended under ``key``."""
        return {int(member) for member in self.client.zrange(key, 0, -1)}
