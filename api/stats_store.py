"""Win/loss statistics storage with Redis backend and in-memory fallback."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Literal

import redis.asyncio as redis
from redis.exceptions import RedisError

from config import config

logger = logging.getLogger(__name__)

GameResult = Literal["win", "loss", "tie"]

STAT_FIELDS = ("wins", "losses", "ties", "games_played")

_RESULT_FIELDS: dict[str, str] = {"win": "wins", "loss": "losses", "tie": "ties"}


def empty_stats() -> dict[str, int]:
    """Stats for a player who has never finished a game."""
    return {name: 0 for name in STAT_FIELDS}


class StatsStore(ABC):
    """Abstract per-player results store."""

    @abstractmethod
    async def get(self, player_id: str) -> dict[str, int]:
        """Get a player's stats (zeros if unknown)."""
        ...

    @abstractmethod
    async def record(self, player_id: str, result: GameResult) -> dict[str, int]:
        """Count one finished game and return the updated stats."""
        ...

    @abstractmethod
    async def delete(self, player_id: str) -> None:
        """Forget a player."""
        ...

    async def close(self) -> None:
        """Release backend resources."""


class InMemoryStatsStore(StatsStore):
    """In-memory stats store for local development."""

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.stats_ttl
        self._stats: dict[str, tuple[dict[str, int], datetime]] = {}

    async def get(self, player_id: str) -> dict[str, int]:
        """Get a player's stats."""
        if player_id not in self._stats:
            return empty_stats()

        data, expiry = self._stats[player_id]
        if expiry < datetime.now():
            await self.delete(player_id)
            return empty_stats()

        return dict(data)

    async def record(self, player_id: str, result: GameResult) -> dict[str, int]:
        """Count one finished game."""
        stats = await self.get(player_id)
        stats[_RESULT_FIELDS[result]] += 1
        stats["games_played"] += 1
        expiry = datetime.now() + timedelta(seconds=self._ttl)
        self._stats[player_id] = (stats, expiry)
        return dict(stats)

    async def delete(self, player_id: str) -> None:
        """Forget a player."""
        self._stats.pop(player_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired entries."""
        now = datetime.now()
        expired = [pid for pid, (_, expiry) in self._stats.items() if expiry < now]
        for pid in expired:
            del self._stats[pid]
        return len(expired)


class RedisStatsStore(StatsStore):
    """Redis-backed stats store, one hash per player."""

    def __init__(self, redis_client: redis.Redis, ttl: int | None = None) -> None:
        self._redis = redis_client
        self._ttl = ttl or config.stats_ttl
        self._prefix = "war:stats:"

    def _key(self, player_id: str) -> str:
        """Get Redis key for a player."""
        return f"{self._prefix}{player_id}"

    async def get(self, player_id: str) -> dict[str, int]:
        """Get a player's stats."""
        data = await self._redis.hgetall(self._key(player_id))
        stats = empty_stats()
        for name, value in data.items():
            name = name.decode() if isinstance(name, bytes) else name
            if name in stats:
                stats[name] = int(value)
        return stats

    async def record(self, player_id: str, result: GameResult) -> dict[str, int]:
        """Count one finished game atomically."""
        key = self._key(player_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.hincrby(key, _RESULT_FIELDS[result], 1)
            pipe.hincrby(key, "games_played", 1)
            pipe.expire(key, self._ttl)
            await pipe.execute()
        return await self.get(player_id)

    async def delete(self, player_id: str) -> None:
        """Forget a player."""
        await self._redis.delete(self._key(player_id))

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._redis.aclose()


# Global stats store instance
_stats_store: StatsStore | None = None


async def get_stats_store() -> StatsStore:
    """Get or create the stats store."""
    global _stats_store

    if _stats_store is not None:
        return _stats_store

    try:
        redis_client = redis.from_url(config.redis.url)
        await redis_client.ping()
        _stats_store = RedisStatsStore(redis_client)
        return _stats_store
    except (RedisError, OSError) as e:
        logger.warning("Redis unavailable (%s), keeping stats in memory", e)

    _stats_store = InMemoryStatsStore()
    return _stats_store


def set_stats_store(store: StatsStore | None) -> None:
    """Replace the global store (None resets to lazy creation)."""
    global _stats_store
    _stats_store = store
