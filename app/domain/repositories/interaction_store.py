# app/domain/repositories/interaction_store.py
from __future__ import annotations
from typing import Protocol, List
from redis.asyncio import Redis
import json

"""
Note:
    - Adapters persisting the interaction log as a whole (one JSON document).
    - No business logic here (capping, filtering...), just load/save.
"""

class InteractionStore(Protocol):
    async def load(self) -> List[dict]: ...
    async def save(self, events: List[dict]) -> None: ...


class InMemoryInteractionStore:
    """
    Process-local store. Used in tests and when Redis is not configured.
    """
    def __init__(self, events: List[dict] | None = None):
        self.events: List[dict] = list(events or [])
        self.saves = 0

    async def load(self) -> List[dict]:
        return list(self.events)

    async def save(self, events: List[dict]) -> None:
        self.events = list(events)
        self.saves += 1


class RedisInteractionStore:
    """
    Adapter storing the interaction log in Redis under a single fixed key,
    the same JSON array the browser client kept in localStorage.
    """
    def __init__(self, redis: Redis, key: str = "ai_user_interactions"):
        self.redis = redis
        self.key = key

    async def load(self) -> List[dict]:
        """
        Read the log. Returns an empty list when the key is missing or does
        not hold a JSON array.
        """
        if raw := await self.redis.get(self.key):
            data = json.loads(raw)
            return data if isinstance(data, list) else []
        return []

    async def save(self, events: List[dict]) -> None:
        """Overwrite the stored log. No TTL: the log is capped, not expired."""
        await self.redis.set(self.key, json.dumps(events, separators=(",", ":")))
