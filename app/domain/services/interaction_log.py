import asyncio
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, List, Tuple

from pydantic import ValidationError

from app.domain.models.product import Action, InteractionEvent
from app.domain.repositories.interaction_store import InteractionStore
from app.domain.services.constants import LOG_CAPACITY

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionLog:
    """
    Append-only, capped log of (user, product, action) events.

    The whole log is written back to the store after every record(); the
    in-memory copy stays authoritative if the store is unavailable.
    """

    def __init__(
        self,
        store: InteractionStore,
        *,
        capacity: int = LOG_CAPACITY,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.capacity = capacity
        self.now = now
        self._events: deque[InteractionEvent] = deque(maxlen=capacity)
        self._save_lock = asyncio.Lock()

    @property
    def entries(self) -> Tuple[InteractionEvent, ...]:
        """Events, oldest first."""
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    async def load(self) -> int:
        """Restore the log from the store, keeping the last `capacity` valid events."""
        try:
            raw = await self.store.load()
        except Exception as e:
            logger.warning("interaction_log load error err=%s", e)
            return 0

        events: List[InteractionEvent] = []
        for item in raw:
            try:
                events.append(InteractionEvent.model_validate(item))
            except ValidationError as e:
                logger.warning("interaction_log skipping malformed event=%s err=%s", item, e.errors()[:1])
        self._events = deque(events[-self.capacity:], maxlen=self.capacity)
        logger.info("interaction_log loaded events=%s", len(self._events))
        return len(self._events)

    async def record(self, user_id: str, product_id: str, action: Action | str) -> InteractionEvent:
        event = InteractionEvent(
            user_id=user_id,
            product_id=product_id,
            action=Action(action),
            timestamp=self.now(),
        )
        # deque(maxlen) drops from the front once full
        self._events.append(event)
        logger.debug("interaction_log record user_id=%s product_id=%s action=%s size=%s",
                     user_id, product_id, event.action.value, len(self._events))
        await self._persist()
        return event

    async def clear(self) -> None:
        self._events.clear()
        await self._persist()

    async def _persist(self) -> None:
        # one save at a time, each taking the snapshot once it holds the lock,
        # so the store always ends on the newest log
        async with self._save_lock:
            payload = [e.model_dump(mode="json") for e in self._events]
            try:
                await self.store.save(payload)
            except Exception as e:
                logger.warning("interaction_log save error size=%s err=%s", len(payload), e)

    # ----- Queries ---------------------------------------------------------

    def for_user(self, user_id: str) -> List[InteractionEvent]:
        return [e for e in self._events if e.user_id == user_id]

    def since(self, cutoff: datetime) -> List[InteractionEvent]:
        """Events strictly newer than `cutoff`."""
        return [e for e in self._events if e.timestamp > cutoff]

    def has_interacted(self, user_id: str, product_id: str) -> bool:
        return any(e.user_id == user_id and e.product_id == product_id for e in self._events)
