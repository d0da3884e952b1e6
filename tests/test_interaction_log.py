import asyncio

import pytest

from app.domain.models.product import Action
from app.domain.repositories.interaction_store import InMemoryInteractionStore
from app.domain.services.interaction_log import InteractionLog


class BrokenStore:
    async def load(self):
        raise ConnectionError("redis down")

    async def save(self, events):
        raise ConnectionError("redis down")


async def test_record_appends_and_persists(log, store, clock):
    event = await log.record("u1", "p1", "view")

    assert event.action is Action.VIEW
    assert event.timestamp == clock()
    assert len(log) == 1
    assert store.saves == 1
    saved = store.events[0]
    assert (saved["user_id"], saved["product_id"], saved["action"]) == ("u1", "p1", "view")
    assert saved["timestamp"].startswith("2026-10-19T12:00:00")


async def test_log_never_exceeds_capacity_and_keeps_most_recent(log, store):
    for i in range(130):
        await log.record("u1", f"p{i}", "view")
        assert len(log) <= 100

    ids = [e.product_id for e in log.entries]
    assert ids == [f"p{i}" for i in range(30, 130)]
    assert len(store.events) == 100
    assert store.events[0]["product_id"] == "p30"
    assert store.events[-1]["product_id"] == "p129"


async def test_custom_capacity(store, clock):
    small = InteractionLog(store, capacity=3, now=clock)
    for pid in ["a", "b", "c", "d"]:
        await small.record("u", pid, "cart")
    assert [e.product_id for e in small.entries] == ["b", "c", "d"]


async def test_load_restores_browser_shaped_log_and_skips_garbage(clock):
    store = InMemoryInteractionStore([
        {"userId": "u1", "productId": "p1", "action": "purchase", "timestamp": "2026-10-18T10:00:00.000Z"},
        {"userId": "u1", "productId": "p2", "action": "teleport", "timestamp": "2026-10-18T10:00:00.000Z"},
        {"user_id": "u2", "product_id": "p3", "action": "view", "timestamp": "2026-10-18T11:00:00"},
    ])
    log = InteractionLog(store, now=clock)

    assert await log.load() == 2
    assert [(e.user_id, e.product_id) for e in log.entries] == [("u1", "p1"), ("u2", "p3")]
    # naive timestamps are read as UTC
    assert log.entries[1].timestamp.tzinfo is not None


async def test_load_truncates_to_capacity(clock):
    raw = [
        {"user_id": "u", "product_id": f"p{i}", "action": "view", "timestamp": "2026-10-18T10:00:00Z"}
        for i in range(150)
    ]
    log = InteractionLog(InMemoryInteractionStore(raw), now=clock)
    await log.load()
    assert len(log) == 100
    assert log.entries[0].product_id == "p50"


async def test_store_failures_do_not_reach_the_caller(clock):
    log = InteractionLog(BrokenStore(), now=clock)

    assert await log.load() == 0
    await log.record("u1", "p1", "search")
    assert len(log) == 1


async def test_queries(log, clock):
    await log.record("u1", "p1", "view")
    clock.advance(days=1)
    await log.record("u2", "p2", "cart")
    await log.record("u1", "p3", "purchase")

    assert [e.product_id for e in log.for_user("u1")] == ["p1", "p3"]
    assert log.has_interacted("u2", "p2")
    assert not log.has_interacted("u2", "p1")
    assert [e.product_id for e in log.since(clock().replace(hour=0))] == ["p2", "p3"]


async def test_invalid_action_is_rejected(log):
    with pytest.raises(ValueError):
        await log.record("u1", "p1", "teleport")
    assert len(log) == 0


async def test_clear(log, store):
    await log.record("u1", "p1", "view")
    await log.clear()
    assert len(log) == 0
    assert store.events == []


class SlowFirstSaveStore(InMemoryInteractionStore):
    """The first save takes longest, so unserialized saves would finish out of order."""

    def __init__(self):
        super().__init__()
        self.delays = [0.03, 0.0, 0.0]

    async def save(self, events):
        await asyncio.sleep(self.delays.pop(0) if self.delays else 0)
        await super().save(events)


async def test_concurrent_records_leave_the_newest_log_in_the_store(clock):
    store = SlowFirstSaveStore()
    log = InteractionLog(store, now=clock)

    await asyncio.gather(
        log.record("u1", "p1", "view"),
        log.record("u2", "p2", "cart"),
        log.record("u3", "p3", "purchase"),
    )

    assert [e["product_id"] for e in store.events] == ["p1", "p2", "p3"]
    assert store.saves == 3
