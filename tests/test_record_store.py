import asyncio

import pytest

from app.core.errors import Conflict, InvalidArgument, NotFound
from app.services.record_store import LockTable, RecordStore

INITIAL = {"id": "", "count": 0}


def make_store(storage, locks=None):
    return RecordStore(storage, "counter", INITIAL, locks or LockTable())


@pytest.mark.asyncio
async def test_get_put_exists(storage):
    store = make_store(storage)

    assert await store.exists("a") is False
    with pytest.raises(NotFound):
        await store.get("a")

    await store.put("a", {"id": "a", "count": 3})
    assert await store.exists("a") is True
    assert await store.get("a") == {"id": "a", "count": 3}

    # put overwrites unconditionally
    await store.put("a", {"id": "a", "count": 4})
    assert (await store.get("a"))["count"] == 4

    # Stored under an entity scoped key
    assert await storage.list_keys("counter:") == ["counter:a"]


@pytest.mark.asyncio
async def test_empty_id_is_rejected(storage):
    store = make_store(storage)
    with pytest.raises(InvalidArgument):
        await store.get("")


@pytest.mark.asyncio
async def test_mutate_starts_from_initial_state(storage):
    store = make_store(storage)

    result = await store.mutate("fresh", lambda s: {**s, "count": s["count"] + 1})

    assert result == {"id": "fresh", "count": 1}
    assert await store.get("fresh") == result
    # The shared initial state is never modified
    assert INITIAL == {"id": "", "count": 0}


@pytest.mark.asyncio
async def test_update_requires_existing_record(storage):
    store = make_store(storage)
    with pytest.raises(NotFound):
        await store.update("ghost", lambda s: s)
    assert await store.exists("ghost") is False


@pytest.mark.asyncio
async def test_insert_conflict_keeps_existing_record(storage):
    store = make_store(storage)
    await store.insert("a", {"id": "a", "count": 1})

    with pytest.raises(Conflict):
        await store.insert("a", {"id": "a", "count": 99})

    assert (await store.get("a"))["count"] == 1


@pytest.mark.asyncio
async def test_concurrent_mutations_on_same_id_are_not_lost(yielding_storage):
    store = make_store(yielding_storage)

    def increment(state):
        return {**state, "count": state["count"] + 1}

    await asyncio.gather(*(store.mutate("shared", increment) for _ in range(25)))

    assert (await store.get("shared"))["count"] == 25


@pytest.mark.asyncio
async def test_concurrent_inserts_admit_exactly_one(yielding_storage):
    store = make_store(yielding_storage)

    results = await asyncio.gather(
        *(store.insert("dup", {"id": "dup", "count": i}) for i in range(5)),
        return_exceptions=True,
    )

    assert sum(1 for r in results if isinstance(r, Conflict)) == 4
    assert sum(1 for r in results if isinstance(r, dict)) == 1


@pytest.mark.asyncio
async def test_delete(storage):
    store = make_store(storage)
    await store.put("a", {"id": "a", "count": 1})
    assert await store.delete("a") is True
    assert await store.delete("a") is False
    assert await store.exists("a") is False


def test_lock_table_reuses_lock_while_referenced():
    locks = LockTable()
    first = locks.lock("k")
    assert locks.lock("k") is first
    assert locks.lock("other") is not first
