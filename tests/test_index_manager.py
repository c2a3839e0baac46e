import asyncio

import pytest

from app.core.errors import InvalidArgument
from app.services.index_manager import IndexManager, decode_cursor, encode_cursor
from app.services.record_store import LockTable


def make_index(storage):
    return IndexManager(storage, "things", LockTable())


async def collect(index, limit):
    ids, cursor = [], None
    while True:
        page = await index.list_ids(cursor, limit)
        ids.extend(page.ids)
        if page.next is None:
            return ids
        cursor = page.next


@pytest.mark.asyncio
async def test_add_is_idempotent_and_keeps_insertion_order(storage):
    index = make_index(storage)

    assert await index.add("b") is True
    assert await index.add("a") is True
    assert await index.add("b") is False

    page = await index.list_ids(None, 10)
    assert page.ids == ["b", "a"]
    assert page.next is None


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [1, 2, 3, 7, 50])
async def test_pages_cover_every_id_once(storage, limit):
    index = make_index(storage)
    expected = [f"id{i}" for i in range(7)]
    await index.add_many(expected)

    assert await collect(index, limit) == expected


@pytest.mark.asyncio
async def test_limit_is_clamped_to_one(storage):
    index = make_index(storage)
    await index.add_many(["a", "b"])

    page = await index.list_ids(None, 0)
    assert page.ids == ["a"]
    assert page.next is not None

    page = await index.list_ids(None, -5)
    assert page.ids == ["a"]


@pytest.mark.asyncio
async def test_empty_index(storage):
    page = await make_index(storage).list_ids(None, 10)
    assert page.ids == []
    assert page.next is None


@pytest.mark.asyncio
async def test_malformed_cursor(storage):
    index = make_index(storage)
    with pytest.raises(InvalidArgument):
        await index.list_ids("not-a-cursor!!", 5)


def test_cursor_round_trip_is_opaque():
    cursor = encode_cursor(42)
    assert "42" not in cursor
    assert decode_cursor(cursor) == 42
    assert decode_cursor(None) == 0


@pytest.mark.asyncio
async def test_concurrent_adds_do_not_drop_ids(yielding_storage):
    index = IndexManager(yielding_storage, "things", LockTable())

    await asyncio.gather(*(index.add(f"id{i}") for i in range(20)), *(index.add("id0") for _ in range(5)))

    assert await index.size() == 20
    assert sorted(await collect(index, 6)) == sorted(f"id{i}" for i in range(20))


@pytest.mark.asyncio
async def test_remove(storage):
    index = make_index(storage)
    await index.add_many(["a", "b", "c"])

    assert await index.remove("b") is True
    assert await index.remove("b") is False
    assert await collect(index, 10) == ["a", "c"]
    assert await index.size() == 2
