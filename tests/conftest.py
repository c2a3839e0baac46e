import asyncio
import itertools

import pytest

from app.core.seed_loader import load_seed_data
from app.services.marketplace import build_marketplace
from app.services.storage import MemoryStorage


class YieldingStorage(MemoryStorage):
    """Memory storage that yields to the event loop on every call, so concurrent tasks really interleave."""

    async def get(self, key):
        await asyncio.sleep(0)
        return await super().get(key)

    async def put(self, key, value):
        await asyncio.sleep(0)
        await super().put(key, value)


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def yielding_storage():
    return YieldingStorage()


@pytest.fixture
def seed():
    return load_seed_data()


@pytest.fixture
def marketplace(storage, seed):
    return build_marketplace(storage, seed, id_factory=sequential_ids("new"), clock=lambda: 1_700_000_000_000)
