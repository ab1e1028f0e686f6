"""
Shared fixtures for Mi Billetera tests.

No real files or devices unless a test asks for tmp_path.
"""

from datetime import date

import pytest

from wallet.services.storage import (
    InMemoryKeyValueStore,
    JsonLedgerStorage,
    KeyValueStore,
)


TODAY = date(2024, 5, 15)


class FailingKeyValueStore(KeyValueStore):
    """Medium whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = True, fail_writes: bool = True, initial=None):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.inner = InMemoryKeyValueStore(initial)
        self.write_attempts = 0

    async def get_item(self, key):
        if self.fail_reads:
            raise OSError("medium offline")
        return await self.inner.get_item(key)

    async def set_item(self, key, value):
        self.write_attempts += 1
        if self.fail_writes:
            raise OSError("disk full")
        await self.inner.set_item(key, value)


@pytest.fixture
def today():
    return lambda: TODAY


@pytest.fixture
def medium():
    return InMemoryKeyValueStore()


@pytest.fixture
def storage(medium, today):
    return JsonLedgerStorage(medium, today=today)
