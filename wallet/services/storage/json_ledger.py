"""
JSON Ledger Storage

DESIGN DECISION: The whole ledger is one JSON array under one key:
[{"id", "name", "amount", "date", "category", "period"}, ...]

TRADEOFFS:
- Every mutation rewrites the whole collection (fine for a personal ledger)
- No version field, so decoding fills sensible defaults for older shapes
- A collection that cannot be decoded is reported, never half-loaded

Serialization is stable: saving what was just loaded rewrites the same bytes.
"""

import json
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wallet.audit import get_logger
from wallet.models.expense import ExpenseRecord
from wallet.services.storage.interface import (
    KeyValueStore,
    LedgerStorageInterface,
    StorageUnavailable,
)


logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "@expenses_data"


def encode_records(records: Sequence[ExpenseRecord]) -> str:
    """Serialize records to the persisted JSON text."""
    return json.dumps(
        [record.to_storage_dict() for record in records],
        ensure_ascii=False,
    )


def decode_records(raw: str, today: date) -> list[ExpenseRecord]:
    """
    Parse persisted JSON text into records.

    Raises:
        ValueError: If the text is not a JSON array of decodable expense objects
    """
    data = json.loads(raw, parse_float=Decimal)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")

    records = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Entry {index} is not an object")
        if "id" not in item:
            raise ValueError(f"Entry {index} has no id")
        try:
            records.append(ExpenseRecord.from_storage_dict(item, today))
        except PydanticValidationError as e:
            raise ValueError(f"Entry {index} is malformed: {e}") from e
    return records


class JsonLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage over a KeyValueStore.

    Transient medium errors are retried a few times before the
    operation is reported as StorageUnavailable.
    """

    def __init__(
        self,
        medium: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        today: Optional[Callable[[], date]] = None,
    ):
        self._medium = medium
        self._storage_key = storage_key
        self._today = today or date.today

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    async def _read_raw(self) -> Optional[str]:
        return await self._medium.get_item(self._storage_key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    async def _write_raw(self, text: str) -> None:
        await self._medium.set_item(self._storage_key, text)

    async def load(self) -> list[ExpenseRecord]:
        """Load the ledger; an unwritten key is an empty ledger."""
        try:
            raw = await self._read_raw()
        except OSError as e:
            logger.error("ledger_read_failed", key=self._storage_key, error=str(e))
            raise StorageUnavailable(f"Could not read expenses: {e}", operation="load") from e
        except UnicodeDecodeError as e:
            logger.error("ledger_decode_failed", key=self._storage_key, error=str(e))
            raise StorageUnavailable(f"Stored expenses are not valid text: {e}", operation="load") from e

        if raw is None or not raw.strip():
            return []

        try:
            records = decode_records(raw, self._today())
        except ValueError as e:
            logger.error("ledger_decode_failed", key=self._storage_key, error=str(e))
            raise StorageUnavailable(f"Stored expenses are unreadable: {e}", operation="load") from e

        logger.debug("ledger_loaded", key=self._storage_key, count=len(records))
        return records

    async def save(self, records: Sequence[ExpenseRecord]) -> bool:
        """Write the whole ledger in one set_item call."""
        try:
            text = encode_records(records)
        except ValueError as e:
            logger.error("ledger_encode_failed", key=self._storage_key, error=str(e))
            raise StorageUnavailable(f"Expenses could not be encoded: {e}", operation="save") from e

        try:
            await self._write_raw(text)
        except OSError as e:
            logger.error("ledger_write_failed", key=self._storage_key, error=str(e))
            raise StorageUnavailable(f"Could not save expenses: {e}", operation="save") from e

        logger.debug("ledger_saved", key=self._storage_key, count=len(records))
        return True
