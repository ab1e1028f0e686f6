"""
Key-Value Media

Two implementations of the on-device medium:
- FileKeyValueStore: one JSON file per key inside a data directory
- InMemoryKeyValueStore: a dict, for tests and sessions that should not persist

DESIGN DECISION: File writes go to a temporary file in the target
directory and are moved into place with os.replace. Readers see either
the old collection or the new one, never a half-written file.
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from wallet.audit import get_logger
from wallet.services.storage.interface import KeyValueStore


logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def key_to_filename(key: str) -> str:
    """
    Map a namespaced key to a file name.

    '@expenses_data' -> 'expenses_data.json'
    """
    stem = _UNSAFE_CHARS.sub("_", key.lstrip("@")).strip("._")
    if not stem:
        raise ValueError(f"Storage key has no usable characters: {key!r}")
    return f"{stem}.json"


class FileKeyValueStore(KeyValueStore):
    """
    File-backed medium.

    Blocking file IO runs in a worker thread so the caller's event loop
    only suspends, never blocks.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Path of the file backing `key`."""
        return self._data_dir / key_to_filename(key)

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write_atomic, self.path_for(key), value)

    def _read(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write_atomic(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file must live in the same directory for os.replace to be atomic
        temp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                prefix=path.name + "-",
                suffix=".tmp",
                dir=path.parent,
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(value)
                tf.flush()
            os.replace(temp_name, path)
        except OSError:
            if temp_name and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed", temp_file=temp_name)
            raise

        logger.debug("atomic_write_done", path=str(path), size=len(value))


class InMemoryKeyValueStore(KeyValueStore):
    """Ephemeral medium; contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of every stored key and value."""
        return dict(self._items)
