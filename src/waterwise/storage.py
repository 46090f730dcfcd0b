"""Durable local key-value storage for the session.

Values are opaque bytes. ``FileStorage`` keeps one file per key in a
directory readable only by the current user; ``MemoryStorage`` keeps
everything in process memory and is useful for ephemeral sessions.
"""

import asyncio
import logging
import os
import re
from pathlib import Path

from waterwise.exceptions import StorageError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> None:
    if not _KEY_PATTERN.match(key) or key in (".", ".."):
        raise ValueError(f"Invalid storage key: {key!r}")


class FileStorage:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path) -> None:
        """Initialize the storage.

        Args:
            directory: Where to keep the files (created on first write)
        """
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        _check_key(key)
        return self._directory / f"{key}.json"

    async def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(key, "read", str(e)) from e

    async def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(self._write, path, value)
        except OSError as e:
            raise StorageError(key, "write", str(e)) from e
        logger.debug(f"Stored {len(value)} bytes under {key}")

    async def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(key, "remove", str(e)) from e

    def _write(self, path: Path, value: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        # Write then rename so a crash never leaves a truncated record
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(value)
        tmp_path.chmod(0o600)  # rw-------
        os.replace(tmp_path, path)


class MemoryStorage:
    """In-process storage; contents are lost when the process exits."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        _check_key(key)
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        _check_key(key)
        self._data[key] = bytes(value)

    async def remove(self, key: str) -> None:
        _check_key(key)
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Keys currently stored."""
        return sorted(self._data)
