"""
Notes storage: where exported session-notes documents live.

Files written here are retrievable at ``/notes/<name>``.  There is no
expiry and no deletion; the store is append-only.

Public API
----------
NotesStorage.put(name, data) -> str     (retrieval path)
NotesStorage.get(name)       -> bytes
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

import aiofiles

from lawdio.errors import NoteNotFoundError, StorageError

logger = logging.getLogger(__name__)

NOTES_URL_PREFIX = "/notes"


def is_safe_name(name: str) -> bool:
    """A stored name must be a plain filename: no separators, no dot segments."""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return os.path.basename(name) == name


class NotesStorage:
    """Interface for notes storage backends."""

    backend_name: str = "abstract"

    async def put(self, name: str, data: bytes) -> str:
        raise NotImplementedError

    async def get(self, name: str) -> bytes:
        raise NotImplementedError

    @staticmethod
    def url_for(name: str) -> str:
        return f"{NOTES_URL_PREFIX}/{name}"


class FileNotesStorage(NotesStorage):
    """
    Stores documents as files in a local directory.

    The directory is created on construction if it does not exist.
    Existing files are never overwritten.
    """

    backend_name = "file"

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory)
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, name: str) -> Path:
        return self.directory / name

    async def put(self, name: str, data: bytes) -> str:
        if not is_safe_name(name):
            raise StorageError()

        file_path = self._path(name)
        try:
            # "xb" refuses to clobber a file written by a concurrent export
            async with aiofiles.open(file_path, "xb") as out:
                await out.write(data)
        except OSError as exc:
            logger.error("Failed to write notes file %s: %s", file_path, exc)
            raise StorageError() from exc

        logger.info("Saved notes file → %s (%d bytes)", file_path, len(data))
        return self.url_for(name)

    async def get(self, name: str) -> bytes:
        if not is_safe_name(name):
            raise NoteNotFoundError()

        file_path = self._path(name)
        if not file_path.is_file():
            raise NoteNotFoundError()

        async with aiofiles.open(file_path, "rb") as f:
            return await f.read()


class InMemoryNotesStorage(NotesStorage):
    """Dict-backed store for tests and throwaway deployments."""

    backend_name = "memory"

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}

    async def put(self, name: str, data: bytes) -> str:
        if not is_safe_name(name) or name in self.files:
            raise StorageError()
        self.files[name] = bytes(data)
        return self.url_for(name)

    async def get(self, name: str) -> bytes:
        try:
            return self.files[name]
        except KeyError:
            raise NoteNotFoundError() from None


def create_storage(backend: str, directory: str) -> NotesStorage:
    """Build the storage backend named by the NOTES_BACKEND setting."""
    backend = (backend or "file").strip().lower()
    if backend == "memory":
        return InMemoryNotesStorage()
    if backend == "file":
        return FileNotesStorage(directory)
    raise ValueError(f"Unknown NOTES_BACKEND {backend!r}; expected 'file' or 'memory'")
