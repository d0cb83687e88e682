"""Storage backend interface shared by the Supabase and local adapters."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol


class StorageError(Exception):
    """Raised when an object cannot be written to storage."""


class StorageBackend(Protocol):
    """Object store holding uploaded project documents."""

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Write ``content`` at ``key``, overwriting any existing object.

        Returns:
            The key the object was stored under
        """
        ...

    async def aclose(self) -> None: ...


def document_key(project_id: int, filename: str) -> str:
    """Build the ``{project_id}/{filename}`` key for an uploaded document.

    Directory components in the client-supplied filename are discarded.
    """
    name = PurePosixPath(filename.replace("\\", "/")).name
    if not name or name in {".", ".."}:
        raise StorageError(f"Invalid file name: {filename!r}")
    return f"{project_id}/{name}"
