"""Filesystem storage for development and tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

from nusadana.storage.base import StorageError


class LocalStorage:
    """Stores objects under ``root/<bucket>/<key>``."""

    def __init__(self, root: Path, bucket: str):
        self.bucket_dir = Path(root) / bucket

    def path_for(self, key: str) -> Path:
        return self.bucket_dir / key

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, content)
        except OSError as e:
            raise StorageError(f"Storage upload failed: {e}") from e
        return key

    async def aclose(self) -> None:
        pass
