"""Supabase Storage client for project documents."""

from __future__ import annotations

from urllib.parse import quote

import httpx
import structlog

from nusadana.storage.base import StorageError

logger = structlog.get_logger(__name__)


class SupabaseStorage:
    """Uploads objects through the Supabase Storage REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        bucket: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.bucket = bucket
        self.client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/storage/v1",
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "apikey": api_key,
            },
        )

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        # x-upsert overwrites an existing object with the same key
        try:
            response = await self.client.post(
                f"/object/{self.bucket}/{quote(key)}",
                content=content,
                headers={"Content-Type": content_type, "x-upsert": "true"},
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Storage upload failed: {e}") from e

        if response.status_code >= 400:
            raise StorageError(_error_message(response))

        logger.info("storage_object_uploaded", bucket=self.bucket, key=key, size=len(content))
        return key

    async def aclose(self) -> None:
        await self.client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Storage upload failed with HTTP {response.status_code}"
    return body.get("message") or body.get("error") or f"HTTP {response.status_code}"
