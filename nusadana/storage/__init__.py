"""Object storage for uploaded project documents."""

from nusadana.config import StorageConfig
from nusadana.storage.base import StorageBackend, StorageError, document_key
from nusadana.storage.local import LocalStorage
from nusadana.storage.supabase import SupabaseStorage


def build_storage(config: StorageConfig) -> StorageBackend:
    """Pick the Supabase bucket when credentials are configured, else local disk."""
    if config.use_supabase:
        return SupabaseStorage(
            base_url=config.supabase_url,
            api_key=config.supabase_key,
            bucket=config.bucket,
            timeout=config.timeout_seconds,
        )
    return LocalStorage(root=config.local_root, bucket=config.bucket)


__all__ = [
    "LocalStorage",
    "StorageBackend",
    "StorageError",
    "SupabaseStorage",
    "build_storage",
    "document_key",
]
