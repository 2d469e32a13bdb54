"""Storage module for persisting rendered resumes."""

from src.storage.config import StorageConfig, get_storage_config, reset_storage_config
from src.storage.models import UploadResult
from src.storage.provider import (
    BunnyStorageProvider,
    CloudStorageProvider,
    LocalStorageProvider,
)
from src.storage.uploader import StorageUploader, sanitize_key_part

__all__ = [
    "BunnyStorageProvider",
    "CloudStorageProvider",
    "LocalStorageProvider",
    "StorageConfig",
    "StorageUploader",
    "UploadResult",
    "get_storage_config",
    "reset_storage_config",
    "sanitize_key_part",
]
