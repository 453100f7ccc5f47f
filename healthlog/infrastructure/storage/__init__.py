"""
文件存储模块
"""
from healthlog.infrastructure.storage.blob_store import (
    BlobStore,
    BlobNotFoundError,
    LocalBlobStore,
    StoredBlob,
    safe_file_name,
)

__all__ = [
    "BlobStore",
    "BlobNotFoundError",
    "LocalBlobStore",
    "StoredBlob",
    "safe_file_name",
]
