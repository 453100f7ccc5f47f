"""
文件存储适配器
上传文档的二进制内容保存在 BlobStore 中，数据库只保存返回的 URL 句柄
"""
import asyncio
import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from healthlog.infrastructure.database.base import generate_ulid

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class BlobNotFoundError(Exception):
    """URL 句柄对应的文件不存在"""


@dataclass(frozen=True)
class StoredBlob:
    """已保存文件的句柄信息"""
    key: str
    url: str
    size: int


class BlobStore(Protocol):
    """文件存储接口"""

    async def put(self, name: str, data: bytes, content_type: Optional[str] = None) -> StoredBlob:
        ...

    async def delete(self, url: str) -> None:
        ...


def safe_file_name(name: str) -> str:
    """
    清理文件名，去掉路径部分和不安全字符

    Args:
        name: 原始文件名

    Returns:
        只包含字母数字和 . _ - 的文件名
    """
    base = Path(name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "file"


class LocalBlobStore:
    """
    本地文件系统存储

    文件保存在 root/<ulid>/<文件名>，URL 句柄为 base_url/<ulid>/<文件名>。
    同名文件上传多次会得到不同的句柄。
    """

    def __init__(self, root: Path, base_url: str = "/blobs"):
        """
        初始化本地存储

        Args:
            root: 存储根目录
            base_url: URL 前缀
        """
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path_for_url(self, url: str) -> Path:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            raise BlobNotFoundError(url)
        key = url[len(prefix):]
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise BlobNotFoundError(url)
        return path

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def _remove(self, path: Path) -> None:
        if not path.is_file():
            raise BlobNotFoundError(str(path))
        path.unlink()
        # 删除空的 <ulid> 目录
        if path.parent != self.root.resolve() and not any(path.parent.iterdir()):
            shutil.rmtree(path.parent, ignore_errors=True)

    async def put(self, name: str, data: bytes, content_type: Optional[str] = None) -> StoredBlob:
        """
        保存文件

        Args:
            name: 原始文件名
            data: 文件内容
            content_type: MIME 类型（本地存储不使用）

        Returns:
            StoredBlob: 文件句柄（key、url、字节数）
        """
        key = f"{generate_ulid()}/{safe_file_name(name)}"
        path = self.root / key
        await asyncio.to_thread(self._write, path, data)
        blob = StoredBlob(key=key, url=f"{self.base_url}/{key}", size=len(data))
        logger.info(f"文件已保存: url={blob.url}, size={blob.size}")
        return blob

    async def delete(self, url: str) -> None:
        """
        删除文件

        Args:
            url: 文件URL句柄

        Raises:
            BlobNotFoundError: 文件不存在
            OSError: 文件系统错误
        """
        path = self._path_for_url(url)
        await asyncio.to_thread(self._remove, path)
        logger.info(f"文件已删除: url={url}")
