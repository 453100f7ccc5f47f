"""
文档上传路由
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from healthlog.app.api.dependencies import ServiceContainer, get_current_caller, get_services
from healthlog.app.api.schemas.common import DataResponse, OkResponse
from healthlog.app.api.schemas.documents import DocumentRecordResponse
from healthlog.domain.context import CallerIdentity
from healthlog.domain.errors import ValidationError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/records/documents")

UPLOAD_CHUNK_BYTES = 1024 * 1024


async def read_limited_upload(upload: UploadFile, max_bytes: Optional[int]) -> bytes:
    """
    分块读取上传文件，超过上限立即停止

    Args:
        upload: 上传文件
        max_bytes: 大小上限（None 表示不限制）

    Returns:
        文件内容

    Raises:
        ValidationError: 文件超过大小上限
    """
    chunks = []
    total = 0
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if max_bytes is not None and total > max_bytes:
            logger.warning(f"上传文件超过大小上限: file={upload.filename}, limit={max_bytes}")
            raise ValidationError(f"File too large (limit {max_bytes} bytes)", ["file"])
        chunks.append(chunk)
    return b"".join(chunks)


@router.get("", response_model=DataResponse[List[DocumentRecordResponse]])
async def list_documents(
    caller: CallerIdentity = Depends(get_current_caller),
    services: ServiceContainer = Depends(get_services),
):
    """
    查询当前用户的文档列表

    Args:
        caller: 调用方身份（依赖注入）
        services: 服务集合（依赖注入）

    Returns:
        {"data": 文档列表}
    """
    result = await services.documents.list(caller.owner_key)
    return {"data": result.unwrap()}


@router.post(
    "",
    response_model=DataResponse[DocumentRecordResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    entry_date: Optional[str] = Form(None),
    doc_type: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    caller: CallerIdentity = Depends(get_current_caller),
    services: ServiceContainer = Depends(get_services),
):
    """
    上传文档（multipart/form-data）

    Args:
        entry_date: 文档日期
        doc_type: 文档类型
        notes: 备注（可选）
        file: 上传文件
        caller: 调用方身份（依赖注入）
        services: 服务集合（依赖注入）

    Returns:
        {"data": 文档记录}
    """
    data = None
    file_name = None
    content_type = None
    if file is not None:
        data = await read_limited_upload(file, services.documents.max_upload_bytes)
        file_name = file.filename
        content_type = file.content_type

    result = await services.documents.create(
        caller.owner_key,
        {"entry_date": entry_date, "doc_type": doc_type, "notes": notes},
        file_name,
        data,
        content_type=content_type,
        display_name=caller.display_name,
    )
    return {"data": result.unwrap()}


@router.delete("/{id}", response_model=OkResponse)
async def delete_document(
    id: str,
    caller: CallerIdentity = Depends(get_current_caller),
    services: ServiceContainer = Depends(get_services),
):
    """
    删除文档（先删文件再删记录）

    Args:
        id: 记录ID
        caller: 调用方身份（依赖注入）
        services: 服务集合（依赖注入）

    Returns:
        {"ok": true}
    """
    result = await services.documents.delete(caller.owner_key, id)
    result.unwrap()
    return OkResponse()
