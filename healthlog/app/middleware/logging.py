"""
日志中间件
"""
import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

_BODY_PREVIEW_BYTES = 200


class LoggingMiddleware(BaseHTTPMiddleware):
    """日志中间件"""

    async def dispatch(self, request: Request, call_next):
        """
        记录请求日志

        Args:
            request: FastAPI 请求对象
            call_next: 下一个中间件或路由处理函数

        Returns:
            响应对象
        """
        start_time = time.time()

        client_host = request.client.host if request.client else 'unknown'
        query_params = dict(request.query_params) if request.query_params else {}

        logger.info(
            f"[HTTP请求开始] {request.method} {request.url.path} - "
            f"客户端: {client_host} - "
            f"查询参数: {query_params if query_params else '无'}"
        )

        # JSON 请求体仅在 DEBUG 级别记录预览；multipart 上传不读取
        content_type = request.headers.get("content-type", "")
        if (
            request.method in ("POST", "PUT", "PATCH")
            and content_type.startswith("application/json")
            and logger.isEnabledFor(logging.DEBUG)
        ):
            body = await request.body()
            preview = body[:_BODY_PREVIEW_BYTES].decode('utf-8', errors='ignore')
            logger.debug(f"[HTTP请求体] {request.method} {request.url.path} - body_preview={preview}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"[HTTP请求异常] {request.method} {request.url.path} - "
                f"异常: {str(e)} - "
                f"处理时间: {process_time:.3f}s",
                exc_info=True
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"[HTTP请求完成] {request.method} {request.url.path} - "
            f"状态码: {response.status_code} - "
            f"处理时间: {process_time:.3f}s"
        )

        return response
