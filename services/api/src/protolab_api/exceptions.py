"""领域异常定义与应用异常处理注册。"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from protolab_api.utils.response import error_payload

logger = logging.getLogger("protolab_api.errors")


class CollabError(Exception):
    """协作域异常基类，携带对外状态码。"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CollabError):
    """请求参数缺失或不合法。"""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class PermissionDeniedError(CollabError):
    """参与者角色不具备目标操作权限。"""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(CollabError):
    """工作空间、文档、修改或评论不存在。"""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(CollabError):
    """请求与当前数据状态冲突（版本不一致、重复审核）。"""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


def _format_validation_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {
            "field": ".".join(str(item) for item in err.get("loc", []) if item != "body"),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]


async def collab_exception_handler(request: Request, exc: CollabError):
    """将领域异常统一包装为标准错误结构。"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(request, message=exc.message, code=exc.code),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求体校验失败按 400 返回，首条错误作为错误信息。"""
    errors = _format_validation_errors(exc)
    if errors:
        first = errors[0]
        message = f"{first['field']}: {first['message']}" if first["field"] else str(first["message"])
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(
            request,
            message=message,
            code=ValidationError.code,
            details={"errors": errors},
        ),
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    """处理未捕获异常，异常信息直接返回给调用方。"""
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    payload = error_payload(request, message=str(exc) or exc.__class__.__name__, code=CollabError.code)
    # 该响应由最外层错误中间件发出，不再经过请求 ID 中间件。
    headers = {"X-Request-Id": payload["request_id"]} if payload["request_id"] else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=payload,
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """集中注册异常处理器。"""
    app.exception_handler(CollabError)(collab_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(unexpected_exception_handler)
