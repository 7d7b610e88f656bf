"""统一响应结构工具。"""

from typing import Any

from fastapi import Request


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def success(request: Request, **payload: Any) -> dict[str, Any]:
    """构造统一成功响应结构：`{success: true, request_id, ...payload}`。"""
    return {
        "success": True,
        "request_id": _request_id(request),
        **payload,
    }


def error_payload(
    request: Request,
    message: str,
    code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """构造统一错误响应结构：`{success: false, error, request_id}`。"""
    payload: dict[str, Any] = {
        "success": False,
        "error": message,
        "request_id": _request_id(request),
    }
    if code:
        payload["code"] = code
    if details:
        payload["details"] = details
    return payload
