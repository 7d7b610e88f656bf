"""全局通用结构。

用于定义统一请求基类与错误响应结构，便于在线接口文档展示与联调。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """基础结构，字段对外使用驼峰命名，同时接受下划线命名。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ErrorResponse(BaseModel):
    """统一错误响应。"""

    success: bool = Field(default=False, description="固定为 false。")
    error: str = Field(description="人类可读错误信息。")
    request_id: str | None = Field(default=None, description="服务端生成的请求追踪 ID。")
    code: str | None = Field(default=None, description="机器可识别错误码。")
    details: dict[str, Any] | None = Field(default=None, description="可选扩展错误细节。")
