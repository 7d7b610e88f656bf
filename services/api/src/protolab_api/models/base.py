"""内存领域模型基类与通用工具。"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """返回当前 UTC 时间。"""
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    """生成带类型前缀的不透明标识。"""
    return f"{prefix}_{uuid4().hex}"


class DomainModel(BaseModel):
    """领域模型基类。

    对外序列化统一使用驼峰字段名（如 `lastModified`），
    服务内部仍按下划线命名读写属性。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """导出为可直接 JSON 编码的驼峰结构。"""
        return self.model_dump(mode="json", by_alias=True)
