"""应用运行配置。"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """协作接口服务共享配置。"""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PROTOLAB_", extra="ignore")

    app_name: str = Field(default="ProtoLab Collaboration API", description="应用名称。")
    app_env: str = Field(default="dev", description="运行环境标识。")
    app_debug: bool = Field(default=False, description="是否开启调试模式（开启后未捕获异常返回调试页面）。")
    api_prefix: str = Field(default="/api", description="统一接口前缀。")
    log_level: str = Field(default="INFO", description="日志级别。")

    collab_ws_path: str = Field(default="/collab/ws", description="实时协作通道路径（位于接口前缀之下）。")
    collab_min_name_length: int = Field(default=3, description="工作空间名称最小长度（去除首尾空白后）。")
    collab_enforce_roles: bool = Field(default=True, description="是否按参与者角色限制写操作。")
    collab_join_url_prefix: str = Field(default="/collab/", description="前端加入工作空间的地址前缀。")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """规范化日志级别名称。"""
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unsupported log level: {value}")
        return normalized

    @field_validator("collab_min_name_length")
    @classmethod
    def ensure_positive_length(cls, value: int) -> int:
        """名称长度下限至少为 1。"""
        if value < 1:
            raise ValueError("collab_min_name_length must be >= 1")
        return value


@lru_cache
def get_settings() -> Settings:
    """返回缓存后的配置单例。"""
    return Settings()
