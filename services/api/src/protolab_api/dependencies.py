"""请求依赖。

协作状态实例挂在 `app.state` 上，由 `create_app` 创建；
HTTP 与实时通道通过同一组依赖取用，测试时每个应用实例互相隔离。
"""

from typing import Any

from fastapi import BackgroundTasks, Depends
from starlette.requests import HTTPConnection

from protolab_api.core.config import Settings, get_settings
from protolab_api.services.broadcaster import Broadcaster
from protolab_api.services.change_tracker import ChangeTracker
from protolab_api.services.workspace_store import WorkspaceStore


def get_workspace_store(connection: HTTPConnection) -> WorkspaceStore:
    """返回当前应用的工作空间仓库。"""
    return connection.app.state.workspace_store


def get_change_tracker(connection: HTTPConnection) -> ChangeTracker:
    """返回当前应用的修改跟踪器。"""
    return connection.app.state.change_tracker


def get_broadcaster(connection: HTTPConnection) -> Broadcaster:
    """返回当前应用的广播器。"""
    return connection.app.state.broadcaster


def get_app_settings(connection: HTTPConnection) -> Settings:
    """返回当前应用绑定的配置，未绑定时回退到全局配置。"""
    return getattr(connection.app.state, "settings", None) or get_settings()


class CollabServices:
    """路由层常用依赖的聚合，避免每个接口重复声明。"""

    def __init__(
        self,
        background_tasks: BackgroundTasks,
        store: WorkspaceStore = Depends(get_workspace_store),
        tracker: ChangeTracker = Depends(get_change_tracker),
        broadcaster: Broadcaster = Depends(get_broadcaster),
        settings: Settings = Depends(get_app_settings),
    ) -> None:
        self.store = store
        self.tracker = tracker
        self.broadcaster = broadcaster
        self.settings = settings
        self._background_tasks = background_tasks

    def announce(self, workspace_id: str, event: dict[str, Any]) -> None:
        """在响应发出后推送事件，推送耗时与失败都不影响接口响应。"""
        self._background_tasks.add_task(self.broadcaster.publish, workspace_id, event)
