"""FastAPI 应用入口点。"""

from fastapi import FastAPI

from protolab_api.api.router import build_api_router
from protolab_api.core.config import Settings, get_settings
from protolab_api.core.logging import setup_logging
from protolab_api.exceptions import register_exception_handlers
from protolab_api.middlewares import register_middlewares
from protolab_api.services.broadcaster import Broadcaster
from protolab_api.services.change_tracker import ChangeTracker
from protolab_api.services.workspace_store import WorkspaceStore


def create_app(settings: Settings | None = None) -> FastAPI:
    """创建并配置 FastAPI 应用实例。

    每个应用实例持有独立的内存仓库与连接注册表，进程重启后状态全部丢失。
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        debug=settings.app_debug,
        description=(
            "ProtoLab 协作工作空间接口。\n\n"
            "成功响应统一返回：`{success: true, request_id, ...}`；"
            "失败返回：`{success: false, error, request_id}`。\n"
            f"实时事件通道：`{settings.api_prefix}{settings.collab_ws_path}?workspace=<id>`。"
        ),
        openapi_tags=[
            {"name": "health", "description": "服务存活与就绪探针。"},
            {"name": "collab", "description": "工作空间、文档、修改审核与评论。"},
        ],
    )

    app.state.settings = settings
    app.state.workspace_store = WorkspaceStore(min_name_length=settings.collab_min_name_length)
    app.state.change_tracker = ChangeTracker(app.state.workspace_store)
    app.state.broadcaster = Broadcaster()

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(build_api_router(settings), prefix=settings.api_prefix)
    return app


app = create_app()
