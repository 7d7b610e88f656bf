"""顶层路由注册。"""

from fastapi import APIRouter

from protolab_api.core.config import Settings

from . import collab, health, realtime


def build_api_router(settings: Settings) -> APIRouter:
    """按配置组装接口路由（实时通道路径可配置）。"""
    api_router = APIRouter()

    # 固定注册顺序，便于在线接口文档展示和问题定位。
    api_router.include_router(health.router)
    api_router.include_router(collab.router)
    api_router.add_api_websocket_route(settings.collab_ws_path, realtime.collaboration_socket)
    return api_router
