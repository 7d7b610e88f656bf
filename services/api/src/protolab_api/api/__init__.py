"""路由模块导出集合。"""

from . import collab, health, realtime

__all__ = [
    "collab",
    "health",
    "realtime",
]
