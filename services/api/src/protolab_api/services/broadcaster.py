"""实时连接注册与事件广播。

连接按工作空间分组；推送为尽力而为、至多一次：
非 open 状态连接直接跳过，发送失败仅记录日志，不影响调用方。
连接只在关闭事件触发时从注册表移除。
"""

import json
import logging
from typing import Any, Protocol

from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState

logger = logging.getLogger("protolab_api.realtime")

RELAY_ORIGIN = "participant"


class Connection(Protocol):
    """广播器依赖的最小连接接口（与 starlette WebSocket 一致）。"""

    client_state: WebSocketState
    application_state: WebSocketState

    async def send_text(self, data: str) -> None: ...


def is_open(connection: Connection) -> bool:
    """连接双方均处于已连接状态时才允许推送。"""
    return (
        connection.client_state == WebSocketState.CONNECTED
        and connection.application_state == WebSocketState.CONNECTED
    )


def _contains(bucket: list[Connection], connection: Connection) -> bool:
    # WebSocket 按 scope 判等，登记表只能按对象身份比较。
    return any(item is connection for item in bucket)


class Broadcaster:
    """`workspace_id -> 连接列表` 注册表。"""

    def __init__(self) -> None:
        self._connections: dict[str, list[Connection]] = {}

    def subscribe(self, workspace_id: str, connection: Connection) -> None:
        """将连接登记到工作空间；同一工作空间可有多个连接。"""
        bucket = self._connections.setdefault(workspace_id, [])
        if not _contains(bucket, connection):
            bucket.append(connection)
        logger.debug("connection subscribed workspace=%s total=%s", workspace_id, len(bucket))

    def unsubscribe(self, connection: Connection) -> list[str]:
        """从所有工作空间移除连接，返回受影响的工作空间 ID。"""
        removed_from: list[str] = []
        for workspace_id in list(self._connections):
            bucket = self._connections[workspace_id]
            if _contains(bucket, connection):
                bucket[:] = [item for item in bucket if item is not connection]
                removed_from.append(workspace_id)
            if not bucket:
                del self._connections[workspace_id]
        if removed_from:
            logger.debug("connection unsubscribed workspaces=%s", removed_from)
        return removed_from

    def connections(self, workspace_id: str) -> list[Connection]:
        """返回工作空间当前登记连接的快照。"""
        return list(self._connections.get(workspace_id, []))

    async def _send_all(self, workspace_id: str, text: str, *, exclude: Connection | None = None) -> int:
        delivered = 0
        # 遍历快照，发送期间的订阅变更不影响本轮推送。
        for connection in self.connections(workspace_id):
            if connection is exclude or not is_open(connection):
                continue
            try:
                await connection.send_text(text)
            except Exception as exc:  # noqa: BLE001
                logger.warning("broadcast send failed workspace=%s error=%s", workspace_id, exc)
                continue
            delivered += 1
        return delivered

    async def publish(self, workspace_id: str, event: dict[str, Any]) -> int:
        """序列化一次事件并推送给工作空间内全部 open 连接，返回成功条数。"""
        text = json.dumps(jsonable_encoder(event), ensure_ascii=False)
        delivered = await self._send_all(workspace_id, text)
        logger.debug("event published workspace=%s type=%s delivered=%s", workspace_id, event.get("type"), delivered)
        return delivered

    async def relay(self, workspace_id: str, sender: Connection, raw: str) -> int:
        """将客户端消息转发给同工作空间的其他连接。

        只要求消息是 JSON 对象，不做结构校验与去重；无法解析的消息丢弃。
        """
        try:
            message = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("relay dropped invalid json workspace=%s error=%s", workspace_id, exc)
            return 0
        if not isinstance(message, dict):
            logger.warning("relay dropped non-object message workspace=%s", workspace_id)
            return 0

        text = json.dumps({**message, "from": RELAY_ORIGIN}, ensure_ascii=False)
        return await self._send_all(workspace_id, text, exclude=sender)
