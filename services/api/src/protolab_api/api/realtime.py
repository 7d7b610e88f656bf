"""实时协作通道。

客户端通过 `?workspace=<id>` 订阅工作空间事件，可选 `participant=<id>` 上报在线状态。
客户端发来的消息原样（附加 `from` 标记）转发给同工作空间的其他连接，服务端不解析语义。
"""

import logging

from fastapi import Depends, Query, WebSocket, WebSocketDisconnect, status

from protolab_api.dependencies import get_broadcaster, get_workspace_store
from protolab_api.services import events
from protolab_api.services.broadcaster import Broadcaster
from protolab_api.services.workspace_store import WorkspaceStore

logger = logging.getLogger("protolab_api.realtime")


def _frame_text(message: dict) -> str | None:
    """取出文本帧内容；二进制帧按 UTF-8 解码，无法解码的字节交给转发逻辑丢弃。"""
    if message.get("text") is not None:
        return message["text"]
    if message.get("bytes") is not None:
        return message["bytes"].decode("utf-8", errors="replace")
    return None


async def _announce_presence(
    store: WorkspaceStore,
    broadcaster: Broadcaster,
    workspace_id: str,
    participant_id: str | None,
    online: bool,
) -> None:
    participant = store.set_presence(workspace_id, participant_id, online)
    if participant is not None:
        await broadcaster.publish(workspace_id, events.presence_changed(workspace_id, participant))


async def collaboration_socket(
    websocket: WebSocket,
    workspace: str | None = Query(default=None, description="订阅的工作空间 ID。"),
    participant: str | None = Query(default=None, description="可选参与者 ID，用于在线状态。"),
    store: WorkspaceStore = Depends(get_workspace_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """连接生命周期：connecting → open → closed，关闭时注销。"""
    if not workspace:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="workspace query parameter required")
        return

    # 先登记再握手：客户端握手完成时订阅已生效，握手前的推送按非 open 跳过。
    broadcaster.subscribe(workspace, websocket)
    try:
        await websocket.accept()
        logger.info("socket connected workspace=%s participant=%s", workspace, participant)
        await _announce_presence(store, broadcaster, workspace, participant, True)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE), message.get("reason"))
            raw = _frame_text(message)
            if raw is not None:
                await broadcaster.relay(workspace, websocket, raw)
    except WebSocketDisconnect as exc:
        logger.info("socket closed workspace=%s code=%s", workspace, exc.code)
    finally:
        broadcaster.unsubscribe(websocket)
        await _announce_presence(store, broadcaster, workspace, participant, False)
