"""工作空间内存仓库。

职责:
1. 作为工作空间与文档状态的唯一数据源。
2. 所有写操作先完成校验再落状态，失败时不留下部分修改。
3. 每次成功写入刷新工作空间 `last_modified`。

仓库本身不做推送；路由层在写入成功后调用广播器。
"""

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from protolab_api.exceptions import NotFoundError, ValidationError
from protolab_api.models.base import new_id, utc_now
from protolab_api.models.enums import DocumentType, ParticipantRole, WorkspaceStatus, WorkspaceType
from protolab_api.models.workspace import Participant, Workspace, WorkspaceDocument

logger = logging.getLogger("protolab_api.store")

DEFAULT_EDITOR = "current_user"


def coerce_enum(enum_cls, value: Any, *, field: str):
    """将外部输入转换为枚举值，非法值视为参数错误。"""
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_cls)
        raise ValidationError(f"Invalid {field}: {value!r} (expected one of {allowed})") from exc


class WorkspaceStore:
    """进程内工作空间注册表。"""

    def __init__(self, *, min_name_length: int = 3) -> None:
        self.min_name_length = min_name_length
        # 插入顺序即列表返回顺序。
        self._workspaces: dict[str, Workspace] = {}

    def __len__(self) -> int:
        return len(self._workspaces)

    def _validate_name(self, name: str | None) -> str:
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError("Workspace name is required")
        if len(trimmed) < self.min_name_length:
            raise ValidationError(f"Workspace name must be at least {self.min_name_length} characters")
        return trimmed

    def _build_participant(self, raw: Mapping[str, Any]) -> Participant:
        return Participant(
            id=new_id("user"),
            name=str(raw.get("name") or ""),
            email=str(raw.get("email") or ""),
            role=coerce_enum(ParticipantRole, raw.get("role") or ParticipantRole.VIEWER, field="participant role"),
            avatar=raw.get("avatar"),
            is_online=False,
            last_seen=utc_now(),
        )

    def create_workspace(
        self,
        name: str | None,
        type: WorkspaceType | str,
        participants: Iterable[Mapping[str, Any]] | None = None,
    ) -> Workspace:
        """创建工作空间；参与者统一分配新 ID 并默认离线。"""
        trimmed = self._validate_name(name)
        workspace_type = coerce_enum(WorkspaceType, type, field="workspace type")
        members = [self._build_participant(raw) for raw in (participants or [])]

        now = utc_now()
        workspace = Workspace(
            id=new_id("ws"),
            name=trimmed,
            type=workspace_type,
            participants=members,
            documents=[],
            status=WorkspaceStatus.ACTIVE,
            created_at=now,
            last_modified=now,
        )
        self._workspaces[workspace.id] = workspace
        logger.info(
            "workspace created id=%s type=%s participants=%s",
            workspace.id,
            workspace.type,
            len(members),
        )
        return workspace

    def get_workspace(self, workspace_id: str) -> Workspace:
        """读取工作空间，不存在时抛出未找到异常。"""
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            raise NotFoundError("Workspace not found")
        return workspace

    def list_workspaces(self) -> list[Workspace]:
        """返回当前持有的全部工作空间（无分页、无过滤）。"""
        return list(self._workspaces.values())

    def get_document(self, workspace_id: str, document_id: str) -> tuple[Workspace, WorkspaceDocument]:
        """读取工作空间及其文档。"""
        workspace = self.get_workspace(workspace_id)
        document = workspace.find_document(document_id)
        if document is None:
            raise NotFoundError("Document not found")
        return workspace, document

    def add_document(
        self,
        workspace_id: str,
        name: str | None,
        type: DocumentType | str,
        content: Any = None,
        *,
        edited_by: str | None = None,
    ) -> WorkspaceDocument:
        """向工作空间追加文档，初始版本为 1。"""
        workspace = self.get_workspace(workspace_id)
        document_type = coerce_enum(DocumentType, type or DocumentType.DRAFT, field="document type")

        document = WorkspaceDocument(
            id=new_id("doc"),
            name=(name or "").strip(),
            type=document_type,
            content=content,
            version=1,
            changes=[],
            comments=[],
            last_edited_by=edited_by or DEFAULT_EDITOR,
            last_edited_at=utc_now(),
        )
        workspace.documents.append(document)
        workspace.touch()
        logger.info("document added workspace=%s document=%s type=%s", workspace.id, document.id, document.type)
        return document

    def update_workspace_status(self, workspace_id: str, status: WorkspaceStatus | str) -> Workspace:
        """变更工作空间状态。"""
        workspace = self.get_workspace(workspace_id)
        new_status = coerce_enum(WorkspaceStatus, status, field="workspace status")
        workspace.status = new_status
        workspace.touch()
        logger.info("workspace status changed id=%s status=%s", workspace.id, new_status)
        return workspace

    def set_presence(self, workspace_id: str, participant_id: str | None, online: bool) -> Participant | None:
        """更新参与者在线状态；未知工作空间或参与者返回 None。"""
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            return None
        participant = workspace.find_participant(participant_id)
        if participant is None:
            return None
        participant.is_online = online
        participant.last_seen = utc_now()
        return participant
