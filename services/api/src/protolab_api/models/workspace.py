"""协作工作空间模型。

全部状态仅保存在进程内存中，生命周期与进程一致。
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from protolab_api.models.base import DomainModel, utc_now
from protolab_api.models.enums import ChangeType, DocumentType, ParticipantRole, WorkspaceStatus, WorkspaceType


class Participant(DomainModel):
    """工作空间参与者。"""

    id: str
    name: str = ""
    email: str = ""
    # 角色仅在开启角色校验时参与写操作授权。
    role: ParticipantRole = ParticipantRole.VIEWER
    avatar: str | None = None
    is_online: bool = False
    last_seen: datetime = Field(default_factory=utc_now)


class DocumentChange(DomainModel):
    """待审核的文档修改。"""

    id: str
    user_id: str | None = None
    user_name: str | None = None
    type: ChangeType
    position: int = 0
    content: str = ""
    timestamp: datetime = Field(default_factory=utc_now)
    approved: bool = False
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None

    @property
    def is_reviewed(self) -> bool:
        """是否已完成审核（通过或驳回）。"""
        return self.reviewed_at is not None


class Comment(DomainModel):
    """文档评论，回复以嵌套评论保存。"""

    id: str
    user_id: str | None = None
    user_name: str | None = None
    content: str = ""
    position: int = 0
    resolved: bool = False
    replies: list["Comment"] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)


class WorkspaceDocument(DomainModel):
    """工作空间内文档，仅归属于一个工作空间。"""

    id: str
    name: str = ""
    type: DocumentType = DocumentType.DRAFT
    # 内容为不透明负载；字符串按纯文本处理修改。
    content: Any = None
    version: int = 1
    changes: list[DocumentChange] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    last_edited_by: str = "current_user"
    last_edited_at: datetime = Field(default_factory=utc_now)

    def find_change(self, change_id: str) -> DocumentChange | None:
        """按 ID 查找修改记录。"""
        return next((change for change in self.changes if change.id == change_id), None)

    def find_comment(self, comment_id: str) -> Comment | None:
        """按 ID 查找顶层评论。"""
        return next((comment for comment in self.comments if comment.id == comment_id), None)


class Workspace(DomainModel):
    """协作工作空间。"""

    id: str
    name: str
    type: WorkspaceType
    participants: list[Participant] = Field(default_factory=list)
    documents: list[WorkspaceDocument] = Field(default_factory=list)
    status: WorkspaceStatus = WorkspaceStatus.ACTIVE
    created_at: datetime = Field(default_factory=utc_now)
    last_modified: datetime = Field(default_factory=utc_now)

    def find_document(self, document_id: str) -> WorkspaceDocument | None:
        """按 ID 查找文档。"""
        return next((document for document in self.documents if document.id == document_id), None)

    def find_participant(self, participant_id: str | None) -> Participant | None:
        """按 ID 查找参与者。"""
        if not participant_id:
            return None
        return next((participant for participant in self.participants if participant.id == participant_id), None)

    def touch(self) -> datetime:
        """刷新最后修改时间。"""
        self.last_modified = utc_now()
        return self.last_modified
