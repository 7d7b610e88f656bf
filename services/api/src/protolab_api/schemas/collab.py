"""协作工作空间相关请求结构。"""

from typing import Any

from pydantic import Field

from protolab_api.models.enums import ChangeType, DocumentType, ParticipantRole, WorkspaceStatus, WorkspaceType
from protolab_api.schemas.common import BaseSchema


class ParticipantCreateRequest(BaseSchema):
    """创建工作空间时附带的参与者。"""

    name: str = Field(default="", max_length=128, description="参与者名称。", examples=["Amina Otieno"])
    email: str = Field(default="", max_length=256, description="参与者邮箱。", examples=["amina@example.com"])
    role: ParticipantRole = Field(default=ParticipantRole.VIEWER, description="参与者角色。")
    avatar: str | None = Field(default=None, description="头像地址。")


class WorkspaceCreateRequest(BaseSchema):
    """创建工作空间请求体。

    名称长度在服务层校验，以返回统一的错误信息。
    """

    name: str | None = Field(default=None, description="工作空间名称，至少 3 个字符。", examples=["Grant Proposal Q2"])
    type: WorkspaceType = Field(description="工作空间文档类别。", examples=["proposal"])
    participants: list[ParticipantCreateRequest] = Field(default_factory=list, description="初始参与者列表。")


class WorkspaceUpdateRequest(BaseSchema):
    """更新工作空间状态请求体。"""

    status: WorkspaceStatus = Field(description="新的工作空间状态。", examples=["completed"])
    user_id: str | None = Field(default=None, description="操作者参与者 ID。")


class DocumentCreateRequest(BaseSchema):
    """新增文档请求体。"""

    name: str = Field(default="", max_length=256, description="文档名称。", examples=["Draft v1"])
    type: DocumentType = Field(default=DocumentType.DRAFT, description="文档阶段。")
    content: Any = Field(default=None, description="文档内容，纯文本或任意 JSON。")
    user_id: str | None = Field(default=None, description="创建者参与者 ID。")


class ChangeCreateRequest(BaseSchema):
    """提交文档修改请求体。"""

    type: ChangeType = Field(description="修改类型。", examples=["insert"])
    position: int = Field(default=0, ge=0, description="修改起始位置。")
    content: str = Field(default="", description="修改文本。", examples=["Hello"])
    user_id: str | None = Field(default=None, description="提交者 ID。")
    user_name: str | None = Field(default=None, description="提交者名称。")
    expected_version: int | None = Field(
        default=None,
        ge=1,
        description="提交者最后看到的文档版本；传入时版本不一致将被拒绝。",
    )


class CommentCreateRequest(BaseSchema):
    """新增评论请求体。"""

    content: str = Field(default="", description="评论内容，允许为空。")
    position: int = Field(default=0, ge=0, description="评论锚点位置。")
    user_id: str | None = Field(default=None, description="评论者 ID。")
    user_name: str | None = Field(default=None, description="评论者名称。")


class CommentReplyRequest(BaseSchema):
    """回复评论请求体。"""

    content: str = Field(default="", description="回复内容，允许为空。")
    user_id: str | None = Field(default=None, description="回复者 ID。")
    user_name: str | None = Field(default=None, description="回复者名称。")


class CommentResolveRequest(BaseSchema):
    """解决/重新打开评论请求体。"""

    resolved: bool = Field(default=True, description="是否标记为已解决。")
    user_id: str | None = Field(default=None, description="操作者 ID。")


class ChangeReviewRequest(BaseSchema):
    """审核修改请求体。"""

    approved: bool = Field(description="是否通过。")
    reviewer_id: str | None = Field(default=None, description="审核者 ID。")
    reviewer_name: str | None = Field(default=None, description="审核者名称。")
