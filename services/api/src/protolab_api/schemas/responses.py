"""接口响应数据结构定义。

成功响应统一为 `{success: true, request_id, <资源键>: ...}`。
"""

from pydantic import BaseModel, ConfigDict, Field

from protolab_api.models.workspace import Comment, DocumentChange, Workspace, WorkspaceDocument


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="请求是否成功。")
    request_id: str | None = Field(default=None, description="服务端生成的请求追踪 ID。")


class WorkspaceCreatedResponse(_Envelope):
    workspace: Workspace
    join_url: str = Field(alias="joinUrl", description="前端加入工作空间的地址。")


class WorkspaceResponse(_Envelope):
    workspace: Workspace


class WorkspaceListResponse(_Envelope):
    workspaces: list[Workspace]


class DocumentResponse(_Envelope):
    document: WorkspaceDocument


class ChangeResponse(_Envelope):
    change: DocumentChange


class CommentResponse(_Envelope):
    comment: Comment


class HealthResponse(_Envelope):
    status: str = Field(description="服务状态。")
    workspaces: int | None = Field(default=None, description="当前内存中的工作空间数量。")
