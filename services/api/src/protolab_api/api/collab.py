"""协作工作空间接口。

所有写接口先同步完成内存状态修改，实时事件在响应发出后由后台任务推送；
推送失败不影响接口结果，接口响应是唯一可信结果。
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status

from protolab_api.dependencies import CollabServices
from protolab_api.exceptions import NotFoundError
from protolab_api.schemas.collab import (
    ChangeCreateRequest,
    ChangeReviewRequest,
    CommentCreateRequest,
    CommentReplyRequest,
    CommentResolveRequest,
    DocumentCreateRequest,
    WorkspaceCreateRequest,
    WorkspaceUpdateRequest,
)
from protolab_api.schemas.common import ErrorResponse
from protolab_api.schemas.responses import (
    ChangeResponse,
    CommentResponse,
    DocumentResponse,
    WorkspaceCreatedResponse,
    WorkspaceListResponse,
    WorkspaceResponse,
)
from protolab_api.services import events
from protolab_api.services.permissions import CollabAction, ensure_participant_action
from protolab_api.utils.response import success

router = APIRouter(prefix="/collab", tags=["collab"])

_NOT_FOUND = {404: {"model": ErrorResponse}}
_WRITE_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

WorkspaceId = Annotated[str, Path(description="工作空间 ID。")]
DocumentId = Annotated[str, Path(description="文档 ID。")]


def _authorize(
    svc: CollabServices,
    workspace_id: str,
    actor_id: str | None,
    action: CollabAction,
    *,
    document_id: str | None = None,
    change_id: str | None = None,
    comment_id: str | None = None,
) -> None:
    """按参与者角色校验写操作。

    先解析请求引用的工作空间、文档、修改与评论，任一不存在时抛出未找到，
    再做角色校验。
    """
    if document_id is None:
        workspace = svc.store.get_workspace(workspace_id)
    else:
        workspace, document = svc.store.get_document(workspace_id, document_id)
        if change_id is not None and document.find_change(change_id) is None:
            raise NotFoundError("Change not found")
        if comment_id is not None and document.find_comment(comment_id) is None:
            raise NotFoundError("Comment not found")
    ensure_participant_action(
        workspace,
        actor_id=actor_id,
        action=action,
        enforce=svc.settings.collab_enforce_roles,
    )


@router.post(
    "/workspace",
    summary="创建工作空间",
    description="创建协作工作空间；参与者会被分配新 ID 并默认离线。",
    status_code=status.HTTP_200_OK,
    response_model=WorkspaceCreatedResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_workspace(payload: WorkspaceCreateRequest, request: Request, svc: CollabServices = Depends()):
    """创建工作空间并返回加入地址。"""
    workspace = svc.store.create_workspace(
        payload.name,
        payload.type,
        [participant.model_dump() for participant in payload.participants],
    )
    return success(
        request,
        workspace=workspace,
        joinUrl=f"{svc.settings.collab_join_url_prefix}{workspace.id}",
    )


@router.get(
    "/workspaces",
    summary="查询工作空间列表",
    description="返回进程内全部工作空间，不分页、不过滤。",
    status_code=status.HTTP_200_OK,
    response_model=WorkspaceListResponse,
)
async def list_workspaces(request: Request, svc: CollabServices = Depends()):
    """返回全部工作空间。"""
    return success(request, workspaces=svc.store.list_workspaces())


@router.get(
    "/workspace/{workspace_id}",
    summary="查询工作空间详情",
    status_code=status.HTTP_200_OK,
    response_model=WorkspaceResponse,
    responses=_NOT_FOUND,
)
async def get_workspace(request: Request, workspace_id: WorkspaceId, svc: CollabServices = Depends()):
    """按 ID 返回工作空间。"""
    return success(request, workspace=svc.store.get_workspace(workspace_id))


@router.patch(
    "/workspace/{workspace_id}",
    summary="更新工作空间状态",
    description="将工作空间标记为 active/completed/archived。",
    status_code=status.HTTP_200_OK,
    response_model=WorkspaceResponse,
    responses=_WRITE_ERRORS,
)
async def update_workspace(
    payload: WorkspaceUpdateRequest,
    request: Request,
    workspace_id: WorkspaceId,
    svc: CollabServices = Depends(),
):
    """更新状态并推送 `workspace_updated`。"""
    _authorize(svc, workspace_id, payload.user_id, CollabAction.WORKSPACE_UPDATE)
    workspace = svc.store.update_workspace_status(workspace_id, payload.status)
    svc.announce(workspace.id, events.workspace_updated(workspace))
    return success(request, workspace=workspace)


@router.post(
    "/workspace/{workspace_id}/document",
    summary="新增文档",
    description="向工作空间追加文档，初始版本为 1。",
    status_code=status.HTTP_200_OK,
    response_model=DocumentResponse,
    responses=_WRITE_ERRORS,
)
async def add_document(
    payload: DocumentCreateRequest,
    request: Request,
    workspace_id: WorkspaceId,
    svc: CollabServices = Depends(),
):
    """新增文档并推送 `document_added`。"""
    _authorize(svc, workspace_id, payload.user_id, CollabAction.DOCUMENT_ADD)
    document = svc.store.add_document(
        workspace_id,
        payload.name,
        payload.type,
        payload.content,
        edited_by=payload.user_id,
    )
    svc.announce(workspace_id, events.document_added(document))
    return success(request, document=document)


@router.post(
    "/workspace/{workspace_id}/document/{document_id}/change",
    summary="提交文档修改",
    description="记录待审核修改，文档版本 +1；传入 expectedVersion 时做版本比对。",
    status_code=status.HTTP_200_OK,
    response_model=ChangeResponse,
    responses={**_WRITE_ERRORS, 409: {"model": ErrorResponse}},
)
async def record_change(
    payload: ChangeCreateRequest,
    request: Request,
    workspace_id: WorkspaceId,
    document_id: DocumentId,
    svc: CollabServices = Depends(),
):
    """记录修改并推送 `document_changed`。"""
    _authorize(svc, workspace_id, payload.user_id, CollabAction.CHANGE_PROPOSE, document_id=document_id)
    change = svc.tracker.record_change(
        workspace_id,
        document_id,
        payload.type,
        payload.position,
        payload.content,
        payload.user_id,
        payload.user_name,
        expected_version=payload.expected_version,
    )
    _, document = svc.store.get_document(workspace_id, document_id)
    svc.announce(workspace_id, events.document_changed(document, change))
    return success(request, change=change)


@router.post(
    "/workspace/{workspace_id}/document/{document_id}/comment",
    summary="新增评论",
    status_code=status.HTTP_200_OK,
    response_model=CommentResponse,
    responses=_WRITE_ERRORS,
)
async def add_comment(
    payload: CommentCreateRequest,
    request: Request,
    workspace_id: WorkspaceId,
    document_id: DocumentId,
    svc: CollabServices = Depends(),
):
    """新增评论并推送 `comment_added`。"""
    _authorize(svc, workspace_id, payload.user_id, CollabAction.COMMENT_WRITE, document_id=document_id)
    comment = svc.tracker.add_comment(
        workspace_id,
        document_id,
        payload.content,
        payload.position,
        payload.user_id,
        payload.user_name,
    )
    _, document = svc.store.get_document(workspace_id, document_id)
    svc.announce(workspace_id, events.comment_added(document, comment))
    return success(request, comment=comment)


@router.post(
    "/workspace/{workspace_id}/document/{document_id}/comment/{comment_id}/reply",
    summary="回复评论",
    status_code=status.HTTP_200_OK,
    response_model=CommentResponse,
    responses=_WRITE_ERRORS,
)
async def reply_to_comment(
    payload: CommentReplyRequest,
    request: Request,
    workspace_id: WorkspaceId,
    document_id: DocumentId,
    comment_id: Annotated[str, Path(description="评论 ID。")],
    svc: CollabServices = Depends(),
):
    """追加回复并推送 `comment_replied`。"""
    _authorize(
        svc,
        workspace_id,
        payload.user_id,
        CollabAction.COMMENT_WRITE,
        document_id=document_id,
        comment_id=comment_id,
    )
    reply = svc.tracker.reply_to_comment(
        workspace_id,
        document_id,
        comment_id,
        payload.content,
        payload.user_id,
        payload.user_name,
    )
    _, document = svc.store.get_document(workspace_id, document_id)
    svc.announce(workspace_id, events.comment_replied(document, comment_id, reply))
    return success(request, comment=reply)


@router.post(
    "/workspace/{workspace_id}/document/{document_id}/comment/{comment_id}/resolve",
    summary="解决评论",
    status_code=status.HTTP_200_OK,
    response_model=CommentResponse,
    responses=_WRITE_ERRORS,
)
async def resolve_comment(
    payload: CommentResolveRequest,
    request: Request,
    workspace_id: WorkspaceId,
    document_id: DocumentId,
    comment_id: Annotated[str, Path(description="评论 ID。")],
    svc: CollabServices = Depends(),
):
    """变更评论解决状态并推送 `comment_resolved`。"""
    _authorize(
        svc,
        workspace_id,
        payload.user_id,
        CollabAction.COMMENT_WRITE,
        document_id=document_id,
        comment_id=comment_id,
    )
    comment = svc.tracker.resolve_comment(workspace_id, document_id, comment_id, payload.resolved)
    _, document = svc.store.get_document(workspace_id, document_id)
    svc.announce(workspace_id, events.comment_resolved(document, comment))
    return success(request, comment=comment)


@router.post(
    "/workspace/{workspace_id}/document/{document_id}/change/{change_id}/review",
    summary="审核文档修改",
    description="通过或驳回修改；通过时应用到文档内容。每条修改只能审核一次。",
    status_code=status.HTTP_200_OK,
    response_model=ChangeResponse,
    responses={**_WRITE_ERRORS, 409: {"model": ErrorResponse}},
)
async def review_change(
    payload: ChangeReviewRequest,
    request: Request,
    workspace_id: WorkspaceId,
    document_id: DocumentId,
    change_id: Annotated[str, Path(description="修改 ID。")],
    svc: CollabServices = Depends(),
):
    """审核修改并推送 `change_reviewed`。"""
    _authorize(
        svc,
        workspace_id,
        payload.reviewer_id,
        CollabAction.CHANGE_REVIEW,
        document_id=document_id,
        change_id=change_id,
    )
    change = svc.tracker.review_change(
        workspace_id,
        document_id,
        change_id,
        payload.approved,
        payload.reviewer_id,
        payload.reviewer_name,
    )
    _, document = svc.store.get_document(workspace_id, document_id)
    svc.announce(workspace_id, events.change_reviewed(document, change, payload.reviewer_name))
    return success(request, change=change)
