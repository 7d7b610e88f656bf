"""文档修改与评论跟踪。

修改流程为“提交 → 审核 → 应用”：
1. 提交修改时仅记录，版本号 +1，内容不变。
2. 审核只能进行一次；通过时才把修改应用到文档内容。
3. 评论与修改审核状态相互独立。
"""

import logging
from typing import Any

from protolab_api.exceptions import ConflictError, NotFoundError
from protolab_api.models.base import new_id, utc_now
from protolab_api.models.enums import ChangeType
from protolab_api.models.workspace import Comment, DocumentChange
from protolab_api.services.workspace_store import WorkspaceStore, coerce_enum

logger = logging.getLogger("protolab_api.changes")


def apply_change(content: Any, change: DocumentChange) -> Any:
    """将修改应用到文档内容并返回新内容。

    字符串（或空内容）按纯文本处理，位置会被限制在 `[0, len]` 区间；
    其他结构化内容保持原样。
    """
    if content is None:
        content = ""
    if not isinstance(content, str):
        logger.warning(
            "structured content left unchanged change=%s type=%s content_type=%s",
            change.id,
            change.type,
            type(content).__name__,
        )
        return content

    position = max(0, min(change.position, len(content)))
    span = len(change.content)

    if change.type == ChangeType.INSERT:
        return content[:position] + change.content + content[position:]
    if change.type == ChangeType.DELETE:
        return content[:position] + content[position + span :]
    if change.type == ChangeType.REPLACE:
        return content[:position] + change.content + content[position + span :]
    # 纯文本无法表达格式，格式修改不改变文本。
    return content


class ChangeTracker:
    """管理文档修改、评论与审核。"""

    def __init__(self, store: WorkspaceStore) -> None:
        self.store = store

    def record_change(
        self,
        workspace_id: str,
        document_id: str,
        type: ChangeType | str,
        position: int,
        content: str,
        user_id: str | None,
        user_name: str | None,
        *,
        expected_version: int | None = None,
    ) -> DocumentChange:
        """记录待审核修改，文档版本 +1。

        传入 `expected_version` 时先做版本比对，不一致则拒绝写入。
        """
        workspace, document = self.store.get_document(workspace_id, document_id)
        change_type = coerce_enum(ChangeType, type, field="change type")
        if expected_version is not None and expected_version != document.version:
            raise ConflictError("Document version mismatch")

        now = utc_now()
        change = DocumentChange(
            id=new_id("change"),
            user_id=user_id,
            user_name=user_name,
            type=change_type,
            position=position,
            content=content or "",
            timestamp=now,
            approved=False,
        )
        document.changes.append(change)
        document.last_edited_by = user_id or document.last_edited_by
        document.last_edited_at = now
        document.version += 1
        workspace.touch()
        logger.info(
            "change recorded workspace=%s document=%s change=%s version=%s",
            workspace.id,
            document.id,
            change.id,
            document.version,
        )
        return change

    def add_comment(
        self,
        workspace_id: str,
        document_id: str,
        content: str,
        position: int,
        user_id: str | None,
        user_name: str | None,
    ) -> Comment:
        """追加顶层评论。"""
        workspace, document = self.store.get_document(workspace_id, document_id)
        comment = Comment(
            id=new_id("comment"),
            user_id=user_id,
            user_name=user_name,
            content=content or "",
            position=position,
            resolved=False,
            replies=[],
            timestamp=utc_now(),
        )
        document.comments.append(comment)
        workspace.touch()
        logger.info("comment added workspace=%s document=%s comment=%s", workspace.id, document.id, comment.id)
        return comment

    def _get_comment(self, workspace_id: str, document_id: str, comment_id: str):
        workspace, document = self.store.get_document(workspace_id, document_id)
        comment = document.find_comment(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return workspace, document, comment

    def reply_to_comment(
        self,
        workspace_id: str,
        document_id: str,
        comment_id: str,
        content: str,
        user_id: str | None,
        user_name: str | None,
    ) -> Comment:
        """回复顶层评论，回复位置沿用父评论位置。"""
        workspace, _document, parent = self._get_comment(workspace_id, document_id, comment_id)
        reply = Comment(
            id=new_id("comment"),
            user_id=user_id,
            user_name=user_name,
            content=content or "",
            position=parent.position,
            resolved=False,
            replies=[],
            timestamp=utc_now(),
        )
        parent.replies.append(reply)
        workspace.touch()
        return reply

    def resolve_comment(
        self,
        workspace_id: str,
        document_id: str,
        comment_id: str,
        resolved: bool = True,
    ) -> Comment:
        """标记评论已解决或重新打开。"""
        workspace, _document, comment = self._get_comment(workspace_id, document_id, comment_id)
        comment.resolved = resolved
        workspace.touch()
        return comment

    def review_change(
        self,
        workspace_id: str,
        document_id: str,
        change_id: str,
        approved: bool,
        reviewer_id: str | None,
        reviewer_name: str | None = None,
    ) -> DocumentChange:
        """审核修改；通过时应用到文档内容。"""
        workspace, document = self.store.get_document(workspace_id, document_id)
        change = document.find_change(change_id)
        if change is None:
            raise NotFoundError("Change not found")
        if change.is_reviewed:
            raise ConflictError("Change already reviewed")

        # 先计算新内容，避免应用失败时留下已审核但未应用的修改。
        new_content = apply_change(document.content, change) if approved else document.content

        now = utc_now()
        change.approved = approved
        change.reviewed_by = reviewer_id
        change.reviewed_at = now
        if approved:
            document.content = new_content
            document.last_edited_at = now
        workspace.touch()
        logger.info(
            "change reviewed workspace=%s document=%s change=%s approved=%s reviewer=%s",
            workspace.id,
            document.id,
            change.id,
            approved,
            reviewer_name or reviewer_id,
        )
        return change
