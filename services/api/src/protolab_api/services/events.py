"""实时事件信封构造。

所有事件结构为 `{type, ...payload}`，负载字段使用驼峰命名。
"""

from typing import Any

from protolab_api.models.enums import CollabEventType
from protolab_api.models.workspace import Comment, DocumentChange, Participant, Workspace, WorkspaceDocument


def document_added(document: WorkspaceDocument) -> dict[str, Any]:
    return {"type": CollabEventType.DOCUMENT_ADDED.value, "document": document.to_wire()}


def document_changed(document: WorkspaceDocument, change: DocumentChange) -> dict[str, Any]:
    return {
        "type": CollabEventType.DOCUMENT_CHANGED.value,
        "documentId": document.id,
        "version": document.version,
        "change": change.to_wire(),
    }


def comment_added(document: WorkspaceDocument, comment: Comment) -> dict[str, Any]:
    return {
        "type": CollabEventType.COMMENT_ADDED.value,
        "documentId": document.id,
        "comment": comment.to_wire(),
    }


def comment_replied(document: WorkspaceDocument, parent_id: str, reply: Comment) -> dict[str, Any]:
    return {
        "type": CollabEventType.COMMENT_REPLIED.value,
        "documentId": document.id,
        "commentId": parent_id,
        "reply": reply.to_wire(),
    }


def comment_resolved(document: WorkspaceDocument, comment: Comment) -> dict[str, Any]:
    return {
        "type": CollabEventType.COMMENT_RESOLVED.value,
        "documentId": document.id,
        "commentId": comment.id,
        "resolved": comment.resolved,
    }


def change_reviewed(document: WorkspaceDocument, change: DocumentChange, reviewer_name: str | None) -> dict[str, Any]:
    return {
        "type": CollabEventType.CHANGE_REVIEWED.value,
        "documentId": document.id,
        "changeId": change.id,
        "approved": change.approved,
        "reviewerName": reviewer_name,
    }


def workspace_updated(workspace: Workspace) -> dict[str, Any]:
    return {
        "type": CollabEventType.WORKSPACE_UPDATED.value,
        "workspaceId": workspace.id,
        "status": workspace.status.value,
        "lastModified": workspace.last_modified.isoformat(),
    }


def presence_changed(workspace_id: str, participant: Participant) -> dict[str, Any]:
    return {
        "type": CollabEventType.PRESENCE_CHANGED.value,
        "workspaceId": workspace_id,
        "participantId": participant.id,
        "isOnline": participant.is_online,
        "lastSeen": participant.last_seen.isoformat(),
    }
