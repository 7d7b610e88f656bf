"""领域模型导出集合。"""

from protolab_api.models.base import DomainModel, new_id, utc_now
from protolab_api.models.enums import (
    ChangeType,
    CollabEventType,
    DocumentType,
    ParticipantRole,
    WorkspaceStatus,
    WorkspaceType,
)
from protolab_api.models.workspace import Comment, DocumentChange, Participant, Workspace, WorkspaceDocument

__all__ = [
    "ChangeType",
    "CollabEventType",
    "Comment",
    "DocumentChange",
    "DocumentType",
    "DomainModel",
    "Participant",
    "ParticipantRole",
    "Workspace",
    "WorkspaceDocument",
    "WorkspaceStatus",
    "WorkspaceType",
    "new_id",
    "utc_now",
]
