"""服务层能力导出集合。"""

from protolab_api.services import events
from protolab_api.services.broadcaster import Broadcaster, is_open
from protolab_api.services.change_tracker import ChangeTracker, apply_change
from protolab_api.services.permissions import (
    DEFAULT_ROLE_ACTIONS,
    CollabAction,
    ensure_participant_action,
    role_allows,
    role_permission_matrix,
)
from protolab_api.services.workspace_store import WorkspaceStore

__all__ = [
    "events",
    "Broadcaster",
    "is_open",
    "ChangeTracker",
    "apply_change",
    "WorkspaceStore",
    "CollabAction",
    "DEFAULT_ROLE_ACTIONS",
    "ensure_participant_action",
    "role_allows",
    "role_permission_matrix",
]
