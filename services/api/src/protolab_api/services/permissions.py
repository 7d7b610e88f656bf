"""参与者角色权限矩阵。"""

from enum import StrEnum

from protolab_api.exceptions import PermissionDeniedError
from protolab_api.models.enums import ParticipantRole
from protolab_api.models.workspace import Participant, Workspace


class CollabAction(StrEnum):
    """协作写操作鉴权动作定义。"""

    WORKSPACE_UPDATE = "collab.workspace.update"
    DOCUMENT_ADD = "collab.document.add"
    CHANGE_PROPOSE = "collab.change.propose"
    CHANGE_REVIEW = "collab.change.review"
    COMMENT_WRITE = "collab.comment.write"


DEFAULT_ROLE_ACTIONS: dict[ParticipantRole, frozenset[str]] = {
    ParticipantRole.OWNER: frozenset(action.value for action in CollabAction),
    ParticipantRole.EDITOR: frozenset(
        {
            CollabAction.DOCUMENT_ADD.value,
            CollabAction.CHANGE_PROPOSE.value,
            CollabAction.COMMENT_WRITE.value,
        }
    ),
    ParticipantRole.REVIEWER: frozenset(
        {
            CollabAction.CHANGE_REVIEW.value,
            CollabAction.COMMENT_WRITE.value,
        }
    ),
    ParticipantRole.VIEWER: frozenset({CollabAction.COMMENT_WRITE.value}),
}


def role_allows(role: ParticipantRole | str, action: CollabAction | str) -> bool:
    """判断角色是否具备动作权限。"""
    try:
        normalized_role = ParticipantRole(role)
    except ValueError:
        return False
    return str(action) in DEFAULT_ROLE_ACTIONS.get(normalized_role, frozenset())


def role_permission_matrix() -> dict[str, list[str]]:
    """返回角色到动作的完整矩阵，便于展示。"""
    return {role.value: sorted(actions) for role, actions in DEFAULT_ROLE_ACTIONS.items()}


def ensure_participant_action(
    workspace: Workspace,
    *,
    actor_id: str | None,
    action: CollabAction,
    enforce: bool = True,
) -> Participant | None:
    """校验操作者角色是否允许执行动作。

    仅当操作者是该工作空间的参与者时才按角色拦截；
    非参与者 ID 不做限制。
    """
    participant = workspace.find_participant(actor_id)
    if not enforce or participant is None:
        return participant
    if not role_allows(participant.role, action):
        raise PermissionDeniedError(f"Role '{participant.role}' is not allowed to perform {action}")
    return participant
