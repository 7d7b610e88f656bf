import pytest

from protolab_api.exceptions import PermissionDeniedError
from protolab_api.models.enums import ParticipantRole
from protolab_api.services.permissions import (
    DEFAULT_ROLE_ACTIONS,
    CollabAction,
    ensure_participant_action,
    role_allows,
    role_permission_matrix,
)
from protolab_api.services.workspace_store import WorkspaceStore


def test_owner_has_every_action():
    assert DEFAULT_ROLE_ACTIONS[ParticipantRole.OWNER] == {action.value for action in CollabAction}


@pytest.mark.parametrize(
    ("role", "action", "allowed"),
    [
        ("editor", CollabAction.CHANGE_PROPOSE, True),
        ("editor", CollabAction.CHANGE_REVIEW, False),
        ("reviewer", CollabAction.CHANGE_REVIEW, True),
        ("reviewer", CollabAction.DOCUMENT_ADD, False),
        ("viewer", CollabAction.COMMENT_WRITE, True),
        ("viewer", CollabAction.CHANGE_PROPOSE, False),
        ("stranger", CollabAction.COMMENT_WRITE, False),
    ],
)
def test_role_allows(role, action, allowed):
    assert role_allows(role, action) is allowed


def test_every_role_can_comment():
    matrix = role_permission_matrix()

    assert set(matrix) == {role.value for role in ParticipantRole}
    assert all(CollabAction.COMMENT_WRITE.value in actions for actions in matrix.values())


def test_ensure_participant_action_gates_known_participants_only():
    store = WorkspaceStore()
    workspace = store.create_workspace("Team", "proposal", [{"name": "Viewer", "role": "viewer"}])
    viewer_id = workspace.participants[0].id

    with pytest.raises(PermissionDeniedError):
        ensure_participant_action(workspace, actor_id=viewer_id, action=CollabAction.CHANGE_REVIEW)

    assert ensure_participant_action(workspace, actor_id="someone-else", action=CollabAction.CHANGE_REVIEW) is None
    assert (
        ensure_participant_action(workspace, actor_id=viewer_id, action=CollabAction.CHANGE_REVIEW, enforce=False)
        is workspace.participants[0]
    )
