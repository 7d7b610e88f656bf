import pytest

from protolab_api.exceptions import ConflictError, NotFoundError
from protolab_api.models.workspace import DocumentChange
from protolab_api.services.change_tracker import ChangeTracker, apply_change
from protolab_api.services.workspace_store import WorkspaceStore


@pytest.fixture
def store():
    return WorkspaceStore()


@pytest.fixture
def tracker(store):
    return ChangeTracker(store)


@pytest.fixture
def seeded(store):
    workspace = store.create_workspace("Grant Proposal Q2", "proposal")
    document = store.add_document(workspace.id, "Draft v1", "draft", "world")
    return workspace, document


def _change(type: str, position: int, content: str) -> DocumentChange:
    return DocumentChange(id="change_test", type=type, position=position, content=content)


@pytest.mark.parametrize(
    ("type", "position", "content", "expected"),
    [
        ("insert", 0, "Hello ", "Hello world"),
        ("insert", 5, "!", "world!"),
        ("insert", 99, "!", "world!"),
        ("delete", 1, "or", "wld"),
        ("delete", 3, "longer than rest", "wor"),
        ("replace", 0, "W", "World"),
        ("replace", 3, "k", "workd"),
        ("format", 0, "bold", "world"),
    ],
)
def test_apply_change_plain_text(type, position, content, expected):
    assert apply_change("world", _change(type, position, content)) == expected


def test_apply_change_treats_missing_content_as_empty_text():
    assert apply_change(None, _change("insert", 3, "Hello")) == "Hello"


def test_apply_change_leaves_structured_content_untouched():
    content = {"slides": [{"title": "Problem"}]}

    assert apply_change(content, _change("insert", 0, "Hello")) is content


def test_record_change_increments_version_and_stays_pending(tracker, seeded):
    workspace, document = seeded

    first = tracker.record_change(workspace.id, document.id, "insert", 0, "Hello ", "u1", "Amina")
    second = tracker.record_change(workspace.id, document.id, "delete", 0, "w", "u2", "Kofi")

    assert document.version == 3
    assert [change.id for change in document.changes] == [first.id, second.id]
    assert first.approved is False and first.reviewed_by is None
    assert document.content == "world"
    assert document.last_edited_by == "u2"


def test_record_change_missing_document_has_no_effect(tracker, seeded):
    workspace, document = seeded

    with pytest.raises(NotFoundError):
        tracker.record_change(workspace.id, "doc_missing", "insert", 0, "x", "u1", "Amina")
    with pytest.raises(NotFoundError):
        tracker.record_change("ws_missing", document.id, "insert", 0, "x", "u1", "Amina")

    assert document.version == 1
    assert document.changes == []


def test_record_change_expected_version_mismatch(tracker, seeded):
    workspace, document = seeded
    tracker.record_change(workspace.id, document.id, "insert", 0, "a", "u1", "Amina", expected_version=1)

    with pytest.raises(ConflictError):
        tracker.record_change(workspace.id, document.id, "insert", 0, "b", "u2", "Kofi", expected_version=1)

    assert document.version == 2
    assert len(document.changes) == 1


def test_review_approved_applies_change(tracker, seeded):
    workspace, document = seeded
    change = tracker.record_change(workspace.id, document.id, "insert", 0, "Hello ", "u1", "Amina")

    reviewed = tracker.review_change(workspace.id, document.id, change.id, True, "r1", "Reviewer")

    assert reviewed.approved is True
    assert reviewed.reviewed_by == "r1"
    assert document.content == "Hello world"
    assert document.version == 2


def test_review_rejected_keeps_content(tracker, seeded):
    workspace, document = seeded
    change = tracker.record_change(workspace.id, document.id, "replace", 0, "W", "u1", "Amina")

    reviewed = tracker.review_change(workspace.id, document.id, change.id, False, "r1", "Reviewer")

    assert reviewed.approved is False
    assert reviewed.reviewed_by == "r1"
    assert document.content == "world"


def test_review_change_only_once(tracker, seeded):
    workspace, document = seeded
    change = tracker.record_change(workspace.id, document.id, "insert", 0, "Hi ", "u1", "Amina")
    tracker.review_change(workspace.id, document.id, change.id, False, "r1", "Reviewer")

    with pytest.raises(ConflictError):
        tracker.review_change(workspace.id, document.id, change.id, True, "r2", "Other")

    assert change.approved is False
    assert change.reviewed_by == "r1"
    assert document.content == "world"


def test_review_missing_change(tracker, seeded):
    workspace, document = seeded

    with pytest.raises(NotFoundError) as exc:
        tracker.review_change(workspace.id, document.id, "change_missing", True, "r1", "Reviewer")

    assert exc.value.message == "Change not found"
    assert document.content == "world"


def test_comments_replies_and_resolution(tracker, seeded):
    workspace, document = seeded

    comment = tracker.add_comment(workspace.id, document.id, "Tighten the intro", 4, "u1", "Amina")
    reply = tracker.reply_to_comment(workspace.id, document.id, comment.id, "Done", "u2", "Kofi")
    resolved = tracker.resolve_comment(workspace.id, document.id, comment.id)

    assert document.comments == [comment]
    assert comment.replies == [reply]
    assert reply.position == 4
    assert resolved.resolved is True
    # 评论不影响文档版本。
    assert document.version == 1


def test_reply_to_missing_comment(tracker, seeded):
    workspace, document = seeded

    with pytest.raises(NotFoundError) as exc:
        tracker.reply_to_comment(workspace.id, document.id, "comment_missing", "?", "u1", "Amina")

    assert exc.value.message == "Comment not found"
