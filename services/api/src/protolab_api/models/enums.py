"""领域枚举定义。"""

from enum import StrEnum


class WorkspaceType(StrEnum):
    """工作空间承载的文档类别。"""

    PROPOSAL = "proposal"  # 项目/资助申请书。
    BUSINESS_PLAN = "business_plan"  # 商业计划书。
    RESUME = "resume"  # 个人简历。
    PITCH_DECK = "pitch_deck"  # 路演演示文稿。


class WorkspaceStatus(StrEnum):
    """工作空间状态。"""

    ACTIVE = "active"  # 协作进行中。
    COMPLETED = "completed"  # 协作已完成。
    ARCHIVED = "archived"  # 已归档。


class ParticipantRole(StrEnum):
    """参与者角色。"""

    OWNER = "owner"  # 工作空间所有者，具备全部协作权限。
    EDITOR = "editor"  # 可新增文档并提交修改。
    REVIEWER = "reviewer"  # 可审核修改并发表评论。
    VIEWER = "viewer"  # 只读参与者，仅可评论。


class DocumentType(StrEnum):
    """工作空间文档阶段。"""

    TEMPLATE = "template"  # 模板。
    DRAFT = "draft"  # 草稿。
    FINAL = "final"  # 定稿。


class ChangeType(StrEnum):
    """文档修改类型。"""

    INSERT = "insert"  # 在指定位置插入文本。
    DELETE = "delete"  # 从指定位置删除文本。
    FORMAT = "format"  # 格式调整，不改变文本。
    REPLACE = "replace"  # 覆盖指定位置的文本。


class CollabEventType(StrEnum):
    """实时推送事件类型。"""

    DOCUMENT_ADDED = "document_added"
    DOCUMENT_CHANGED = "document_changed"
    COMMENT_ADDED = "comment_added"
    COMMENT_REPLIED = "comment_replied"
    COMMENT_RESOLVED = "comment_resolved"
    CHANGE_REVIEWED = "change_reviewed"
    WORKSPACE_UPDATED = "workspace_updated"
    PRESENCE_CHANGED = "presence_changed"
