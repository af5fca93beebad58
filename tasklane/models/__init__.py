"""SQLAlchemy models."""

from tasklane.models.activity import Activity, ActivityType
from tasklane.models.comment import Comment
from tasklane.models.filter_preset import FilterPreset
from tasklane.models.notification import Notification, NotificationType
from tasklane.models.project import Project, ProjectMember
from tasklane.models.task import Task, TaskStatus
from tasklane.models.team_member import TeamMember
from tasklane.models.user import User, UserRole
from tasklane.models.workspace import Workspace
from tasklane.models.workspace_invitation import InvitationStatus, WorkspaceInvitation
from tasklane.models.workspace_member import MemberRole, WorkspaceMember

__all__ = [
    "Activity",
    "ActivityType",
    "Comment",
    "FilterPreset",
    "InvitationStatus",
    "MemberRole",
    "Notification",
    "NotificationType",
    "Project",
    "ProjectMember",
    "Task",
    "TaskStatus",
    "TeamMember",
    "User",
    "UserRole",
    "Workspace",
    "WorkspaceInvitation",
    "WorkspaceMember",
]
