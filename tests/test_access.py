"""Access resolver: pure decision rules and database-backed visibility."""

from __future__ import annotations

import pytest

from tasklane.models.project import Project, ProjectMember
from tasklane.models.task import Task
from tasklane.models.user import UserRole
from tasklane.services.access import (
    AccessLevel,
    Identity,
    accessible_workspace_ids,
    can_access_workspace,
    can_assign_responsible,
    get_visible_project,
    get_visible_task,
    get_visible_workspace,
    project_access,
    require_admin,
    require_identity,
    require_task_delete,
    resolve_access_level,
    task_access,
)
from tasklane.services.errors import AccessDeniedError, NotFoundError, UnauthenticatedError

# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------


class TestResolveAccessLevel:
    def test_workspace_owner_wins(self):
        assert resolve_access_level(1, 1, resource_owner_id=1, is_member=True) == (
            AccessLevel.WORKSPACE_OWNER
        )

    def test_resource_owner(self):
        assert resolve_access_level(2, 1, resource_owner_id=2) == AccessLevel.RESOURCE_OWNER

    def test_member(self):
        assert resolve_access_level(3, 1, resource_owner_id=2, is_member=True) == AccessLevel.MEMBER

    def test_unrelated(self):
        assert resolve_access_level(4, 1, resource_owner_id=2) == AccessLevel.NONE

    def test_workspace_without_owner_grants_nothing(self):
        assert resolve_access_level(4, None) == AccessLevel.NONE

    def test_levels_are_ordered(self):
        assert (
            AccessLevel.NONE
            < AccessLevel.MEMBER
            < AccessLevel.RESOURCE_OWNER
            < AccessLevel.WORKSPACE_OWNER
        )


class TestCanAssignResponsible:
    owner = Identity(user_id=1, name="Olivia")
    member = Identity(user_id=2, name="Marcus")

    def test_owner_assigns_anyone(self):
        assert can_assign_responsible(self.owner, 1, "Marcus", None)

    def test_owner_clears(self):
        assert can_assign_responsible(self.owner, 1, None, 2)

    def test_member_assigns_self(self):
        assert can_assign_responsible(self.member, 1, "Marcus", None)

    def test_member_cannot_assign_someone_else(self):
        assert not can_assign_responsible(self.member, 1, "SomeoneElse", None)

    def test_member_clears_own_assignment(self):
        assert can_assign_responsible(self.member, 1, None, 2)

    def test_member_cannot_clear_someone_elses_assignment(self):
        assert not can_assign_responsible(self.member, 1, None, 1)

    def test_nameless_identity_cannot_self_assign_empty_name(self):
        nameless = Identity(user_id=5, name="")
        assert not can_assign_responsible(nameless, 1, "", None)

    def test_surrounding_whitespace_is_ignored(self):
        padded = Identity(user_id=6, name=" Padded ")
        assert can_assign_responsible(padded, 1, "Padded", None)
        assert can_assign_responsible(self.member, 1, "  Marcus ", None)


def test_require_identity():
    with pytest.raises(UnauthenticatedError):
        require_identity(None)
    identity = Identity(user_id=1)
    assert require_identity(identity) is identity


def test_require_admin():
    require_admin(Identity(user_id=1, role=UserRole.ADMIN.value))
    with pytest.raises(AccessDeniedError):
        require_admin(Identity(user_id=1, role=UserRole.USER.value))


# ---------------------------------------------------------------------------
# Database-backed visibility
# ---------------------------------------------------------------------------


def _project(db, owner_user, name="Launch") -> Project:
    project = Project(workspace_id=owner_user.workspace_id, user_id=owner_user.id, name=name)
    db.add(project)
    db.commit()
    return project


def _task(db, creator, workspace_id, project_id=None, title="Write docs") -> Task:
    task = Task(
        workspace_id=workspace_id,
        project_id=project_id,
        user_id=creator.id,
        title=title,
        status="ACTIVE",
        priority=0,
    )
    db.add(task)
    db.commit()
    return task


class TestWorkspaceVisibility:
    def test_owner_and_member_see_workspace(self, db, owner, member, outsider):
        workspace = owner.workspace
        assert can_access_workspace(db, Identity.from_user(owner), workspace)
        assert can_access_workspace(db, Identity.from_user(member), workspace)
        assert not can_access_workspace(db, Identity.from_user(outsider), workspace)

    def test_hidden_workspace_is_not_found(self, db, owner, outsider):
        with pytest.raises(NotFoundError):
            get_visible_workspace(db, Identity.from_user(outsider), owner.workspace_id)

    def test_missing_workspace_is_not_found(self, db, owner):
        with pytest.raises(NotFoundError):
            get_visible_workspace(db, Identity.from_user(owner), 9999)

    def test_accessible_ids(self, db, owner, member, outsider):
        assert accessible_workspace_ids(db, Identity.from_user(member)) == sorted(
            [member.workspace_id, owner.workspace_id]
        )
        assert accessible_workspace_ids(db, Identity.from_user(outsider)) == [
            outsider.workspace_id
        ]

    def test_user_without_workspace_has_empty_set(self, db):
        assert accessible_workspace_ids(db, Identity(user_id=12345)) == []


class TestProjectAndTaskVisibility:
    def test_project_levels(self, db, owner, member, outsider):
        project = _project(db, owner)
        assert project_access(db, Identity.from_user(owner), project) == (
            AccessLevel.WORKSPACE_OWNER
        )
        assert project_access(db, Identity.from_user(member), project) == AccessLevel.MEMBER
        assert project_access(db, Identity.from_user(outsider), project) == AccessLevel.NONE

    def test_project_grant_gives_read_access(self, db, owner, outsider):
        project = _project(db, owner)
        db.add(ProjectMember(project_id=project.id, user_id=outsider.id))
        db.commit()
        assert get_visible_project(db, Identity.from_user(outsider), project.id).id == project.id

    def test_hidden_project_is_not_found(self, db, owner, outsider):
        project = _project(db, owner)
        with pytest.raises(NotFoundError):
            get_visible_project(db, Identity.from_user(outsider), project.id)

    def test_task_created_by_member_is_resource_owned(self, db, owner, member):
        task = _task(db, member, owner.workspace_id)
        assert task_access(db, Identity.from_user(member), task) == AccessLevel.RESOURCE_OWNER
        assert task_access(db, Identity.from_user(owner), task) == AccessLevel.WORKSPACE_OWNER

    def test_hidden_task_is_not_found(self, db, owner, outsider):
        task = _task(db, owner, owner.workspace_id)
        with pytest.raises(NotFoundError):
            get_visible_task(db, Identity.from_user(outsider), task.id)

    def test_task_delete_rules(self, db, owner, member, make_user, add_member):
        other = make_user("Nadia")
        add_member(owner, other)
        task = _task(db, member, owner.workspace_id)
        require_task_delete(Identity.from_user(member), task)
        require_task_delete(Identity.from_user(owner), task)
        with pytest.raises(AccessDeniedError):
            require_task_delete(Identity.from_user(other), task)
