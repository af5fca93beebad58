"""Model-level constraints enforced by the database."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from tasklane.models.task import Task, TaskStatus
from tasklane.models.team_member import TeamMember
from tasklane.models.workspace_member import WorkspaceMember


def _task(owner, **fields) -> Task:
    return Task(workspace_id=owner.workspace_id, user_id=owner.id, title="t", **fields)


class TestTaskConstraints:
    def test_completed_requires_completed_at(self, db, owner):
        db.add(_task(owner, status=TaskStatus.COMPLETED.value))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_completed_at_requires_completed_status(self, db, owner):
        db.add(_task(owner, status=TaskStatus.ACTIVE.value, completed_at=datetime.now(UTC)))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_consistent_completed_task_is_stored(self, db, owner):
        task = _task(owner, status=TaskStatus.COMPLETED.value, completed_at=datetime.now(UTC))
        db.add(task)
        db.commit()
        assert task.id is not None

    def test_priority_out_of_range(self, db, owner):
        db.add(_task(owner, priority=7))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_defaults(self, db, owner):
        task = _task(owner)
        db.add(task)
        db.commit()
        assert task.status == "ACTIVE"
        assert task.priority == 0
        assert task.completed_at is None


class TestUniquePairs:
    def test_workspace_member_pair_unique(self, db, owner, member):
        db.add(WorkspaceMember(workspace_id=owner.workspace_id, user_id=member.id))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_team_member_pair_unique(self, db, owner, outsider):
        db.add(TeamMember(admin_id=owner.id, user_id=outsider.id))
        db.commit()
        db.add(TeamMember(admin_id=owner.id, user_id=outsider.id))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
