"""Admin user management and team roster."""

from __future__ import annotations

import pytest

from tasklane.models.task import Task
from tasklane.models.user import User, UserRole
from tasklane.models.workspace import Workspace
from tasklane.services.admin_service import GENERATED_PASSWORD_LENGTH, generate_password
from tests.test_constants import TEST_PASSWORD, TEST_PASSWORD_SHORT


@pytest.fixture
def admin(make_user):
    return make_user("Ada", role=UserRole.ADMIN)


def test_generate_password_length_and_randomness():
    first, second = generate_password(), generate_password()
    assert len(first) == GENERATED_PASSWORD_LENGTH
    assert first != second


class TestAdminUsers:
    def test_non_admin_forbidden(self, api_client, login_as, owner):
        login_as(owner)
        assert api_client.get("/api/admin/users").status_code == 403
        assert api_client.get("/api/team").status_code == 403

    def test_list_with_counts(self, api_client, login_as, admin, owner):
        login_as(owner)
        api_client.post("/api/projects", json={"name": "P"})
        api_client.post("/api/tasks", json={"title": "t1"})
        api_client.post("/api/tasks", json={"title": "t2"})

        login_as(admin)
        users = {u["email"]: u for u in api_client.get("/api/admin/users").json()["users"]}
        assert users["olivia@example.com"]["task_count"] == 2
        assert users["olivia@example.com"]["project_count"] == 1
        assert users["ada@example.com"]["task_count"] == 0

    def test_create_with_password(self, api_client, login_as, db, admin):
        login_as(admin)
        response = api_client.post(
            "/api/admin/users", json={"email": "New.Person@Example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["temporary_password"] is None
        assert body["user"]["email"] == "new.person@example.com"
        assert body["user"]["name"] == "new.person"
        assert body["user"]["role"] == "USER"
        created = db.query(User).filter(User.email == "new.person@example.com").one()
        assert created.workspace_id is not None
        assert created.verify_password(TEST_PASSWORD)

    def test_create_without_password_generates_one(self, api_client, login_as, db, admin):
        login_as(admin)
        response = api_client.post("/api/admin/users", json={"email": "temp@example.com"})
        body = response.json()
        assert len(body["temporary_password"]) == GENERATED_PASSWORD_LENGTH
        assert "Temporary password" in body["message"]
        created = db.query(User).filter(User.email == "temp@example.com").one()
        assert created.verify_password(body["temporary_password"])

    def test_create_duplicate_conflicts(self, api_client, login_as, admin, owner):
        login_as(admin)
        response = api_client.post(
            "/api/admin/users", json={"email": owner.email, "password": TEST_PASSWORD}
        )
        assert response.status_code == 409

    def test_update_role_and_email(self, api_client, login_as, admin, owner):
        login_as(admin)
        response = api_client.patch(
            f"/api/admin/users/{owner.id}", json={"role": "ADMIN", "email": "boss@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"
        assert response.json()["email"] == "boss@example.com"

    def test_update_email_taken(self, api_client, login_as, admin, owner, outsider):
        login_as(admin)
        response = api_client.patch(
            f"/api/admin/users/{owner.id}", json={"email": outsider.email}
        )
        assert response.status_code == 409

    def test_update_short_password(self, api_client, login_as, admin, owner):
        login_as(admin)
        response = api_client.patch(
            f"/api/admin/users/{owner.id}", json={"password": TEST_PASSWORD_SHORT}
        )
        assert response.status_code == 422

    def test_update_unknown_user(self, api_client, login_as, admin):
        login_as(admin)
        assert api_client.patch("/api/admin/users/9999", json={"role": "USER"}).status_code == 404

    def test_cannot_delete_self(self, api_client, login_as, admin):
        login_as(admin)
        assert api_client.delete(f"/api/admin/users/{admin.id}").status_code == 422

    def test_delete_cascades_owned_content(self, api_client, login_as, db, admin, owner):
        login_as(owner)
        api_client.post("/api/tasks", json={"title": "doomed"})
        workspace_id = owner.workspace_id
        owner_id = owner.id

        login_as(admin)
        assert api_client.delete(f"/api/admin/users/{owner_id}").status_code == 204
        db.expire_all()
        assert db.query(User).filter(User.id == owner_id).count() == 0
        assert db.query(Workspace).filter(Workspace.id == workspace_id).count() == 0
        assert db.query(Task).filter(Task.workspace_id == workspace_id).count() == 0

    def test_delete_unknown_user(self, api_client, login_as, admin):
        login_as(admin)
        assert api_client.delete("/api/admin/users/9999").status_code == 404


class TestTeam:
    def test_add_list_remove(self, api_client, login_as, admin, owner):
        login_as(admin)
        added = api_client.post("/api/team", json={"email": owner.email})
        assert added.status_code == 201
        assert added.json()["user"]["id"] == owner.id

        members = api_client.get("/api/team").json()["team_members"]
        assert [m["user"]["email"] for m in members] == [owner.email]

        assert api_client.delete(f"/api/team/{added.json()['id']}").status_code == 204
        assert api_client.get("/api/team").json()["team_members"] == []

    def test_add_rules(self, api_client, login_as, admin, owner):
        login_as(admin)
        assert api_client.post("/api/team", json={"email": "ghost@example.com"}).status_code == 404
        assert api_client.post("/api/team", json={"email": admin.email}).status_code == 422
        assert api_client.post("/api/team", json={"email": owner.email}).status_code == 201
        assert api_client.post("/api/team", json={"email": owner.email}).status_code == 409

    def test_cannot_remove_another_admins_member(self, api_client, login_as, make_user, admin, owner):
        other_admin = make_user("Grace", role=UserRole.ADMIN)
        login_as(admin)
        member_id = api_client.post("/api/team", json={"email": owner.email}).json()["id"]
        login_as(other_admin)
        assert api_client.delete(f"/api/team/{member_id}").status_code == 404
