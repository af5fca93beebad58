"""Workspace API: primary workspace, invitations and membership."""

from __future__ import annotations

from tasklane.models.workspace_invitation import InvitationStatus, WorkspaceInvitation
from tasklane.models.workspace_member import WorkspaceMember


def _invite(api_client, email: str):
    return api_client.post("/api/workspace/members", json={"email": email})


class TestPrimaryWorkspace:
    def test_owner_sees_own_workspace(self, api_client, login_as, owner, member):
        login_as(owner)
        body = api_client.get("/api/workspace").json()
        assert body["id"] == owner.workspace_id
        assert body["is_owner"] is True
        assert [m["user"]["name"] for m in body["members"]] == ["Marcus"]

    def test_list_all_includes_joined_workspaces(self, api_client, login_as, owner, member):
        login_as(member)
        ids = {w["id"] for w in api_client.get("/api/workspace/all").json()["workspaces"]}
        assert ids == {owner.workspace_id, member.workspace_id}

    def test_user_without_any_workspace_gets_404(self, api_client):
        from tasklane.api.deps import require_auth
        from tasklane.main import app
        from tasklane.services.access import Identity

        app.dependency_overrides[require_auth] = lambda: Identity(user_id=999, name="Ghost")
        assert api_client.get("/api/workspace").status_code == 404


class TestInvitations:
    def test_invite_accept_flow(self, api_client, login_as, db, owner, make_user):
        guest = make_user("Greta")
        login_as(owner)
        response = _invite(api_client, "GRETA@example.com")
        assert response.status_code == 201
        invitation_id = response.json()["id"]
        assert response.json()["status"] == "PENDING"

        login_as(guest)
        pending = api_client.get("/api/workspace/invitations").json()["invitations"]
        assert [i["id"] for i in pending] == [invitation_id]
        assert pending[0]["workspace"]["id"] == owner.workspace_id
        assert pending[0]["inviter"]["name"] == "Olivia"

        accepted = api_client.post(f"/api/workspace/invitations/{invitation_id}")
        assert accepted.status_code == 200
        assert accepted.json()["user_id"] == guest.id

        db.expire_all()
        assert db.get(WorkspaceInvitation, invitation_id).status == "ACCEPTED"
        assert (
            db.query(WorkspaceMember)
            .filter_by(workspace_id=owner.workspace_id, user_id=guest.id)
            .count()
            == 1
        )
        assert api_client.get("/api/workspace/invitations").json()["invitations"] == []

    def test_accepting_twice_conflicts(self, api_client, login_as, owner, make_user):
        guest = make_user("Greta")
        login_as(owner)
        invitation_id = _invite(api_client, guest.email).json()["id"]
        login_as(guest)
        assert api_client.post(f"/api/workspace/invitations/{invitation_id}").status_code == 200
        assert api_client.post(f"/api/workspace/invitations/{invitation_id}").status_code == 409

    def test_someone_elses_invitation_is_not_found(
        self, api_client, login_as, owner, outsider, make_user
    ):
        guest = make_user("Greta")
        login_as(owner)
        invitation_id = _invite(api_client, guest.email).json()["id"]
        login_as(outsider)
        assert api_client.post(f"/api/workspace/invitations/{invitation_id}").status_code == 404
        assert api_client.delete(f"/api/workspace/invitations/{invitation_id}").status_code == 404

    def test_deny_then_reinvite_resets_to_pending(
        self, api_client, login_as, db, owner, make_user
    ):
        guest = make_user("Greta")
        login_as(owner)
        invitation_id = _invite(api_client, guest.email).json()["id"]

        login_as(guest)
        denied = api_client.delete(f"/api/workspace/invitations/{invitation_id}")
        assert denied.json()["status"] == InvitationStatus.DENIED.value

        login_as(owner)
        again = _invite(api_client, guest.email)
        assert again.status_code == 201
        assert again.json()["id"] == invitation_id
        assert again.json()["status"] == "PENDING"

    def test_duplicate_pending_invite_conflicts(self, api_client, login_as, owner, make_user):
        guest = make_user("Greta")
        login_as(owner)
        assert _invite(api_client, guest.email).status_code == 201
        assert _invite(api_client, guest.email).status_code == 409

    def test_inviting_existing_member_conflicts(self, api_client, login_as, owner, member):
        login_as(owner)
        assert _invite(api_client, member.email).status_code == 409

    def test_unknown_email_is_not_found(self, api_client, login_as, owner):
        login_as(owner)
        assert _invite(api_client, "nobody@example.com").status_code == 404

    def test_self_invite_rejected(self, api_client, login_as, owner):
        login_as(owner)
        assert _invite(api_client, owner.email).status_code == 422


class TestMembers:
    def test_list_members(self, api_client, login_as, owner, member):
        login_as(owner)
        members = api_client.get("/api/workspace/members").json()["members"]
        assert [m["user_id"] for m in members] == [member.id]
        assert members[0]["role"] == "MEMBER"

    def test_owner_removes_member(self, api_client, login_as, db, owner, member, outsider):
        membership = db.query(WorkspaceMember).filter_by(user_id=member.id).one()

        login_as(outsider)
        assert api_client.delete(f"/api/workspace/members/{membership.id}").status_code == 404

        login_as(member)
        assert api_client.delete(f"/api/workspace/members/{membership.id}").status_code == 403

        login_as(owner)
        assert api_client.delete(f"/api/workspace/members/{membership.id}").status_code == 204

        login_as(member)
        ids = {w["id"] for w in api_client.get("/api/workspace/all").json()["workspaces"]}
        assert ids == {member.workspace_id}
