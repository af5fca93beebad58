"""Comments, @mentions and the notification inbox."""

from __future__ import annotations

from tasklane.models.notification import Notification
from tasklane.services.comment_service import parse_mentions


def _task(api_client, title="Ship it") -> dict:
    response = api_client.post("/api/tasks", json={"title": title})
    assert response.status_code == 201, response.text
    return response.json()["task"]


class TestParseMentions:
    def test_distinct_lowercased_in_order(self):
        assert parse_mentions("@Bob ping @alice and @bob again") == ["bob", "alice"]

    def test_no_mentions(self):
        assert parse_mentions("plain text, mail me at nobody") == []


class TestComments:
    def test_create_and_list(self, api_client, login_as, owner):
        login_as(owner)
        task = _task(api_client)
        response = api_client.post(
            f"/api/tasks/{task['id']}/comments", json={"content": "  first!  "}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "first!"
        assert body["mentions"] == []
        assert body["user"]["id"] == owner.id

        listed = api_client.get(f"/api/tasks/{task['id']}/comments").json()["comments"]
        assert [c["content"] for c in listed] == ["first!"]

    def test_blank_comment_rejected(self, api_client, login_as, owner):
        login_as(owner)
        task = _task(api_client)
        response = api_client.post(f"/api/tasks/{task['id']}/comments", json={"content": "   "})
        assert response.status_code == 422

    def test_hidden_task_is_not_found(self, api_client, login_as, owner, outsider):
        login_as(owner)
        task = _task(api_client)
        login_as(outsider)
        url = f"/api/tasks/{task['id']}/comments"
        assert api_client.get(url).status_code == 404
        assert api_client.post(url, json={"content": "hi"}).status_code == 404

    def test_mention_notifies_participant_but_not_author(
        self, api_client, login_as, db, owner, member, outsider
    ):
        login_as(owner)
        task = _task(api_client)
        response = api_client.post(
            f"/api/tasks/{task['id']}/comments",
            json={"content": "@marcus @olivia @xavier please review"},
        )
        assert response.status_code == 201
        assert set(response.json()["mentions"]) == {member.id, owner.id}

        notifications = db.query(Notification).all()
        assert [n.user_id for n in notifications] == [member.id]
        assert notifications[0].type == "MENTION"
        assert notifications[0].link == f"/app/project/inbox?task={task['id']}"

    def test_comment_records_activity(self, api_client, login_as, owner):
        login_as(owner)
        task = _task(api_client)
        comment = api_client.post(
            f"/api/tasks/{task['id']}/comments", json={"content": "note"}
        ).json()
        activities = api_client.get(
            "/api/activity", params={"task_id": task["id"]}
        ).json()["activities"]
        assert activities[0]["type"] == "COMMENT_ADDED"
        assert activities[0]["metadata"] == {"comment_id": comment["id"]}
        assert activities[0]["task"]["title"] == "Ship it"


class TestNotifications:
    def _mention_member(self, api_client, login_as, owner, times=1):
        login_as(owner)
        task = _task(api_client)
        for _ in range(times):
            api_client.post(f"/api/tasks/{task['id']}/comments", json={"content": "@marcus"})

    def test_list_and_mark_read(self, api_client, login_as, owner, member):
        self._mention_member(api_client, login_as, owner, times=2)
        login_as(member)
        notifications = api_client.get("/api/notifications").json()["notifications"]
        assert len(notifications) == 2
        assert all(not n["read"] for n in notifications)

        first = notifications[0]["id"]
        response = api_client.patch(
            "/api/notifications", json={"notification_ids": [first], "read": True}
        )
        assert response.json() == {"updated": 1}
        unread = api_client.get("/api/notifications", params={"unread_only": True}).json()
        assert [n["id"] for n in unread["notifications"]] == [notifications[1]["id"]]

    def test_cannot_mark_someone_elses(self, api_client, login_as, owner, member):
        self._mention_member(api_client, login_as, owner)
        login_as(member)
        ids = [n["id"] for n in api_client.get("/api/notifications").json()["notifications"]]
        login_as(owner)
        response = api_client.patch(
            "/api/notifications", json={"notification_ids": ids, "read": True}
        )
        assert response.json() == {"updated": 0}

    def test_limit(self, api_client, login_as, owner, member):
        self._mention_member(api_client, login_as, owner, times=3)
        login_as(member)
        response = api_client.get("/api/notifications", params={"limit": 2})
        assert len(response.json()["notifications"]) == 2
        assert api_client.get("/api/notifications", params={"limit": 0}).status_code == 422


class TestActivityFeed:
    def test_member_sees_workspace_activity(self, api_client, login_as, owner, member, outsider):
        login_as(owner)
        task = _task(api_client)
        api_client.patch(f"/api/tasks/{task['id']}", json={"status": "FINISHED"})

        login_as(member)
        types = [a["type"] for a in api_client.get("/api/activity").json()["activities"]]
        assert types == ["TASK_COMPLETED", "TASK_CREATED"]

        login_as(outsider)
        assert api_client.get("/api/activity").json()["activities"] == []

    def test_foreign_workspace_filter_is_not_found(self, api_client, login_as, owner, outsider):
        login_as(outsider)
        response = api_client.get("/api/activity", params={"workspace_id": owner.workspace_id})
        assert response.status_code == 404
