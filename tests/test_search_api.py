"""Search across tasks and projects."""

from __future__ import annotations


def _seed(api_client, login_as, owner):
    login_as(owner)
    project = api_client.post("/api/projects", json={"name": "Rocket launch"}).json()
    api_client.post("/api/tasks", json={"title": "Fuel the rocket", "project_id": project["id"]})
    api_client.post("/api/tasks", json={"title": "Paint", "notes": "rocket stripes"})
    api_client.post("/api/tasks", json={"title": "Unrelated"})
    return project


class TestSearch:
    def test_blank_query_returns_nothing(self, api_client, login_as, owner):
        _seed(api_client, login_as, owner)
        body = api_client.get("/api/search", params={"q": "   "}).json()
        assert body == {"tasks": [], "projects": []}

    def test_matches_titles_notes_and_project_names(self, api_client, login_as, owner):
        project = _seed(api_client, login_as, owner)
        body = api_client.get("/api/search", params={"q": "ROCKET"}).json()
        assert sorted(t["title"] for t in body["tasks"]) == ["Fuel the rocket", "Paint"]
        assert [p["id"] for p in body["projects"]] == [project["id"]]
        assert body["projects"][0]["task_count"] == 1

    def test_type_filter(self, api_client, login_as, owner):
        _seed(api_client, login_as, owner)
        tasks_only = api_client.get("/api/search", params={"q": "rocket", "type": "tasks"}).json()
        assert tasks_only["projects"] == []
        assert len(tasks_only["tasks"]) == 2
        projects_only = api_client.get(
            "/api/search", params={"q": "rocket", "type": "projects"}
        ).json()
        assert projects_only["tasks"] == []
        assert len(projects_only["projects"]) == 1

    def test_unknown_type_rejected(self, api_client, login_as, owner):
        login_as(owner)
        assert api_client.get("/api/search", params={"q": "x", "type": "users"}).status_code == 422

    def test_scoped_to_accessible_workspaces(self, api_client, login_as, owner, member, outsider):
        _seed(api_client, login_as, owner)
        login_as(member)
        assert len(api_client.get("/api/search", params={"q": "rocket"}).json()["tasks"]) == 2
        login_as(outsider)
        assert api_client.get("/api/search", params={"q": "rocket"}).json() == {
            "tasks": [],
            "projects": [],
        }

    def test_caller_without_workspaces_gets_empty_results(self, api_client, login_as, owner):
        from tasklane.api.deps import require_auth
        from tasklane.main import app
        from tasklane.services.access import Identity

        _seed(api_client, login_as, owner)
        app.dependency_overrides[require_auth] = lambda: Identity(user_id=424242, name="Ghost")
        response = api_client.get("/api/search", params={"q": "rocket"})
        assert response.status_code == 200
        assert response.json() == {"tasks": [], "projects": []}
