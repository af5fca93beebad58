"""Saved filter presets are private to the user who created them."""

from __future__ import annotations

from tasklane.models.filter_preset import FilterPreset


def _create(api_client, name="Urgent", filters=None):
    body = {"name": name}
    if filters is not None:
        body["filters"] = filters
    response = api_client.post("/api/filter-presets", json=body)
    assert response.status_code == 201
    return response.json()["preset"]


class TestFilterPresets:
    def test_create_and_list(self, api_client, login_as, owner):
        login_as(owner)
        preset = _create(api_client, "  Urgent  ", {"priority": 3, "view": "today"})
        assert preset["name"] == "Urgent"
        assert preset["filters"] == {"priority": 3, "view": "today"}
        assert preset["user_id"] == owner.id

        presets = api_client.get("/api/filter-presets").json()["presets"]
        assert [p["id"] for p in presets] == [preset["id"]]

    def test_filters_default_to_empty_object(self, api_client, login_as, owner):
        login_as(owner)
        assert _create(api_client, "Everything")["filters"] == {}

    def test_list_newest_first(self, api_client, login_as, owner):
        login_as(owner)
        first = _create(api_client, "First")
        second = _create(api_client, "Second")
        presets = api_client.get("/api/filter-presets").json()["presets"]
        assert [p["id"] for p in presets] == [second["id"], first["id"]]

    def test_partial_update_keeps_other_fields(self, api_client, login_as, owner):
        login_as(owner)
        preset = _create(api_client, "Urgent", {"priority": 3})
        response = api_client.patch(
            f"/api/filter-presets/{preset['id']}", json={"name": "Very urgent"}
        )
        assert response.status_code == 200
        updated = response.json()["preset"]
        assert updated["name"] == "Very urgent"
        assert updated["filters"] == {"priority": 3}

        response = api_client.patch(
            f"/api/filter-presets/{preset['id']}", json={"filters": {"status": "FINISHED"}}
        )
        assert response.json()["preset"]["filters"] == {"status": "FINISHED"}
        assert response.json()["preset"]["name"] == "Very urgent"

    def test_null_name_rejected(self, api_client, login_as, owner):
        login_as(owner)
        preset = _create(api_client)
        response = api_client.patch(f"/api/filter-presets/{preset['id']}", json={"name": None})
        assert response.status_code == 422

    def test_delete(self, api_client, login_as, owner, db):
        login_as(owner)
        preset = _create(api_client)
        assert api_client.delete(f"/api/filter-presets/{preset['id']}").status_code == 204
        assert db.get(FilterPreset, preset["id"]) is None
        assert api_client.get("/api/filter-presets").json()["presets"] == []

    def test_blank_or_long_name_rejected(self, api_client, login_as, owner):
        login_as(owner)
        assert api_client.post("/api/filter-presets", json={"name": "   "}).status_code == 422
        assert api_client.post("/api/filter-presets", json={"name": ""}).status_code == 422
        assert api_client.post("/api/filter-presets", json={"name": "x" * 101}).status_code == 422
        assert api_client.post("/api/filter-presets", json={"name": "x" * 100}).status_code == 201

    def test_filters_must_be_an_object(self, api_client, login_as, owner):
        login_as(owner)
        response = api_client.post(
            "/api/filter-presets", json={"name": "Bad", "filters": ["priority"]}
        )
        assert response.status_code == 422
        response = api_client.post("/api/filter-presets", json={"name": "Bad", "filters": "x"})
        assert response.status_code == 422

    def test_unknown_preset_not_found(self, api_client, login_as, owner):
        login_as(owner)
        assert api_client.patch("/api/filter-presets/999", json={"name": "x"}).status_code == 404
        assert api_client.delete("/api/filter-presets/999").status_code == 404


class TestFilterPresetOwnership:
    def test_other_users_preset_is_hidden(self, api_client, login_as, owner, member):
        login_as(owner)
        preset = _create(api_client, "Olivia only", {"priority": 1})

        login_as(member)
        assert api_client.get("/api/filter-presets").json()["presets"] == []
        response = api_client.patch(
            f"/api/filter-presets/{preset['id']}", json={"name": "Taken"}
        )
        assert response.status_code == 404
        assert api_client.delete(f"/api/filter-presets/{preset['id']}").status_code == 404

        login_as(owner)
        presets = api_client.get("/api/filter-presets").json()["presets"]
        assert [p["name"] for p in presets] == ["Olivia only"]

    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/filter-presets").status_code == 401
        assert api_client.post("/api/filter-presets", json={"name": "x"}).status_code == 401
