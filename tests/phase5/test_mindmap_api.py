"""Contract and integration tests for the mind map HTTP endpoints.

Tests the command surface end-to-end: every endpoint returns the full
snapshot (nodes, active id, capabilities) so a client can re-render.
"""

import pytest

from mindmap import main
from mindmap.maps.router import get_mindmap_service
from mindmap.maps.service import MindMapService, strip_tags
from tests.fixtures import sample_tree_blob


async def _load_sample(service, slots_name: str = "test") -> None:
    await service._slots.write(slots_name, sample_tree_blob())
    await service.load()


class TestRead:
    async def test_default_state(self, client):
        resp = await client.get("/api/mindmap")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["nodes"]) == 1
        assert data["nodes"][0]["label"] == "Press Space or double click to edit"
        assert data["active_id"] is None
        assert data["capabilities"]["can_save"] is False

    async def test_capabilities(self, client, service):
        await _load_sample(service)
        await client.post("/api/mindmap/activate", json={"node_id": 3})
        resp = await client.get("/api/mindmap/capabilities")
        assert resp.status_code == 200
        assert resp.json() == {
            "can_save": False,
            "can_move_left": True,
            "can_move_right": True,
            "can_move_up": True,
            "can_move_down": True,
        }

    async def test_expandable_ignores_collapsed_on_leaves(self, client, service):
        await _load_sample(service)
        resp = await client.patch("/api/mindmap/nodes/2/collapsed", json={"collapsed": True})
        [a, f] = resp.json()["nodes"]
        b, c, _ = a["children"]
        assert a["expandable"] is True
        assert c["expandable"] is True
        assert (b["collapsed"], b["expandable"]) == (True, False)
        assert f["expandable"] is False

    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.json()["status"] == "ok"


class TestCreate:
    async def test_create_top_level(self, client):
        resp = await client.post("/api/mindmap/nodes", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert len(data["nodes"]) == 2
        assert data["active_id"] == data["nodes"][-1]["id"]
        assert data["capabilities"]["can_save"] is True

    async def test_create_child_with_label(self, client, service):
        await _load_sample(service)
        resp = await client.post(
            "/api/mindmap/nodes", json={"parent_id": 2, "label": "<i>idea</i>"}
        )
        assert resp.status_code == 201
        b = resp.json()["nodes"][0]["children"][0]
        assert b["children"][0]["label"] == "idea"
        assert resp.json()["active_id"] == b["children"][0]["id"]

    async def test_create_under_unknown_parent(self, client):
        resp = await client.post("/api/mindmap/nodes", json={"parent_id": 424242})
        assert resp.status_code == 404

    async def test_create_sibling(self, client, service):
        await _load_sample(service)
        resp = await client.post("/api/mindmap/nodes/5/siblings")
        assert resp.status_code == 201
        c = resp.json()["nodes"][0]["children"][1]
        assert len(c["children"]) == 2


class TestRemove:
    async def test_remove_node(self, client, service):
        await _load_sample(service)
        resp = await client.delete("/api/mindmap/nodes/3")
        assert resp.status_code == 200
        data = resp.json()
        assert [n["id"] for n in data["nodes"][0]["children"]] == [2, 4]
        assert data["active_id"] == 4

    async def test_last_top_level_node_survives(self, client):
        node_id = (await client.get("/api/mindmap")).json()["nodes"][0]["id"]
        resp = await client.delete(f"/api/mindmap/nodes/{node_id}")
        assert resp.status_code == 200
        assert len(resp.json()["nodes"]) == 1

    async def test_remove_active(self, client, service):
        await _load_sample(service)
        await client.post("/api/mindmap/activate", json={"node_id": 5})
        resp = await client.delete("/api/mindmap/active")
        assert resp.json()["active_id"] == 3

    async def test_remove_unknown(self, client):
        resp = await client.delete("/api/mindmap/nodes/424242")
        assert resp.status_code == 404


class TestEdit:
    async def test_set_label_strips_tags(self, client, service):
        await _load_sample(service)
        resp = await client.patch(
            "/api/mindmap/nodes/2/label", json={"label": "bold <b>move</b>"}
        )
        assert resp.status_code == 200
        assert resp.json()["nodes"][0]["children"][0]["label"] == "bold move"
        assert resp.json()["capabilities"]["can_save"] is True

    async def test_set_collapsed(self, client, service):
        await _load_sample(service)
        resp = await client.patch("/api/mindmap/nodes/1/collapsed", json={"collapsed": True})
        assert resp.json()["nodes"][0]["collapsed"] is True

    async def test_toggle_collapsed(self, client, service):
        await _load_sample(service)
        resp = await client.post("/api/mindmap/nodes/3/toggle-collapsed")
        assert resp.json()["nodes"][0]["children"][1]["collapsed"] is True

    async def test_children_collapsed(self, client, service):
        await _load_sample(service)
        resp = await client.put(
            "/api/mindmap/nodes/1/children-collapsed", json={"collapsed": True}
        )
        children = resp.json()["nodes"][0]["children"]
        assert [c["collapsed"] for c in children] == [False, True, False]

        resp = await client.post("/api/mindmap/nodes/1/toggle-children-collapsed")
        children = resp.json()["nodes"][0]["children"]
        assert [c["collapsed"] for c in children] == [False, False, False]

    async def test_edit_unknown(self, client):
        resp = await client.patch("/api/mindmap/nodes/424242/label", json={"label": "x"})
        assert resp.status_code == 404


class TestNavigate:
    async def test_activate_and_clear(self, client, service):
        await _load_sample(service)
        resp = await client.post("/api/mindmap/activate", json={"node_id": 2})
        assert resp.json()["active_id"] == 2
        resp = await client.post("/api/mindmap/activate", json={"node_id": None})
        assert resp.json()["active_id"] is None

    async def test_move_active(self, client, service):
        await _load_sample(service)
        await client.post("/api/mindmap/activate", json={"node_id": 1})
        resp = await client.post("/api/mindmap/move/right")
        assert resp.json()["active_id"] == 3
        resp = await client.post("/api/mindmap/move/up")
        assert resp.json()["active_id"] == 2
        resp = await client.post("/api/mindmap/move/up")
        assert resp.json()["active_id"] == 2

    async def test_move_without_active_is_noop(self, client):
        resp = await client.post("/api/mindmap/move/left")
        assert resp.status_code == 200
        assert resp.json()["active_id"] is None

    async def test_move_from_node(self, client, service):
        await _load_sample(service)
        resp = await client.post("/api/mindmap/nodes/5/move/left")
        assert resp.json()["active_id"] == 3

    async def test_unknown_direction(self, client):
        resp = await client.post("/api/mindmap/move/sideways")
        assert resp.status_code == 422


class TestPersist:
    async def test_save_then_load(self, client, service):
        await client.post("/api/mindmap/nodes", json={"label": "kept"})
        resp = await client.post("/api/mindmap/save")
        assert resp.status_code == 200
        assert resp.json()["capabilities"]["can_save"] is False

        await client.post("/api/mindmap/nodes", json={"label": "discarded"})
        resp = await client.post("/api/mindmap/load")
        data = resp.json()
        assert data["restored"] is True
        assert [n["label"] for n in data["nodes"]][-1] == "kept"
        assert data["active_id"] == data["nodes"][-1]["id"]

    async def test_failed_write_keeps_unsaved_changes(self, client, service, monkeypatch):
        await client.post("/api/mindmap/nodes", json={"label": "pending"})

        async def broken_write(name, blob):
            raise RuntimeError("disk full")

        monkeypatch.setattr(service._slots, "write", broken_write)
        with pytest.raises(RuntimeError):
            await service.save()

        assert service.session.can_save is True
        assert service.capabilities().can_save is True

    async def test_load_empty_slot(self, client):
        resp = await client.post("/api/mindmap/load")
        data = resp.json()
        assert data["restored"] is False
        assert len(data["nodes"]) == 1
        assert data["capabilities"]["can_save"] is False

    async def test_load_corrupt_slot(self, client, service):
        await service._slots.write("test", "not-json{")
        resp = await client.post("/api/mindmap/load")
        data = resp.json()
        assert data["restored"] is False
        assert data["active_id"] is None


class TestStripTags:
    def test_removes_tags(self):
        assert strip_tags("<div>a<br/>b</div>") == "ab"

    def test_plain_text_untouched(self):
        assert strip_tags("no tags") == "no tags"

    def test_bracketed_text_counts_as_tag(self):
        assert strip_tags("a < b > c") == "a  c"


class TestLifespan:
    async def test_startup_reads_env_file_then_wires_service(self, tmp_path, monkeypatch):
        loaded = []
        monkeypatch.setattr(main, "load_dotenv", lambda path: loaded.append(path))
        monkeypatch.setenv("MINDMAP_DB_PATH", str(tmp_path / "data" / "mindmap.db"))
        monkeypatch.setenv("MINDMAP_SLOT", "startup")

        try:
            async with main.lifespan(main.app):
                assert loaded == [main.ENV_FILE]
                service = main.app.dependency_overrides[get_mindmap_service]()
                assert isinstance(service, MindMapService)
                assert len(service.session.root.children) == 1
        finally:
            main.app.dependency_overrides.clear()

        assert (tmp_path / "data" / "mindmap.db").exists()
