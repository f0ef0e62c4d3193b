import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dfgraph.server.main import create_app
from dfgraph.settings import Settings

SAMPLE = Path(__file__).resolve().parent.parent / "graphs" / "customer_orders.json"


@pytest.fixture
def client():
    return TestClient(create_app(settings=Settings()))


@pytest.fixture
def sample_graph():
    return json.loads(SAMPLE.read_text())


class TestComponentRoutes:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "components": 8}

    def test_tree(self, client):
        tree = client.get("/api/components").json()
        assert list(tree) == ["inputs", "transforms", "outputs"]
        assert [c["id"] for c in tree["transforms"]["ungrouped"]] == ["join", "concat"]
        assert "formSchema" not in tree["inputs"]["files"][0]

    def test_search(self, client):
        found = client.get("/api/components/search", params={"q": "csv"}).json()
        assert [c["id"] for c in found] == ["csv_input", "csv_output"]

    def test_descriptor_with_form(self, client):
        data = client.get("/api/components/join").json()
        assert data["kind"] == "double_input"
        assert data["minInputs"] == 2 and data["outputs"] == 1
        assert data["defaultConfig"] == {"how": "left", "cartesian_policy": "ignore"}
        policy = next(f for f in data["formSchema"] if f["id"] == "cartesian_policy")
        assert policy["condition"]["dependsOn"] == "how"
        assert "cross" not in policy["condition"]["visibleWhen"]

    def test_unknown_descriptor(self, client):
        assert client.get("/api/components/nope").status_code == 404


class TestCompileRoutes:

    def test_compile_sample(self, client, sample_graph):
        resp = client.post("/api/compile", json=sample_graph)
        assert resp.status_code == 200
        body = resp.json()
        assert body["order"] == ["customers", "orders", "paid", "join_1", "by_date", "report"]
        assert body["variables"]["join_1"] == "var_join_1"
        assert "report" not in body["variables"]
        assert "check_cartesian_product(var_customers, var_paid, ['id'], ['customer_id'], 'raise')" \
            in body["script"]

    def test_validate_ok(self, client, sample_graph):
        assert client.post("/api/validate", json=sample_graph).json() == {"ok": True}

    def test_compile_error_is_structured(self, client, sample_graph):
        sample_graph["edges"] = [e for e in sample_graph["edges"] if e["target"] != "paid"]
        resp = client.post("/api/compile", json=sample_graph)
        assert resp.status_code == 422
        error = resp.json()["error"]
        assert error["kind"] == "MissingInput"
        assert error["nodeId"] == "paid"

    def test_invalid_config(self, client, sample_graph):
        sample_graph["nodes"][0]["config"] = {}
        error = client.post("/api/validate", json=sample_graph).json()["error"]
        assert error == {
            "kind": "InvalidConfig",
            "message": "'File path' is required",
            "nodeId": "customers",
            "field": "file_path",
        }

    def test_list_valued_select_is_rejected_cleanly(self, client, sample_graph):
        sample_graph["nodes"][3]["config"]["how"] = ["inner"]
        resp = client.post("/api/compile", json=sample_graph)
        assert resp.status_code == 422
        error = resp.json()["error"]
        assert (error["kind"], error["nodeId"], error["field"]) == ("InvalidConfig", "join_1", "how")

    def test_duplicate_node_ids(self, client):
        graph = {"nodes": [
            {"nodeId": "a", "descriptorId": "csv_input", "config": {"file_path": "a.csv"}},
            {"nodeId": "a", "descriptorId": "csv_input", "config": {"file_path": "b.csv"}},
        ]}
        resp = client.post("/api/compile", json=graph)
        assert resp.status_code == 422
        assert resp.json()["error"]["kind"] == "SchemaError"
