import json

import pytest
import pandas as pd
from fastapi.testclient import TestClient

import pod_sorter.api as api

@pytest.fixture
def client(tmp_path, monkeypatch, preference_config):
    config_path = tmp_path / "sorter_config.json"
    config_path.write_text(json.dumps(preference_config), encoding='utf-8')
    monkeypatch.setattr(api, "CONFIG_PATH", config_path)
    monkeypatch.setattr(api, "STORE_PATH", tmp_path / "raw" / "responses.csv")
    return TestClient(api.app)

def test_submit_creates_then_updates(client):
    res = client.post("/api/submit", json={"email": "Ana@example.edu", "preference": "Media"})
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "created"
    assert body["result"]["primary"] == "Media"
    assert body["result"]["pod"] == "Pod 1"

    res = client.post("/api/submit", json={"email": "ana@example.edu", "preference": "Space"})
    assert res.status_code == 200
    assert res.json()["status"] == "updated"
    assert res.json()["result"]["primary"] == "Space"

    df = pd.read_csv(api.STORE_PATH)
    assert len(df) == 1
    assert df.loc[0, "Primary Role"] == "Space"
    assert df.loc[0, "Floater"] == "No"

def test_submit_rejects_outside_domain(client):
    res = client.post("/api/submit", json={"email": "ana@gmail.com", "preference": "Media"})
    assert res.status_code == 400
    assert not api.STORE_PATH.exists()

def test_results_and_recompute(client):
    for i in range(7):
        client.post("/api/submit", json={"email": f"f{i}@example.edu", "preference": "Finance"})

    res = client.post("/api/run/recompute")
    assert res.status_code == 200
    summary = res.json()["summary"]
    assert summary["role_counts"]["Finance"] == 7
    assert summary["floaters"] == 2

    results = client.get("/api/results").json()["results"]
    assert [r["floater"] for r in results] == [False] * 5 + [True] * 2

def test_config_update(client):
    res = client.get("/api/config")
    assert res.json()["pods"][0] == "Pod 1"

    update = {
        "roles": [{"name": "Finance", "cap": 4}, {"name": "Space", "cap": 2}, {"name": "Media", "cap": 2}],
        "over_role": "Finance",
        "pods": ["North", "South"],
    }
    res = client.post("/api/config", json=update)
    assert res.status_code == 200
    assert client.get("/api/config").json()["pods"] == ["North", "South"]

    update["over_role"] = "Tech"
    assert client.post("/api/config", json=update).status_code == 400

def test_config_rename_role_drops_stale_signals(client):
    update = {
        "roles": [{"name": "Finance", "cap": 10}, {"name": "Space", "cap": 5}, {"name": "Tech", "cap": 5}],
        "over_role": "Finance",
        "pods": ["Pod 1", "Pod 2", "Pod 3", "Pod 4", "Pod 5"],
    }
    res = client.post("/api/config", json=update)
    assert res.status_code == 200

    config = client.get("/api/config").json()
    assert [r["name"] for r in config["roles"]] == ["Finance", "Space", "Tech"]
    assert set(config["signals"]) == {"Finance", "Space"}

    res = client.post("/api/submit", json={"email": "tia@example.edu", "preference": "Space"})
    assert res.status_code == 200
    assert "Tech" in res.json()["result"]

def test_config_rename_role_with_signals(client):
    update = {
        "roles": [{"name": "Finance", "cap": 10}, {"name": "Space", "cap": 5}, {"name": "Tech", "cap": 5}],
        "over_role": "Finance",
        "pods": ["Pod 1", "Pod 2"],
        "signals": {"Tech": [{"field": "preference", "match": "equals", "value": "Tech", "weight": 1.0}]},
    }
    assert client.post("/api/config", json=update).status_code == 200

    res = client.post("/api/submit", json={"email": "tia@example.edu", "preference": "Tech"})
    assert res.json()["result"]["primary"] == "Tech"

def test_config_bad_pattern_is_rejected(client):
    update = {
        "roles": [{"name": "Finance", "cap": 10}, {"name": "Space", "cap": 5}, {"name": "Media", "cap": 5}],
        "over_role": "Finance",
        "pods": ["Pod 1"],
        "signals": {"Media": [{"field": "tags", "match": "contains", "value": "film(", "weight": 0.5}]},
    }
    assert client.post("/api/config", json=update).status_code == 400
    assert client.get("/api/config").json()["pods"] == ["Pod 1", "Pod 2", "Pod 3", "Pod 4", "Pod 5"]
