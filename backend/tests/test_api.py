"""Tests for the DHCPv4 configuration API"""
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from kea_config import logger as logger_module
from kea_config import main as main_module
from kea_config.api import logs as logs_api
from kea_config.config import settings
from kea_config.logger import OperationLogger
from kea_config.main import app
from kea_config.services.store import get_store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_server_lookup(client):
    assert client.get("/api/dhcp4/servers/all").status_code == 404

    response = client.post("/api/dhcp4/servers", json={"tag": "all", "description": "all servers"})
    assert response.status_code == 201
    assert response.json()["tag"] == "all"

    response = client.get("/api/dhcp4/servers/all")
    assert response.status_code == 200
    assert response.json()["description"] == "all servers"

    assert client.post("/api/dhcp4/servers", json={"tag": "all"}).status_code == 409


def test_create_network_and_subnet(client):
    client.post("/api/dhcp4/servers", json={"tag": "all"})

    response = client.post(
        "/api/dhcp4/shared-networks",
        json={
            "server_tag": "all",
            "name": "network_test1",
            "params": {"valid_lifetime": 3600, "next_server": "10.83.27.254"},
        },
    )
    assert response.status_code == 201
    assert response.json()["params"]["valid_lifetime"] == 3600
    assert response.json()["params"]["next_server"] == 173218814

    response = client.post(
        "/api/dhcp4/subnets",
        json={
            "server_tag": "all",
            "shared_network_name": "network_test1",
            "prefix": "192.168.101.0/24",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["id"] == 1
    assert body["shared_network_name"] == "network_test1"
    assert [s["tag"] for s in body["servers"]] == ["all"]

    response = client.get("/api/dhcp4/subnets/192.168.101.0/24")
    assert response.status_code == 200
    assert response.json()["id"] == 1

    response = client.get("/api/dhcp4/shared-networks/network_test1")
    assert response.status_code == 200
    assert [s["tag"] for s in response.json()["servers"]] == ["all"]


def test_create_errors(client):
    response = client.post(
        "/api/dhcp4/shared-networks", json={"server_tag": "all", "name": "net1"},
    )
    assert response.status_code == 404

    client.post("/api/dhcp4/servers", json={"tag": "all"})
    client.post("/api/dhcp4/shared-networks", json={"server_tag": "all", "name": "net1"})

    subnet = {"server_tag": "all", "shared_network_name": "net1", "prefix": "10.0.0.0/24"}
    assert client.post("/api/dhcp4/subnets", json=subnet).status_code == 201
    assert client.post("/api/dhcp4/subnets", json=subnet).status_code == 409

    missing = dict(subnet, shared_network_name="missing", prefix="10.0.1.0/24")
    assert client.post("/api/dhcp4/subnets", json=missing).status_code == 404

    assert client.get("/api/dhcp4/subnets/10.9.9.0/24").status_code == 404


def test_operation_log(client, monkeypatch):
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        temp_path = Path(f.name)

    try:
        operations = OperationLogger(temp_path, name="test-api-operations")
        monkeypatch.setattr(logger_module, "operation_logger", operations)
        monkeypatch.setattr(logs_api, "operation_logger", operations)

        client.post("/api/dhcp4/servers", json={"tag": "all"})
        client.post("/api/dhcp4/shared-networks", json={"server_tag": "all", "name": "net1"})
        client.post("/api/dhcp4/shared-networks", json={"server_tag": "all", "name": "net1"})

        entries = client.get("/api/logs", params={"operator": "all"}).json()
        assert [e["action"] for e in entries] == ["ROLLBACK", "CREATE", "CREATE"]
        assert entries[0]["object"] == "shared-network net1"
        assert entries[0]["level"] == "ERROR"
    finally:
        temp_path.unlink(missing_ok=True)


def test_invalid_next_server(client):
    client.post("/api/dhcp4/servers", json={"tag": "all"})

    response = client.post(
        "/api/dhcp4/shared-networks",
        json={"server_tag": "all", "name": "net1", "params": {"next_server": "10.0.0"}},
    )
    assert response.status_code == 422


def test_audit_revisions(client):
    client.post("/api/dhcp4/servers", json={"tag": "all"})
    client.post("/api/dhcp4/shared-networks", json={"server_tag": "all", "name": "net1"})
    client.post("/api/dhcp4/shared-networks", json={"server_tag": "all", "name": "net1"})

    revisions = client.get("/api/dhcp4/audit-revisions").json()
    assert [r["log_message"] for r in revisions] == [
        "add new shared network: net1",
        "add new server: all",
    ]
    assert all(r["affects_config"] for r in revisions)

    assert client.get("/api/dhcp4/audit-revisions", params={"server_tag": "x"}).json() == []


def test_startup_removes_old_logs(monkeypatch):
    calls = []

    def fake_cleanup(logs_dir, max_age_days=30):
        calls.append((logs_dir, max_age_days))
        return 2

    monkeypatch.setattr(main_module, "cleanup_old_logs", fake_cleanup)

    with TestClient(app) as client:
        assert calls == [(settings.logs_dir, settings.log_max_age_days)]
        assert client.get("/api/health").status_code == 200
