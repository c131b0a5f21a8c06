"""
Testes do CRUD de discoveries e da execução pelo canal ``discovery``.
"""
import threading
from unittest.mock import patch

from api import create_app
from api.config import TestingConfig
from core.schemas import DiscoveryReply

SERVICE = "core.services.discovery_service"


def _create_credential(client, headers):
    response = client.post(
        "/credentials/",
        json={
            "name": "edge",
            "type": "SSH",
            "attributes": {"username": "admin", "password": "edge-pass"},
        },
        headers=headers,
    )
    return response.get_json()["data"]["id"]


def _create_discovery(client, headers, **overrides):
    payload = {"name": "lab", "ip": "10.0.0.1-5", "port": 22, "credential_ids": []}
    payload.update(overrides)
    return client.post("/discoveries/", json=payload, headers=headers)


class TestDiscoveriesCrud:

    def test_create_with_defaults(self, client, auth_headers):
        response = client.post(
            "/discoveries/", json={"name": "lab", "ip": "10.0.0.1"}, headers=auth_headers,
        )
        assert response.status_code == 201
        discovery_id = response.get_json()["data"]["id"]

        data = client.get(f"/discoveries/{discovery_id}", headers=auth_headers).get_json()["data"]
        assert data["port"] == 22
        assert data["credential_ids"] == []
        assert data["status"] == "pending"

    def test_unknown_credential_id(self, client, auth_headers):
        response = _create_discovery(client, auth_headers, credential_ids=[99])
        assert response.status_code == 400
        assert response.get_json()["message"] == "Credential ID 99 does not exist."

    def test_camel_case_credential_ids(self, client, auth_headers):
        credential_id = _create_credential(client, auth_headers)
        response = client.post(
            "/discoveries/",
            json={"name": "lab", "ip": "10.0.0.1", "credentialIDs": [credential_id]},
            headers=auth_headers,
        )
        discovery_id = response.get_json()["data"]["id"]
        data = client.get(f"/discoveries/{discovery_id}", headers=auth_headers).get_json()["data"]
        assert data["credential_ids"] == [credential_id]

    def test_list_update_delete(self, client, auth_headers):
        discovery_id = _create_discovery(client, auth_headers).get_json()["data"]["id"]

        listed = client.get("/discoveries/", headers=auth_headers).get_json()["data"]
        assert [item["id"] for item in listed] == [discovery_id]

        response = client.put(
            f"/discoveries/{discovery_id}",
            json={"ip": "10.0.1.1", "port": 2222},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = client.get(f"/discoveries/{discovery_id}", headers=auth_headers).get_json()["data"]
        assert (data["ip"], data["port"], data["name"]) == ("10.0.1.1", 2222, "lab")

        assert client.delete(
            f"/discoveries/{discovery_id}", headers=auth_headers
        ).status_code == 200
        assert client.get(
            f"/discoveries/{discovery_id}", headers=auth_headers
        ).status_code == 404

    def test_update_with_unknown_credential(self, client, auth_headers):
        discovery_id = _create_discovery(client, auth_headers).get_json()["data"]["id"]
        response = client.put(
            f"/discoveries/{discovery_id}",
            json={"credential_ids": [42]},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_invalid_port_type(self, client, auth_headers):
        response = _create_discovery(client, auth_headers, port="ssh")
        assert response.status_code == 400

    def test_requires_token(self, client):
        assert client.get("/discoveries/").status_code == 401


class TestDiscoveryRun:

    def test_run_success_stores_result(self, client, auth_headers):
        credential_id = _create_credential(client, auth_headers)
        discovery_id = _create_discovery(
            client, auth_headers, credential_ids=[credential_id]
        ).get_json()["data"]["id"]

        with patch(f"{SERVICE}.sweep_alive_hosts", return_value=["10.0.0.3"]), \
             patch(f"{SERVICE}.is_port_open", return_value=True), \
             patch(
                 f"{SERVICE}.run_probe_worker",
                 return_value=DiscoveryReply.success("identified\n"),
             ) as worker:
            response = client.post(f"/discoveries/{discovery_id}/run", headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == {"status": "success", "result": "identified\n"}

        ip, port, credentials = worker.call_args.args
        assert (ip, port) == ("10.0.0.3", 22)
        assert credentials[0]["username"] == "admin"
        assert credentials[0]["password"] == "edge-pass"

        data = client.get(f"/discoveries/{discovery_id}", headers=auth_headers).get_json()["data"]
        assert data["status"] == "success"
        assert data["result"] == "identified\n"

    def test_run_failure_stores_error(self, client, auth_headers):
        discovery_id = _create_discovery(client, auth_headers).get_json()["data"]["id"]

        with patch(f"{SERVICE}.sweep_alive_hosts", return_value=[]):
            response = client.post(f"/discoveries/{discovery_id}/run", headers=auth_headers)

        assert response.status_code == 422
        assert response.get_json() == {"status": "error", "message": "No active IPs found"}

        data = client.get(f"/discoveries/{discovery_id}", headers=auth_headers).get_json()["data"]
        assert data["status"] == "error"
        assert data["result"] == "No active IPs found"

    def test_run_missing_discovery(self, client, auth_headers):
        response = client.post("/discoveries/999/run", headers=auth_headers)
        assert response.status_code == 404

    def test_adhoc_run_passes_envelope_unchanged(self, client, auth_headers):
        response = client.post(
            "/discoveries/run",
            json={"requestType": "Inventory", "contexts": []},
            headers=auth_headers,
        )
        assert response.status_code == 422
        assert response.get_json()["message"] == "Invalid request type"

    def test_adhoc_run_without_contexts(self, client, auth_headers):
        response = client.post(
            "/discoveries/run", json={"requestType": "Discovery"}, headers=auth_headers,
        )
        assert response.get_json()["message"] == "No discovery contexts provided"

    def test_adhoc_run_invalid_ip(self, client, auth_headers):
        response = client.post(
            "/discoveries/run",
            json={
                "requestType": "Discovery",
                "contexts": [{"ip": "10.0.0.9-2", "port": 22, "credentials": []}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 422
        assert response.get_json()["message"] == "Invalid IP or range"


class TestDiscoveryReplyTimeout:

    ENVELOPE = {
        "requestType": "Discovery",
        "contexts": [{"ip": "10.0.0.1", "port": 22, "credentials": []}],
    }

    def _slow_app(self, db_path):
        class _Config(TestingConfig):
            DATABASE_PATH = str(db_path)
            DISCOVERY_WORKERS = 1
            DISCOVERY_REPLY_TIMEOUT = 0.2

        return create_app(_Config)

    def test_timed_out_request_is_not_run_later(self, db_path):
        app = self._slow_app(db_path)
        client = app.test_client()
        creds = {"username": "operator", "password": "operator-pass"}
        client.post("/users/register", json=creds)
        token = client.post("/users/login", json=creds).get_json()["data"]["token"]
        headers = {"Authorization": f"Bearer {token}"}

        started = threading.Event()
        release = threading.Event()

        def slow_sweep(*args, **kwargs):
            started.set()
            release.wait(5)
            return []

        bus = app.extensions["discovery_bus"]
        with patch(f"{SERVICE}.sweep_alive_hosts", side_effect=slow_sweep) as sweep:
            try:
                first = client.post("/discoveries/run", json=self.ENVELOPE, headers=headers)
                assert started.wait(5)
                second = client.post("/discoveries/run", json=self.ENVELOPE, headers=headers)
            finally:
                release.set()
                bus.close()

        for response in (first, second):
            assert response.status_code == 422
            assert response.get_json()["message"] == "Discovery reply timed out"
        assert sweep.call_count == 1
