"""End-to-end tests of the HTTP surface on a temporary database."""

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from device_registry.core.config import DatabaseSettings, SecuritySettings, Settings, StorageSettings
from device_registry.core.security import Principal
from device_registry.main import create_app

PNG = b"\x89PNG\r\n\x1a\n fake image"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        public_base_url="http://testserver/api",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"),
        security=SecuritySettings(secret_key="test-secret-key"),
        storage=StorageSettings(photo_dir=tmp_path / "photos", photo_base_url="http://testserver/photos"),
    )


@pytest.fixture
def client(settings):
    app = create_app(settings, principal_resolver=lambda headers: Principal(id="front-desk"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def computer_form() -> dict:
    return {
        "brand": "Dell",
        "model": "Latitude 7440",
        "color": "black",
        "ownerName": "Grace Hopper",
        "ownerId": "EMP-001",
    }


@pytest.fixture
def medical_form() -> dict:
    return {
        "brand": "Philips",
        "model": "IntelliVue MX40",
        "serial": "SN-40-0001",
        "ownerName": "Alan Turing",
        "ownerId": "EMP-002",
    }


class TestAuthentication:
    def test_health_is_public(self, settings):
        with TestClient(create_app(settings)) as client:
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_routes_require_a_principal(self, settings):
        with TestClient(create_app(settings)) as client:
            response = client.get("/api/computers")
        assert response.status_code == 401

    def test_bearer_token_is_accepted(self, settings):
        token = jwt.encode({"sub": "user-1", "name": "Front desk"}, "test-secret-key", algorithm="HS256")
        with TestClient(create_app(settings)) as client:
            response = client.get("/api/computers", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json() == []

    def test_bad_signature_is_rejected(self, settings):
        token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm="HS256")
        with TestClient(create_app(settings)) as client:
            response = client.get("/api/computers", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_auth_can_be_disabled(self, settings):
        settings.security.require_auth = False
        with TestClient(create_app(settings)) as client:
            assert client.get("/api/devices/entered").status_code == 200


class TestComputers:
    def test_checkin_with_photo(self, client, computer_form):
        response = client.post(
            "/api/computers/checkin",
            data=computer_form,
            files={"photo": ("front.png", PNG, "image/png")},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["brand"] == "Dell"
        assert body["owner"] == {"name": "Grace Hopper", "id": "EMP-001"}
        assert body["checkinAt"] is not None
        assert body["checkoutAt"] is None
        assert body["photoURL"] == f"http://testserver/photos/{body['id']}.png"

        photo = client.get(f"/photos/{body['id']}.png")
        assert photo.status_code == 200
        assert photo.content == PNG

    def test_invalid_form_returns_structured_error(self, client, computer_form):
        response = client.post("/api/computers/checkin", data={**computer_form, "ownerName": "Al"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["errors"][0]["loc"] == ["owner_name"]
        assert client.get("/api/computers").json() == []

    def test_list_with_criteria(self, client, computer_form):
        for brand in ("Lenovo", "Dell", "HP"):
            client.post("/api/computers/checkin", data={**computer_form, "brand": brand})

        brands = [c["brand"] for c in client.get("/api/computers", params={"sort": "brand"}).json()]
        assert brands == ["Dell", "HP", "Lenovo"]

        filtered = client.get("/api/computers", params={"filter[brand]": "HP"}).json()
        assert [c["brand"] for c in filtered] == ["HP"]

        page = client.get("/api/computers", params={"sort": "-brand", "limit": "1", "offset": "1"}).json()
        assert [c["brand"] for c in page] == ["HP"]

    def test_invalid_pagination(self, client):
        response = client.get("/api/computers", params={"limit": "many"})
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestFrequentComputers:
    def test_register_checkin_checkout_cycle(self, client, computer_form):
        response = client.post("/api/computers/frequent", data=computer_form)
        assert response.status_code == 201
        registered = response.json()
        device_id = registered["device"]["id"]
        assert registered["checkinURL"] == f"http://testserver/api/computers/frequent/checkin/{device_id}"
        assert registered["checkoutURL"] == f"http://testserver/api/devices/checkout/{device_id}"
        assert registered["device"]["checkinAt"] is None

        checked_in = client.patch(registered["checkinURL"])
        assert checked_in.status_code == 200
        assert checked_in.json()["device"]["checkinAt"] is not None

        entered = client.get("/api/devices/entered").json()
        assert [(d["id"], d["type"]) for d in entered] == [(device_id, "computer")]

        assert client.patch(registered["checkinURL"]).status_code == 409

        assert client.patch(registered["checkoutURL"]).status_code == 204
        assert client.get("/api/devices/entered").json() == []

        history = client.get("/api/devices/history", params={"ownerId": "EMP-001"}).json()
        assert [entry["event"] for entry in history] == ["checkout", "checkin"]
        assert {entry["deviceType"] for entry in history} == {"frequent-computer"}
        assert all(entry["deviceId"] == device_id for entry in history)

        listed = client.get("/api/computers/frequent").json()
        assert [item["device"]["id"] for item in listed] == [device_id]

    def test_checkin_unregistered(self, client):
        response = client.patch("/api/computers/frequent/checkin/not-registered")
        assert response.status_code == 404
        assert response.json()["error"] == "device_not_found"


class TestMedicalDevices:
    def test_photo_is_required(self, client, medical_form):
        response = client.post("/api/medical-devices/checkin", data=medical_form)

        assert response.status_code == 422
        assert any(error["loc"] == ["photo"] for error in response.json()["errors"])

    def test_empty_photo_is_an_upload_failure(self, client, medical_form):
        response = client.post(
            "/api/medical-devices/checkin",
            data=medical_form,
            files={"photo": ("monitor.png", b"", "image/png")},
        )

        assert response.status_code == 502
        assert response.json()["error"] == "upload_failure"
        assert client.get("/api/medical-devices").json() == []

    def test_checkin_and_checkout(self, client, medical_form):
        response = client.post(
            "/api/medical-devices/checkin",
            data=medical_form,
            files={"photo": ("monitor.jpg", PNG, "image/jpeg")},
        )
        assert response.status_code == 201
        device = response.json()
        assert device["serial"] == "SN-40-0001"
        assert device["photoURL"].endswith(f"/{device['id']}.jpg")

        assert client.patch(f"/api/devices/checkout/{device['id']}").status_code == 204
        assert client.patch(f"/api/devices/checkout/{device['id']}").status_code == 404

        [listed] = client.get("/api/medical-devices").json()
        assert listed["checkoutAt"] is not None

        history = client.get(
            "/api/devices/history",
            params={"deviceType": "medical-device", "event": "checkin"},
        ).json()
        assert [entry["serial"] for entry in history] == ["SN-40-0001"]


class TestDevices:
    def test_checkout_unknown_device(self, client):
        response = client.patch("/api/devices/checkout/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {
            "error": "device_not_found",
            "detail": "Device is not entered: does-not-exist",
            "errors": [],
        }

    def test_history_rejects_unknown_device_type(self, client):
        response = client.get("/api/devices/history", params={"deviceType": "toaster"})
        assert response.status_code == 422
