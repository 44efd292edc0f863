"""Service tests against mocked device and photo stores."""

from unittest.mock import AsyncMock

import pytest

from device_registry.modules.devices import (
    ComputerService,
    DeviceCriteria,
    DeviceNotFoundError,
    DeviceService,
    DeviceValidationError,
    MedicalDeviceService,
    PhotoUploadError,
)
from device_registry.modules.history import DeviceHistoryFilters, DeviceHistoryService, HistoryEvent

from conftest import T0, make_computer, make_frequent

pytestmark = pytest.mark.anyio

BASE_URL = "https://registry.test/api"


def _echo(value, *args):
    return value


@pytest.fixture
def device_store():
    store = AsyncMock()
    store.register_frequent_computer.side_effect = _echo
    store.checkin_computer.side_effect = _echo
    store.checkin_medical_device.side_effect = _echo
    return store


@pytest.fixture
def photo_store():
    store = AsyncMock()
    store.save.return_value = "http://registry.test/photos/device.png"
    return store


@pytest.fixture
def computer_payload():
    return {
        "brand": "Lenovo",
        "model": "ThinkPad X1",
        "color": "black",
        "owner_name": "Grace Hopper",
        "owner_id": "EMP-001",
    }


class TestComputerService:
    @pytest.fixture
    def service(self, device_store, photo_store):
        return ComputerService(device_store, photo_store, BASE_URL, clock=lambda: T0)

    async def test_register_derives_urls_from_new_id(self, service, device_store, photo_store, computer_payload):
        frequent = await service.register_frequent_computer(computer_payload)

        device_id = frequent.device.id
        assert frequent.checkin_url == f"{BASE_URL}/computers/frequent/checkin/{device_id}"
        assert frequent.checkout_url == f"{BASE_URL}/devices/checkout/{device_id}"
        assert frequent.device.checkin_at is None
        assert frequent.device.photo_url is None
        device_store.register_frequent_computer.assert_awaited_once()
        photo_store.save.assert_not_awaited()

    async def test_register_stores_photo_first(self, service, photo_store, computer_payload, photo):
        frequent = await service.register_frequent_computer({**computer_payload, "photo": photo})

        photo_store.save.assert_awaited_once_with(photo, frequent.device.id)
        assert frequent.device.photo_url == "http://registry.test/photos/device.png"

    async def test_photo_failure_aborts_registration(
        self, service, device_store, photo_store, computer_payload, photo
    ):
        photo_store.save.side_effect = OSError("read-only file system")

        with pytest.raises(PhotoUploadError):
            await service.register_frequent_computer({**computer_payload, "photo": photo})
        device_store.register_frequent_computer.assert_not_awaited()

    async def test_invalid_payload_never_reaches_store(self, service, device_store, computer_payload):
        with pytest.raises(DeviceValidationError) as exc_info:
            await service.checkin_computer({**computer_payload, "brand": "X"})

        assert exc_info.value.errors
        device_store.checkin_computer.assert_not_awaited()

    async def test_checkin_computer_sets_timestamps(self, service, device_store, computer_payload):
        computer = await service.checkin_computer(computer_payload)

        assert computer.checkin_at == T0
        assert computer.updated_at == T0
        assert computer.checkout_at is None
        assert computer.owner.id == "EMP-001"
        device_store.checkin_computer.assert_awaited_once_with(computer)

    async def test_checkin_ids_are_unique(self, service, computer_payload):
        first = await service.checkin_computer(computer_payload)
        second = await service.checkin_computer(computer_payload)
        assert first.id != second.id

    async def test_checkin_frequent_requires_registration(self, service, device_store):
        device_store.is_frequent_computer_registered.return_value = False

        with pytest.raises(DeviceNotFoundError):
            await service.checkin_frequent_computer("fc-unknown")
        device_store.checkin_frequent_computer.assert_not_awaited()

    async def test_checkin_frequent_uses_clock(self, service, device_store):
        device_store.is_frequent_computer_registered.return_value = True
        device_store.checkin_frequent_computer.return_value = make_frequent("fc-1")

        frequent = await service.checkin_frequent_computer("fc-1")

        assert frequent.device.id == "fc-1"
        device_store.checkin_frequent_computer.assert_awaited_once_with("fc-1", T0)

    async def test_listing_validates_pagination(self, service, device_store):
        with pytest.raises(DeviceValidationError):
            await service.get_computers(DeviceCriteria(offset=-5))
        device_store.get_computers.assert_not_awaited()

    async def test_listing_passes_criteria(self, service, device_store):
        criteria = DeviceCriteria(search="dell")
        device_store.get_frequent_computers.return_value = [make_frequent()]

        assert len(await service.get_frequent_computers(criteria)) == 1
        device_store.get_frequent_computers.assert_awaited_once_with(criteria)


class TestMedicalDeviceService:
    @pytest.fixture
    def service(self, device_store, photo_store):
        return MedicalDeviceService(device_store, photo_store, clock=lambda: T0)

    @pytest.fixture
    def payload(self, photo):
        return {
            "brand": "Philips",
            "model": "IntelliVue",
            "serial": "SN-0001",
            "owner_name": "Alan Turing",
            "owner_id": "EMP-002",
            "photo": photo,
        }

    async def test_checkin_embeds_photo_url(self, service, device_store, payload):
        device = await service.checkin_medical_device(payload)

        assert device.photo_url == "http://registry.test/photos/device.png"
        assert device.serial == "SN-0001"
        assert device.checkin_at == T0
        device_store.checkin_medical_device.assert_awaited_once_with(device)

    async def test_missing_photo_is_a_validation_error(self, service, device_store, photo_store, payload):
        del payload["photo"]

        with pytest.raises(DeviceValidationError):
            await service.checkin_medical_device(payload)
        photo_store.save.assert_not_awaited()
        device_store.checkin_medical_device.assert_not_awaited()

    async def test_upload_failure_writes_nothing(self, service, device_store, photo_store, payload):
        photo_store.save.side_effect = PhotoUploadError("Invalid file: empty content")

        with pytest.raises(PhotoUploadError):
            await service.checkin_medical_device(payload)
        device_store.checkin_medical_device.assert_not_awaited()


class TestDeviceService:
    @pytest.fixture
    def service(self, device_store):
        return DeviceService(device_store, clock=lambda: T0)

    async def test_checkout_requires_entered_device(self, service, device_store):
        device_store.is_device_entered.return_value = False

        with pytest.raises(DeviceNotFoundError):
            await service.checkout_device("pc-1")
        device_store.checkout_device.assert_not_awaited()

    async def test_checkout_entered_device(self, service, device_store):
        device_store.is_device_entered.return_value = True

        await service.checkout_device("pc-1")

        device_store.checkout_device.assert_awaited_once_with("pc-1", T0)

    async def test_entered_devices(self, service, device_store):
        device_store.get_entered_devices.return_value = [make_computer()]
        criteria = DeviceCriteria()

        assert await service.get_entered_devices(criteria) == [make_computer()]
        device_store.get_entered_devices.assert_awaited_once_with(criteria)


class TestDeviceHistoryService:
    async def test_filters_are_forwarded(self, device_store):
        device_store.get_device_history.return_value = []
        service = DeviceHistoryService(device_store)
        filters = DeviceHistoryFilters(event=HistoryEvent.CHECKOUT, owner_id="EMP-001")

        assert await service.get_history(filters) == []
        device_store.get_device_history.assert_awaited_once_with(filters)
