"""
ABOUTME: Unit tests for the vehicle registry and vehicle id parsing
ABOUTME: Runs against the in-memory SQLite database of the testing app
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from models.tracking import TrackedVehicle
from models.vehicle import Vehicle
from services.exceptions import InvalidVehicleIdError, VehicleRegistryError
from services.vehicle_registry import VehicleRegistry, parse_vehicle_id


class TestParseVehicleId:
    @pytest.mark.parametrize("raw, expected", [("1", 1), ("42", 42), ("999999999999999999", 10**18 - 1)])
    def test_valid(self, raw, expected):
        assert parse_vehicle_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "0", "007", "-3", "+3", "3.0", "abc", "1e3", " 5", "42\n", None, 5])
    def test_invalid(self, raw):
        with pytest.raises(InvalidVehicleIdError) as exc_info:
            parse_vehicle_id(raw)
        assert exc_info.value.raw_value == raw


@pytest.fixture
def fleet(db_session):
    vehicles = [
        Vehicle("Van 2", "B-2", traccar_device_id=12, traccar_unique_id="imei-12"),
        Vehicle("Pool car", "C-3"),
        Vehicle("Van 1", "A-1", traccar_device_id=11),
        Vehicle("Orphan", traccar_unique_id="imei-only"),
    ]
    db_session.add_all(vehicles)
    db_session.commit()
    return vehicles


class TestVehicleRegistry:
    def test_get_vehicle(self, fleet):
        vehicle = VehicleRegistry().get_vehicle(fleet[0].id)

        assert vehicle == TrackedVehicle(
            car_id=fleet[0].id,
            name="Van 2",
            license_plate="B-2",
            traccar_device_id=12,
            traccar_unique_id="imei-12",
        )
        assert vehicle.is_mapped

    def test_get_missing_vehicle(self, fleet):
        assert VehicleRegistry().get_vehicle(10_000) is None

    def test_unique_id_alone_is_unmapped(self, fleet):
        vehicle = VehicleRegistry().get_vehicle(fleet[3].id)

        assert vehicle.traccar_unique_id == "imei-only"
        assert not vehicle.is_mapped

    def test_list_mapped_vehicles_in_id_order(self, fleet):
        mapped = VehicleRegistry().list_mapped_vehicles()

        assert [v.name for v in mapped] == ["Van 2", "Van 1"]
        assert [v.car_id for v in mapped] == sorted(v.car_id for v in mapped)

    def test_list_vehicles(self, fleet):
        assert [v.name for v in VehicleRegistry().list_vehicles()] == [
            "Van 2",
            "Pool car",
            "Van 1",
            "Orphan",
        ]

    def test_database_failure_is_wrapped(self, db_session):
        error = OperationalError("SELECT", {}, Exception("database is locked"))

        with patch("services.vehicle_registry.db") as mock_db:
            mock_db.session.get.side_effect = error
            with pytest.raises(VehicleRegistryError) as exc_info:
                VehicleRegistry().get_vehicle(1)

        assert exc_info.value.original_error is error


class TestVehicleModel:
    def test_to_dict(self, fleet):
        data = fleet[2].to_dict()

        assert data["name"] == "Van 1"
        assert data["traccar_device_id"] == 11
        assert data["is_mapped"] is True
        assert data["created_at"] is not None

    def test_tracked_vehicle_to_dict(self, fleet):
        data = TrackedVehicle.from_orm(fleet[1]).to_dict()

        assert data == {
            "carId": str(fleet[1].id),
            "name": "Pool car",
            "licensePlate": "C-3",
            "traccarDeviceId": None,
            "traccarUniqueId": None,
        }
