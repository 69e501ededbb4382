#!/usr/bin/env python3
"""Tests for maintenance types: catalog visibility, component links and default intervals."""
import unittest
from unittest.mock import patch

import pydantic
from sqlalchemy.exc import OperationalError

from maintrack.models.maintenance_type import MaintenanceTypeCatalog, MaintenanceTypeComponent
from maintrack.models.vehicle import VehicleType
from maintrack.schemas.component import ComponentCreateRequest
from maintrack.schemas.maintenance_type import DefaultIntervalRequest, MaintenanceTypeCreateRequest
from maintrack.services.component_service import component_service
from maintrack.services.maintenance_type_service import maintenance_type_service
from maintrack.utils.exceptions import ForbiddenException, NotFoundException, WarningCode

from support import API, ApiTestCase, DatabaseTestCase


def _names(items):
    return [i["name"] for i in items]


class TestMappedAndUnmapped(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.brakes = self.global_component("Brakes")
        self.bob_type, _ = maintenance_type_service.create_user_type(
            self.db, MaintenanceTypeCreateRequest(name="Bob's ritual", linkToComponentId=self.brakes.id),
            self.bob.id,
        )

    def test_split_is_a_partition_of_visible_types(self):
        mapped = maintenance_type_service.list_mapped_types(self.db, self.brakes.id, self.alice.id)
        unmapped = maintenance_type_service.list_unmapped_types(self.db, self.brakes.id, self.alice.id)
        visible = maintenance_type_service.list_visible_types(self.db, self.alice.id)

        mapped_ids = {t["id"] for t in mapped}
        unmapped_ids = {t["id"] for t in unmapped}
        self.assertEqual(mapped_ids & unmapped_ids, set())
        self.assertEqual(mapped_ids | unmapped_ids, {t["id"] for t in visible})

    def test_mapped_lists_linked_types_by_name(self):
        mapped = _names(maintenance_type_service.list_mapped_types(self.db, self.brakes.id, self.alice.id))
        self.assertEqual(mapped, sorted(mapped))
        self.assertIn("Brake service", mapped)
        self.assertIn("Replace", mapped)
        self.assertNotIn("Oil change", mapped)

    def test_other_users_types_are_invisible(self):
        for listing in (
            maintenance_type_service.list_visible_types(self.db, self.alice.id),
            maintenance_type_service.list_mapped_types(self.db, self.brakes.id, self.alice.id),
            maintenance_type_service.list_unmapped_types(self.db, self.brakes.id, self.alice.id),
        ):
            self.assertNotIn("Bob's ritual", _names(listing))
        self.assertIn("Bob's ritual",
                      _names(maintenance_type_service.list_mapped_types(self.db, self.brakes.id, self.bob.id)))

    def test_invisible_component_not_found(self):
        bobs, _ = component_service.create_user_component(
            self.db, ComponentCreateRequest(name="Secret", vehicleType=VehicleType.CAR), self.bob.id,
        )
        with self.assertRaises(NotFoundException):
            maintenance_type_service.list_mapped_types(self.db, bobs["id"], self.alice.id)


class TestCreateUserType(DatabaseTestCase):

    def test_blank_name_rejected(self):
        with self.assertRaises(pydantic.ValidationError):
            MaintenanceTypeCreateRequest(name="  ")

    def test_created_with_link(self):
        brakes = self.global_component("Brakes")
        data, warnings = maintenance_type_service.create_user_type(
            self.db, MaintenanceTypeCreateRequest(name=" Pad check ", linkToComponentId=brakes.id), self.alice.id,
        )
        self.assertEqual(warnings, [])
        self.assertEqual(data["name"], "Pad check")
        self.assertEqual(data["ownerScope"], "user")
        self.assertEqual(data["ownerUserId"], self.alice.id)
        self.assertIn("Pad check",
                      _names(maintenance_type_service.list_mapped_types(self.db, brakes.id, self.alice.id)))

    def test_failed_link_keeps_type_and_warns(self):
        brakes = self.global_component("Brakes")
        with patch("maintrack.services.maintenance_type_service.upsert_pair",
                   side_effect=OperationalError("INSERT", {}, Exception("store down"))):
            data, warnings = maintenance_type_service.create_user_type(
                self.db, MaintenanceTypeCreateRequest(name="Pad check", linkToComponentId=brakes.id), self.alice.id,
            )
        self.assertEqual([w["code"] for w in warnings], [WarningCode.LINK_NOT_CREATED])
        self.assertIsNotNone(self.db.get(MaintenanceTypeCatalog, data["id"]))
        self.assertIn("Pad check",
                      _names(maintenance_type_service.list_unmapped_types(self.db, brakes.id, self.alice.id)))

    def test_invisible_link_target_rejected_before_write(self):
        bobs, _ = component_service.create_user_component(
            self.db, ComponentCreateRequest(name="Secret", vehicleType=VehicleType.CAR), self.bob.id,
        )
        before = self.db.query(MaintenanceTypeCatalog).count()
        with self.assertRaises(NotFoundException):
            maintenance_type_service.create_user_type(
                self.db, MaintenanceTypeCreateRequest(name="Pad check", linkToComponentId=bobs["id"]), self.alice.id,
            )
        self.assertEqual(self.db.query(MaintenanceTypeCatalog).count(), before)


class TestLinks(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.wipers = self.global_component("Wiper blades")
        self.mine, _ = maintenance_type_service.create_user_type(
            self.db, MaintenanceTypeCreateRequest(name="Rubber swap"), self.alice.id,
        )

    def _link_count(self):
        return (
            self.db.query(MaintenanceTypeComponent)
            .filter_by(maintenanceTypeId=self.mine["id"], componentCatalogId=self.wipers.id)
            .count()
        )

    def test_link_is_idempotent(self):
        first = maintenance_type_service.link_type(self.db, self.mine["id"], self.wipers.id, self.alice.id)
        second = maintenance_type_service.link_type(self.db, self.mine["id"], self.wipers.id, self.alice.id)
        self.assertEqual(first["id"], second["id"])
        self.assertEqual(self._link_count(), 1)

    def test_unlink(self):
        maintenance_type_service.link_type(self.db, self.mine["id"], self.wipers.id, self.alice.id)
        maintenance_type_service.unlink_type(self.db, self.mine["id"], self.wipers.id, self.alice.id)
        self.assertEqual(self._link_count(), 0)
        # a second removal is a no-op
        maintenance_type_service.unlink_type(self.db, self.mine["id"], self.wipers.id, self.alice.id)

    def test_standard_links_are_protected(self):
        brake_service = self.db.query(MaintenanceTypeCatalog).filter_by(name="Brake service").one()
        brakes = self.global_component("Brakes")
        with self.assertRaises(ForbiddenException):
            maintenance_type_service.unlink_type(self.db, brake_service.id, brakes.id, self.alice.id)

    def test_standard_pairs_cannot_be_linked(self):
        tire_change = self.db.query(MaintenanceTypeCatalog).filter_by(name="Tire change").one()
        battery = self.global_component("Battery")
        before = _names(maintenance_type_service.list_mapped_types(self.db, battery.id, self.bob.id))

        with self.assertRaises(ForbiddenException):
            maintenance_type_service.link_type(self.db, tire_change.id, battery.id, self.alice.id)

        self.assertEqual(
            self.db.query(MaintenanceTypeComponent)
            .filter_by(maintenanceTypeId=tire_change.id, componentCatalogId=battery.id)
            .count(),
            0,
        )
        self.assertEqual(_names(maintenance_type_service.list_mapped_types(self.db, battery.id, self.bob.id)),
                         before)

    def test_own_type_links_to_standard_component(self):
        maintenance_type_service.link_type(self.db, self.mine["id"], self.wipers.id, self.alice.id)
        self.assertIn("Rubber swap",
                      _names(maintenance_type_service.list_mapped_types(self.db, self.wipers.id, self.alice.id)))
        self.assertNotIn("Rubber swap",
                         _names(maintenance_type_service.list_mapped_types(self.db, self.wipers.id, self.bob.id)))

    def test_cannot_link_other_users_type(self):
        with self.assertRaises(NotFoundException):
            maintenance_type_service.link_type(self.db, self.mine["id"], self.wipers.id, self.bob.id)


class TestDefaultIntervals(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.oil_change = self.db.query(MaintenanceTypeCatalog).filter_by(name="Oil change").one()
        self.vehicle = self.add_vehicle(self.alice)
        self.other_vehicle = self.add_vehicle(self.alice, brand="Skoda", model="Octavia")

    def test_global_default(self):
        d = maintenance_type_service.resolve_default_interval(self.db, self.oil_change.id, None, self.alice.id)
        self.assertEqual(d["source"], "global")
        self.assertEqual((d["intervalKm"], d["intervalTimeMonths"]), (10000, 12))

    def test_no_default(self):
        tire_change = self.db.query(MaintenanceTypeCatalog).filter_by(name="Tire change").one()
        d = maintenance_type_service.resolve_default_interval(self.db, tire_change.id, self.vehicle["id"],
                                                              self.alice.id)
        self.assertEqual(d["source"], "none")
        self.assertIsNone(d["intervalKm"])
        self.assertIsNone(d["intervalTimeMonths"])

    def test_vehicle_default_overrides_global_for_that_vehicle_only(self):
        d = maintenance_type_service.set_vehicle_default(
            self.db, self.oil_change.id, self.vehicle["id"],
            DefaultIntervalRequest(defaultIntervalKm=7500), self.alice.id,
        )
        self.assertEqual(d["source"], "vehicle")
        self.assertEqual((d["intervalKm"], d["intervalTimeMonths"]), (7500, None))

        other = maintenance_type_service.resolve_default_interval(
            self.db, self.oil_change.id, self.other_vehicle["id"], self.alice.id,
        )
        self.assertEqual(other["source"], "global")

    def test_setting_twice_replaces(self):
        for km in (7500, 8000):
            d = maintenance_type_service.set_vehicle_default(
                self.db, self.oil_change.id, self.vehicle["id"],
                DefaultIntervalRequest(defaultIntervalKm=km, defaultIntervalTimeMonths=6), self.alice.id,
            )
        self.assertEqual((d["intervalKm"], d["intervalTimeMonths"]), (8000, 6))

    def test_empty_interval_rejected(self):
        with self.assertRaises(pydantic.ValidationError):
            DefaultIntervalRequest()
        with self.assertRaises(pydantic.ValidationError):
            DefaultIntervalRequest(defaultIntervalKm=0)

    def test_other_users_vehicle_not_found(self):
        with self.assertRaises(NotFoundException):
            maintenance_type_service.set_vehicle_default(
                self.db, self.oil_change.id, self.vehicle["id"],
                DefaultIntervalRequest(defaultIntervalKm=5000), self.bob.id,
            )


class TestLinkRoute(ApiTestCase):

    def _find(self, path, name, **params):
        items = self.client.get(f"{API}/{path}", params=params, headers=self.as_user(self.alice_id)).json()["data"]
        return next(i for i in items if i["name"] == name)

    def _mapped_for_bob(self, component_id):
        res = self.client.get(f"{API}/maintenance-types/by-component/{component_id}", headers=self.as_user(self.bob_id))
        return _names(res.json()["data"]["mapped"])

    def test_standard_pair_rejected(self):
        tire_change = self._find("maintenance-types", "Tire change")
        battery = self._find("components/catalog", "Battery", vehicleType="car")
        before = self._mapped_for_bob(battery["id"])

        res = self.client.put(f"{API}/maintenance-types/{tire_change['id']}/components/{battery['id']}",
                              headers=self.as_user(self.alice_id))
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.json()["error"]["code"], "FORBIDDEN")
        self.assertEqual(self._mapped_for_bob(battery["id"]), before)

    def test_own_type_linked(self):
        battery = self._find("components/catalog", "Battery", vehicleType="car")
        created = self.client.post(f"{API}/maintenance-types", json={"name": "Terminal grease"},
                                   headers=self.as_user(self.alice_id))
        self.assertEqual(created.status_code, 201, created.text)

        res = self.client.put(f"{API}/maintenance-types/{created.json()['data']['id']}/components/{battery['id']}",
                              headers=self.as_user(self.alice_id))
        self.assertEqual(res.status_code, 200, res.text)
        mapped = self.client.get(f"{API}/maintenance-types/by-component/{battery['id']}",
                                 headers=self.as_user(self.alice_id)).json()["data"]["mapped"]
        self.assertIn("Terminal grease", _names(mapped))
        self.assertNotIn("Terminal grease", self._mapped_for_bob(battery["id"]))


if __name__ == "__main__":
    unittest.main()
