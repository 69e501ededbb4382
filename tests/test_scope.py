#!/usr/bin/env python3
"""Tests for the ownership scope predicate."""
import unittest
from types import SimpleNamespace

from maintrack.models.component_catalog import ComponentCatalog
from maintrack.models.maintenance_type import MaintenanceTypeCatalog
from maintrack.models.owner_scope import OwnerScope
from maintrack.models.vehicle import VehicleType
from maintrack.services.scope import is_visible, filter_visible

from support import DatabaseTestCase


class TestIsVisible(unittest.TestCase):
    """The three scope/owner combinations on plain rows."""

    def test_global_entry_visible_to_anyone(self):
        entry = SimpleNamespace(ownerScope=OwnerScope.GLOBAL, ownerUserId=None)
        self.assertTrue(is_visible(entry, 1))
        self.assertTrue(is_visible(entry, 2))

    def test_user_entry_visible_to_owner(self):
        entry = SimpleNamespace(ownerScope=OwnerScope.USER, ownerUserId=7)
        self.assertTrue(is_visible(entry, 7))

    def test_user_entry_hidden_from_others(self):
        entry = SimpleNamespace(ownerScope=OwnerScope.USER, ownerUserId=7)
        self.assertFalse(is_visible(entry, 8))

    def test_plain_string_scope(self):
        """Rows read from a raw query carry the scope as a string."""
        self.assertTrue(is_visible(SimpleNamespace(ownerScope="global", ownerUserId=None), 3))
        self.assertFalse(is_visible(SimpleNamespace(ownerScope="user", ownerUserId=4), 3))

    def test_filter_visible_keeps_order(self):
        rows = [
            SimpleNamespace(ownerScope=OwnerScope.USER, ownerUserId=1, name="mine"),
            SimpleNamespace(ownerScope=OwnerScope.USER, ownerUserId=2, name="theirs"),
            SimpleNamespace(ownerScope=OwnerScope.GLOBAL, ownerUserId=None, name="shared"),
        ]
        self.assertEqual([r.name for r in filter_visible(rows, 1)], ["mine", "shared"])


class TestIsVisibleInQueries(DatabaseTestCase):
    """The same predicate used as a query filter agrees with the row-level result."""

    def setUp(self):
        super().setUp()
        self.db.add_all([
            ComponentCatalog(ownerScope=OwnerScope.USER, ownerUserId=self.alice.id,
                             vehicleType=VehicleType.CAR, name="Alice part", sortOrder=999),
            ComponentCatalog(ownerScope=OwnerScope.USER, ownerUserId=self.bob.id,
                             vehicleType=VehicleType.CAR, name="Bob part", sortOrder=999),
            MaintenanceTypeCatalog(ownerScope=OwnerScope.USER, ownerUserId=self.bob.id, name="Bob job"),
        ])
        self.db.commit()

    def test_component_query_matches_row_predicate(self):
        everything = self.db.query(ComponentCatalog).all()
        queried = self.db.query(ComponentCatalog).filter(is_visible(ComponentCatalog, self.alice.id)).all()
        self.assertEqual({c.id for c in queried}, {c.id for c in everything if is_visible(c, self.alice.id)})
        names = {c.name for c in queried}
        self.assertIn("Alice part", names)
        self.assertNotIn("Bob part", names)

    def test_maintenance_type_query_hides_other_users(self):
        names = {
            t.name for t in
            self.db.query(MaintenanceTypeCatalog).filter(is_visible(MaintenanceTypeCatalog, self.alice.id)).all()
        }
        self.assertIn("Oil change", names)
        self.assertNotIn("Bob job", names)


if __name__ == "__main__":
    unittest.main()
