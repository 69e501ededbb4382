"""Shared fixtures: a seeded in-memory SQLite store with two users, for service and HTTP tests."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import maintrack.models  # noqa: F401
from maintrack.database import Base, get_db
from maintrack.main import app
from maintrack.models.component_catalog import ComponentCatalog
from maintrack.models.owner_scope import OwnerScope
from maintrack.models.user import User
from maintrack.models.vehicle import VehicleType
from maintrack.schemas.vehicle import VehicleCreateRequest
from maintrack.seeds import seed_catalog
from maintrack.services.vehicle_service import vehicle_service


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Fresh seeded database per test, with users `alice` and `bob`."""

    def setUp(self):
        self.engine = make_engine()
        self.Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)
        self.db = self.Session()
        seed_catalog(self.db)

        self.alice = User(displayName="Alice")
        self.bob = User(displayName="Bob")
        self.db.add_all([self.alice, self.bob])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    # ─── Helpers ──────────────────────────────────────────────────────────────
    def add_vehicle(self, user, vehicle_type=VehicleType.CAR, current_km=0, brand="VW", model="Golf") -> dict:
        data = VehicleCreateRequest(brand=brand, model=model, type=vehicle_type, currentKm=current_km)
        return vehicle_service.create_vehicle(self.db, data, user.id)

    def global_component(self, name, vehicle_type=VehicleType.CAR) -> ComponentCatalog:
        return (
            self.db.query(ComponentCatalog)
            .filter_by(ownerScope=OwnerScope.GLOBAL, vehicleType=vehicle_type, name=name)
            .one()
        )


API = "/api/v1"


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine()
        Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)

        with Session() as db:
            seed_catalog(db)
            alice, bob = User(displayName="Alice"), User(displayName="Bob")
            db.add_all([alice, bob])
            db.commit()
            self.alice_id, self.bob_id = alice.id, bob.id

        def override_get_db():
            db = Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        # no context manager: startup (real database + seeding) is not run
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def as_user(self, user_id) -> dict:
        return {"X-User-Id": str(user_id)}

    def create_vehicle(self, user_id=None, **body) -> dict:
        payload = {"brand": "Honda", "model": "CB500", "type": "motorcycle", "currentKm": 0}
        payload.update(body)
        res = self.client.post(f"{API}/vehicles", json=payload, headers=self.as_user(user_id or self.alice_id))
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()["data"]
