"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Order matters: import parent tables before child tables.
"""

from maintrack.models.owner_scope import OwnerScope
from maintrack.models.user import User
from maintrack.models.vehicle import Vehicle, VehicleType
from maintrack.models.component_catalog import ComponentCatalog
from maintrack.models.vehicle_component import VehicleComponent
from maintrack.models.maintenance_type import MaintenanceTypeCatalog, MaintenanceTypeComponent
from maintrack.models.maintenance_event import MaintenanceEvent
from maintrack.models.maintenance_default import MaintenanceDefaultGlobal, MaintenanceDefaultUserVehicle
from maintrack.models.audit_log import AuditAction, AuditLog

__all__ = [
    "OwnerScope",
    "User",
    "Vehicle",
    "VehicleType",
    "ComponentCatalog",
    "VehicleComponent",
    "MaintenanceTypeCatalog",
    "MaintenanceTypeComponent",
    "MaintenanceEvent",
    "MaintenanceDefaultGlobal",
    "MaintenanceDefaultUserVehicle",
    "AuditAction",
    "AuditLog",
]
