import logging

from sqlalchemy.orm import Session

from maintrack.models.component_catalog import ComponentCatalog
from maintrack.models.maintenance_default import MaintenanceDefaultGlobal
from maintrack.models.maintenance_type import MaintenanceTypeCatalog, MaintenanceTypeComponent
from maintrack.models.owner_scope import OwnerScope
from maintrack.models.vehicle import VehicleType
from maintrack.models.audit_log import AuditAction
from maintrack.utils.audit import log_action

logger = logging.getLogger(__name__)


# (name, icon) per vehicle type, in display order; sortOrder = 10, 20, ...
GLOBAL_COMPONENTS = {
    VehicleType.CAR: [
        ("Engine oil",       "droplet"),
        ("Oil filter",       "filter"),
        ("Air filter",       "wind"),
        ("Cabin air filter", "fan"),
        ("Brakes",           "disc"),
        ("Brake fluid",      "droplet"),
        ("Tires",            "circle"),
        ("Battery",          "battery"),
        ("Coolant",          "thermometer"),
        ("Spark plugs",      "zap"),
        ("Timing belt",      "settings"),
        ("Wiper blades",     "cloud-rain"),
    ],
    VehicleType.MOTORCYCLE: [
        ("Engine oil",  "droplet"),
        ("Oil filter",  "filter"),
        ("Air filter",  "wind"),
        ("Chain",       "link"),
        ("Sprockets",   "settings"),
        ("Brakes",      "disc"),
        ("Brake fluid", "droplet"),
        ("Tires",       "circle"),
        ("Battery",     "battery"),
        ("Spark plugs", "zap"),
        ("Coolant",     "thermometer"),
        ("Valve clearance", "sliders"),
    ],
}

# name, description, default km, default months, component names it applies to
GLOBAL_MAINTENANCE_TYPES = [
    ("Oil change",        "Replace engine oil and oil filter", 10000, 12, ["Engine oil", "Oil filter"]),
    ("Replace",           "Replace the part with a new one",   None,  None, None),
    ("Inspection",        "Visual and functional check",       None,  12, None),
    ("Air filter change", "Replace the engine air filter",     20000, 24, ["Air filter", "Cabin air filter"]),
    ("Brake service",     "Pads, discs and calipers",          30000, 24, ["Brakes"]),
    ("Brake fluid flush", "Replace hydraulic brake fluid",     None,  24, ["Brake fluid"]),
    ("Tire change",       "Mount new tires",                   None,  None, ["Tires"]),
    ("Tire rotation",     "Swap tire positions",               10000, 6, ["Tires"]),
    ("Chain service",     "Clean, lubricate and adjust",       1000,  None, ["Chain", "Sprockets"]),
    ("Coolant change",    "Flush and refill coolant",          None,  48, ["Coolant"]),
    ("Spark plug change", "Replace spark plugs",               30000, None, ["Spark plugs"]),
    ("Valve adjustment",  "Check and adjust valve clearance",  24000, None, ["Valve clearance"]),
    ("Timing belt change", "Replace timing belt and tensioner", 120000, 96, ["Timing belt"]),
]


def _seed_components(db: Session) -> int:
    existing = {
        (c.vehicleType, c.name)
        for c in db.query(ComponentCatalog).filter(ComponentCatalog.ownerScope == OwnerScope.GLOBAL).all()
    }
    added = 0
    for vehicle_type, rows in GLOBAL_COMPONENTS.items():
        for position, (name, icon) in enumerate(rows, start=1):
            if (vehicle_type, name) in existing:
                continue
            db.add(ComponentCatalog(
                ownerScope=OwnerScope.GLOBAL,
                ownerUserId=None,
                vehicleType=vehicle_type,
                name=name,
                iconId=icon,
                isActive=True,
                sortOrder=position * 10,
            ))
            added += 1
    db.flush()
    return added


def _seed_maintenance_types(db: Session) -> int:
    existing = {
        t.name: t
        for t in db.query(MaintenanceTypeCatalog).filter(MaintenanceTypeCatalog.ownerScope == OwnerScope.GLOBAL).all()
    }
    components = db.query(ComponentCatalog).filter(ComponentCatalog.ownerScope == OwnerScope.GLOBAL).all()
    linked = {
        (l.maintenanceTypeId, l.componentCatalogId) for l in db.query(MaintenanceTypeComponent).all()
    }

    added = 0
    for name, description, km, months, component_names in GLOBAL_MAINTENANCE_TYPES:
        mtype = existing.get(name)
        if mtype is None:
            mtype = MaintenanceTypeCatalog(
                ownerScope=OwnerScope.GLOBAL,
                ownerUserId=None,
                name=name,
                description=description,
                isStandard=True,
            )
            db.add(mtype)
            db.flush()
            added += 1
            if km or months:
                db.add(MaintenanceDefaultGlobal(
                    maintenanceTypeId=mtype.id,
                    defaultIntervalKm=km,
                    defaultIntervalTimeMonths=months,
                ))

        # None = generic type, offered for every component
        targets = components if component_names is None else [c for c in components if c.name in component_names]
        for component in targets:
            if (mtype.id, component.id) not in linked:
                db.add(MaintenanceTypeComponent(maintenanceTypeId=mtype.id, componentCatalogId=component.id))
                linked.add((mtype.id, component.id))
    db.flush()
    return added


def seed_catalog(db: Session) -> None:
    """Insert the global components, maintenance types, links and default intervals if not already present."""
    components = _seed_components(db)
    types = _seed_maintenance_types(db)
    if components or types:
        log_action(db, None, AuditAction.SEED, "Catalog",
                   f"Seeded {components} global components and {types} global maintenance types")
        logger.info(f"Catalog seeded: {components} components, {types} maintenance types")
    db.commit()
