import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from maintrack.models.component_catalog import ComponentCatalog
from maintrack.models.maintenance_default import MaintenanceDefaultUserVehicle
from maintrack.models.maintenance_type import MaintenanceTypeCatalog, MaintenanceTypeComponent
from maintrack.models.owner_scope import OwnerScope
from maintrack.schemas.maintenance_type import MaintenanceTypeCreateRequest, DefaultIntervalRequest
from maintrack.services.component_service import get_visible_component
from maintrack.services.scope import is_visible
from maintrack.services.vehicle_service import get_owned_vehicle
from maintrack.models.audit_log import AuditAction
from maintrack.utils.audit import log_action
from maintrack.utils.exceptions import (
    NotFoundException, ForbiddenException, WarningCode, make_warning,
)
from maintrack.utils.upsert import upsert_pair

logger = logging.getLogger(__name__)


def serialize_type(t: MaintenanceTypeCatalog) -> dict:
    return {
        "id":          t.id,
        "ownerScope":  t.ownerScope.value,
        "ownerUserId": t.ownerUserId,
        "name":        t.name,
        "description": t.description,
        "isStandard":  t.isStandard,
    }


def get_visible_type(db: Session, maintenance_type_id: int, user_id: int) -> MaintenanceTypeCatalog:
    """Load a maintenance type `user_id` may see; invisible rows are reported as missing."""
    t = (
        db.query(MaintenanceTypeCatalog)
        .filter(MaintenanceTypeCatalog.id == maintenance_type_id, is_visible(MaintenanceTypeCatalog, user_id))
        .first()
    )
    if not t:
        raise NotFoundException("Maintenance type")
    return t


def _visible_types_query(db: Session, user_id: int):
    return (
        db.query(MaintenanceTypeCatalog)
        .filter(is_visible(MaintenanceTypeCatalog, user_id))
        .order_by(MaintenanceTypeCatalog.name, MaintenanceTypeCatalog.id)
    )


def _mapped_ids(component_catalog_id: int):
    return (
        select(MaintenanceTypeComponent.maintenanceTypeId)
        .where(MaintenanceTypeComponent.componentCatalogId == component_catalog_id)
    )


def _check_not_standard_link(mtype: MaintenanceTypeCatalog, component: ComponentCatalog) -> None:
    if mtype.ownerScope == OwnerScope.GLOBAL and component.ownerScope == OwnerScope.GLOBAL:
        raise ForbiddenException("Links between standard types and standard components cannot be changed")


class MaintenanceTypeService:

    # ─── Catalog ──────────────────────────────────────────────────────────────
    def list_visible_types(self, db: Session, requesting_user_id: int) -> list[dict]:
        return [serialize_type(t) for t in _visible_types_query(db, requesting_user_id).all()]

    def list_mapped_types(self, db: Session, component_catalog_id: int, requesting_user_id: int) -> list[dict]:
        """Visible types linked to the component, by name."""
        component = get_visible_component(db, component_catalog_id, requesting_user_id)
        items = (
            _visible_types_query(db, requesting_user_id)
            .filter(MaintenanceTypeCatalog.id.in_(_mapped_ids(component.id)))
            .all()
        )
        return [serialize_type(t) for t in items]

    def list_unmapped_types(self, db: Session, component_catalog_id: int, requesting_user_id: int) -> list[dict]:
        """Visible types not linked to the component, by name. Never overlaps the mapped list."""
        component = get_visible_component(db, component_catalog_id, requesting_user_id)
        items = (
            _visible_types_query(db, requesting_user_id)
            .filter(MaintenanceTypeCatalog.id.not_in(_mapped_ids(component.id)))
            .all()
        )
        return [serialize_type(t) for t in items]

    def create_user_type(
        self, db: Session, data: MaintenanceTypeCreateRequest, owner_user_id: int,
    ) -> tuple[dict, list[dict]]:
        """
        Create a maintenance type owned by `owner_user_id`.

        With `data.linkToComponentId` the type is also linked to that component.
        The link is written after the type is committed; a failed link leaves the
        type in place and is returned as a warning.
        """
        component = None
        if data.linkToComponentId is not None:
            component = get_visible_component(db, data.linkToComponentId, owner_user_id)

        mtype = MaintenanceTypeCatalog(
            ownerScope=OwnerScope.USER,
            ownerUserId=owner_user_id,
            name=data.name,
            description=data.description,
            isStandard=True,
        )
        db.add(mtype)
        db.flush()
        log_action(db, owner_user_id, AuditAction.CREATE, mtype,
                   f"Created maintenance type '{mtype.name}'")
        db.commit()
        db.refresh(mtype)

        warnings = []
        if component is not None:
            try:
                upsert_pair(db, MaintenanceTypeComponent,
                            maintenanceTypeId=mtype.id, componentCatalogId=component.id)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.warning(f"Maintenance type {mtype.id} created but not linked to component {component.id}: {e}")
                warnings.append(make_warning(
                    WarningCode.LINK_NOT_CREATED,
                    "Maintenance type was created but could not be linked to the component",
                ))

        return serialize_type(mtype), warnings

    # ─── Links ────────────────────────────────────────────────────────────────
    def link_type(
        self, db: Session, maintenance_type_id: int, component_catalog_id: int, requesting_user_id: int,
    ) -> dict:
        """
        Link a type to a component. Linking an already linked pair is a no-op.
        Links between two global rows are shared by every user and only seeded.
        """
        mtype = get_visible_type(db, maintenance_type_id, requesting_user_id)
        component = get_visible_component(db, component_catalog_id, requesting_user_id)
        _check_not_standard_link(mtype, component)

        link = upsert_pair(db, MaintenanceTypeComponent,
                           maintenanceTypeId=mtype.id, componentCatalogId=component.id)
        log_action(db, requesting_user_id, AuditAction.LINK, link,
                   f"'{mtype.name}' linked to '{component.name}'")
        db.commit()
        return {"id": link.id, "maintenanceTypeId": mtype.id, "componentCatalogId": component.id}

    def unlink_type(
        self, db: Session, maintenance_type_id: int, component_catalog_id: int, requesting_user_id: int,
    ) -> None:
        """Remove a link. Removing a missing link is a no-op; links between two global rows are protected."""
        mtype = get_visible_type(db, maintenance_type_id, requesting_user_id)
        component = get_visible_component(db, component_catalog_id, requesting_user_id)
        _check_not_standard_link(mtype, component)

        link = (
            db.query(MaintenanceTypeComponent)
            .filter_by(maintenanceTypeId=mtype.id, componentCatalogId=component.id)
            .first()
        )
        if link is None:
            return
        log_action(db, requesting_user_id, AuditAction.UNLINK, link,
                   f"'{mtype.name}' unlinked from '{component.name}'")
        db.delete(link)
        db.commit()

    # ─── Default intervals ────────────────────────────────────────────────────
    def resolve_default_interval(
        self, db: Session, maintenance_type_id: int, vehicle_id: int | None, requesting_user_id: int,
    ) -> dict:
        """
        Suggested interval for a new event: the user's own default for this vehicle,
        else the global default of the type, else none.
        """
        mtype = get_visible_type(db, maintenance_type_id, requesting_user_id)

        if vehicle_id is not None:
            vehicle = get_owned_vehicle(db, vehicle_id, requesting_user_id)
            own = (
                db.query(MaintenanceDefaultUserVehicle)
                .filter_by(vehicleId=vehicle.id, maintenanceTypeId=mtype.id, userId=requesting_user_id)
                .first()
            )
            if own:
                return {
                    "maintenanceTypeId":  mtype.id,
                    "source":             "vehicle",
                    "intervalKm":         own.defaultIntervalKm,
                    "intervalTimeMonths": own.defaultIntervalTimeMonths,
                }

        shared = mtype.global_default
        if shared:
            return {
                "maintenanceTypeId":  mtype.id,
                "source":             "global",
                "intervalKm":         shared.defaultIntervalKm,
                "intervalTimeMonths": shared.defaultIntervalTimeMonths,
            }
        return {"maintenanceTypeId": mtype.id, "source": "none", "intervalKm": None, "intervalTimeMonths": None}

    def set_vehicle_default(
        self, db: Session, maintenance_type_id: int, vehicle_id: int,
        data: DefaultIntervalRequest, requesting_user_id: int,
    ) -> dict:
        mtype = get_visible_type(db, maintenance_type_id, requesting_user_id)
        vehicle = get_owned_vehicle(db, vehicle_id, requesting_user_id)

        row = upsert_pair(db, MaintenanceDefaultUserVehicle, defaults={"userId": requesting_user_id},
                          vehicleId=vehicle.id, maintenanceTypeId=mtype.id)
        row.defaultIntervalKm = data.defaultIntervalKm
        row.defaultIntervalTimeMonths = data.defaultIntervalTimeMonths
        log_action(db, requesting_user_id, AuditAction.UPDATE, row,
                   f"Default interval for '{mtype.name}': {data.defaultIntervalKm} km / "
                   f"{data.defaultIntervalTimeMonths} months")
        db.commit()
        return self.resolve_default_interval(db, mtype.id, vehicle.id, requesting_user_id)


maintenance_type_service = MaintenanceTypeService()
