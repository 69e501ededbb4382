import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from maintrack.config import settings
from maintrack.models.component_catalog import ComponentCatalog
from maintrack.models.owner_scope import OwnerScope
from maintrack.models.vehicle import VehicleType
from maintrack.models.vehicle_component import VehicleComponent
from maintrack.schemas.component import ComponentCreateRequest, InstanceAliasRequest
from maintrack.services.scope import is_visible
from maintrack.services.vehicle_service import get_owned_vehicle
from maintrack.models.audit_log import AuditAction
from maintrack.utils.audit import log_action
from maintrack.utils.exceptions import NotFoundException, ValidationException, WarningCode, make_warning
from maintrack.utils.upsert import upsert_pair

logger = logging.getLogger(__name__)


def serialize_catalog(c: ComponentCatalog) -> dict:
    return {
        "id":          c.id,
        "ownerScope":  c.ownerScope.value,
        "ownerUserId": c.ownerUserId,
        "vehicleType": c.vehicleType.value,
        "name":        c.name,
        "iconId":      c.iconId,
        "isActive":    c.isActive,
        "sortOrder":   c.sortOrder,
    }


def serialize_instance(i: VehicleComponent) -> dict:
    return {
        "id":                 i.id,
        "vehicleId":          i.vehicleId,
        "componentCatalogId": i.componentCatalogId,
        "alias":              i.alias,
        "displayName":        i.display_name,
        "catalog":            serialize_catalog(i.catalog),
    }


def get_visible_component(db: Session, component_catalog_id: int, user_id: int) -> ComponentCatalog:
    """Load a catalog component `user_id` may see; invisible rows are reported as missing."""
    c = (
        db.query(ComponentCatalog)
        .filter(ComponentCatalog.id == component_catalog_id, is_visible(ComponentCatalog, user_id))
        .first()
    )
    if not c:
        raise NotFoundException("Component")
    return c


class ComponentService:

    def list_applicable_components(
        self, db: Session, vehicle_id: int, vehicle_type: VehicleType | None, requesting_user_id: int,
    ) -> list[dict]:
        """
        Components attached to the vehicle whose catalog entry is active, made for
        `vehicle_type` (the vehicle's own type when None) and visible to the user.
        Ordered by catalog sortOrder, then name.
        """
        vehicle = get_owned_vehicle(db, vehicle_id, requesting_user_id)
        vehicle_type = vehicle_type or vehicle.type

        items = (
            db.query(VehicleComponent)
            .join(VehicleComponent.catalog)
            .options(contains_eager(VehicleComponent.catalog))
            .filter(
                VehicleComponent.vehicleId == vehicle.id,
                ComponentCatalog.isActive.is_(True),
                ComponentCatalog.vehicleType == vehicle_type,
                is_visible(ComponentCatalog, requesting_user_id),
            )
            .order_by(ComponentCatalog.sortOrder, ComponentCatalog.name)
            .all()
        )
        return [serialize_instance(i) for i in items]

    def list_catalog(self, db: Session, vehicle_type: VehicleType, requesting_user_id: int) -> list[dict]:
        """Active catalog components for a vehicle type that the user may attach."""
        items = (
            db.query(ComponentCatalog)
            .filter(
                ComponentCatalog.isActive.is_(True),
                ComponentCatalog.vehicleType == vehicle_type,
                is_visible(ComponentCatalog, requesting_user_id),
            )
            .order_by(ComponentCatalog.sortOrder, ComponentCatalog.name)
            .all()
        )
        return [serialize_catalog(c) for c in items]

    def create_user_component(
        self, db: Session, data: ComponentCreateRequest, owner_user_id: int,
    ) -> tuple[dict, list[dict]]:
        """
        Create a component owned by `owner_user_id`, listed after the standard ones.

        With `data.vehicleId` the component is also attached to that vehicle. The
        attachment runs after the component is committed; if it fails the component
        is kept and the failure comes back as a warning.
        """
        vehicle = None
        if data.vehicleId is not None:
            vehicle = get_owned_vehicle(db, data.vehicleId, owner_user_id)
            if vehicle.type != data.vehicleType:
                raise ValidationException(
                    f"Component is for {data.vehicleType.value}s but the vehicle is a {vehicle.type.value}",
                    field="vehicleType",
                )

        component = ComponentCatalog(
            ownerScope=OwnerScope.USER,
            ownerUserId=owner_user_id,
            vehicleType=data.vehicleType,
            name=data.name,
            iconId=data.iconId,
            isActive=True,
            sortOrder=settings.USER_COMPONENT_SORT_ORDER,
        )
        db.add(component)
        db.flush()
        log_action(db, owner_user_id, AuditAction.CREATE, component,
                   f"Created component '{component.name}'")
        db.commit()
        db.refresh(component)

        warnings = []
        if vehicle is not None:
            try:
                upsert_pair(db, VehicleComponent, vehicleId=vehicle.id, componentCatalogId=component.id)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.warning(f"Component {component.id} created but not attached to vehicle {vehicle.id}: {e}")
                warnings.append(make_warning(
                    WarningCode.INSTANCE_NOT_CREATED,
                    "Component was created but could not be added to the vehicle",
                ))

        return serialize_catalog(component), warnings

    def ensure_instance(
        self, db: Session, vehicle_id: int, component_catalog_id: int, requesting_user_id: int,
    ) -> dict:
        """Return the vehicle's instance of a catalog component, creating it on first use."""
        vehicle = get_owned_vehicle(db, vehicle_id, requesting_user_id)
        component = get_visible_component(db, component_catalog_id, requesting_user_id)

        instance = upsert_pair(db, VehicleComponent, vehicleId=vehicle.id, componentCatalogId=component.id)
        db.commit()
        return serialize_instance(instance)

    def rename_instance(
        self, db: Session, vehicle_id: int, instance_id: int, data: InstanceAliasRequest, requesting_user_id: int,
    ) -> dict:
        vehicle = get_owned_vehicle(db, vehicle_id, requesting_user_id)
        instance = (
            db.query(VehicleComponent)
            .filter(VehicleComponent.id == instance_id, VehicleComponent.vehicleId == vehicle.id)
            .first()
        )
        if not instance:
            raise NotFoundException("Vehicle component")

        instance.alias = data.alias
        log_action(db, requesting_user_id, AuditAction.UPDATE, instance,
                   f"Alias set to '{data.alias}'" if data.alias else "Alias cleared")
        db.commit()
        db.refresh(instance)
        return serialize_instance(instance)


component_service = ComponentService()
