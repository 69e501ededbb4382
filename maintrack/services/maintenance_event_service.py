import calendar
import logging
from datetime import date, datetime, timezone

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from maintrack.models.maintenance_event import MaintenanceEvent
from maintrack.models.vehicle import Vehicle
from maintrack.models.vehicle_component import VehicleComponent
from maintrack.schemas.maintenance_event import MaintenanceEventRequest
from maintrack.services.maintenance_type_service import get_visible_type
from maintrack.services.progress import compute_progress
from maintrack.services.vehicle_service import get_owned_vehicle
from maintrack.models.audit_log import AuditAction
from maintrack.utils.audit import log_action
from maintrack.utils.exceptions import (
    NotFoundException, ValidationException, WarningCode, make_warning,
)

logger = logging.getLogger(__name__)

# Fields replaced wholesale on update
_MUTABLE_FIELDS = (
    "vehicleId", "vehicleComponentId", "maintenanceTypeId", "performedAt", "kmAtService",
    "customName", "note", "intervalKm", "intervalTimeMonths", "details",
)


def _serialize(e: MaintenanceEvent, now: date | datetime | None = None) -> dict:
    progress = compute_progress(e, e.vehicle.currentKm, now or datetime.now(timezone.utc))
    return {
        "id":                 e.id,
        "vehicleId":          e.vehicleId,
        "vehicle":            {"id": e.vehicle.id, "brand": e.vehicle.brand, "model": e.vehicle.model},
        "vehicleComponentId": e.vehicleComponentId,
        "componentName":      e.component.display_name,
        "maintenanceTypeId":  e.maintenanceTypeId,
        "maintenanceTypeName": e.maintenance_type.name if e.maintenance_type else None,
        "performedAt":        e.performedAt.isoformat(),
        "kmAtService":        e.kmAtService,
        "customName":         e.customName,
        "note":               e.note,
        "intervalKm":         e.intervalKm,
        "intervalTimeMonths": e.intervalTimeMonths,
        "details":            e.details,
        "progress":           progress.model_dump() if progress else None,
    }


def _event_query(db: Session):
    return db.query(MaintenanceEvent).options(
        joinedload(MaintenanceEvent.vehicle),
        joinedload(MaintenanceEvent.component).joinedload(VehicleComponent.catalog),
        joinedload(MaintenanceEvent.maintenance_type),
    )


def _get_owned_event(db: Session, event_id: int, user_id: int) -> MaintenanceEvent:
    e = (
        _event_query(db)
        .join(MaintenanceEvent.vehicle)
        .filter(MaintenanceEvent.id == event_id, Vehicle.userId == user_id)
        .first()
    )
    if not e:
        raise NotFoundException("Maintenance event")
    return e


def _check_references(db: Session, data: MaintenanceEventRequest, user_id: int) -> None:
    """Reject unknown or foreign references before anything is written."""
    vehicle = get_owned_vehicle(db, data.vehicleId, user_id)

    instance = (
        db.query(VehicleComponent)
        .join(VehicleComponent.vehicle)
        .filter(VehicleComponent.id == data.vehicleComponentId, Vehicle.userId == user_id)
        .first()
    )
    if not instance:
        raise NotFoundException("Vehicle component")
    if instance.vehicleId != vehicle.id:
        raise ValidationException("Component does not belong to this vehicle", field="vehicleComponentId")

    if data.maintenanceTypeId is not None:
        get_visible_type(db, data.maintenanceTypeId, user_id)


def _raise_odometer(db: Session, vehicle_id: int, km: int) -> list[dict]:
    """
    Raise the vehicle's currentKm to `km` if it is lower; never lowers it.
    Runs in its own transaction after the event is committed. A failure is
    rolled back and returned as a warning.
    """
    try:
        db.execute(
            update(Vehicle)
            .where(Vehicle.id == vehicle_id, Vehicle.currentKm < km)
            .values(currentKm=km)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        # expire_on_commit is off: reload currentKm and any relationship the caller changed
        db.expire_all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Could not update mileage of vehicle {vehicle_id} to {km} km: {e}")
        return [make_warning(
            WarningCode.ODOMETER_NOT_UPDATED,
            "Maintenance was saved but the vehicle mileage could not be updated",
        )]
    return []


class MaintenanceEventService:

    def get_event(self, db: Session, event_id: int, requesting_user_id: int) -> dict:
        return _serialize(_get_owned_event(db, event_id, requesting_user_id))

    def record_event(
        self, db: Session, data: MaintenanceEventRequest, requesting_user_id: int,
    ) -> tuple[dict, list[dict]]:
        _check_references(db, data, requesting_user_id)

        event = MaintenanceEvent(**data.model_dump(include=set(_MUTABLE_FIELDS)))
        db.add(event)
        db.flush()
        log_action(db, requesting_user_id, AuditAction.CREATE, event,
                   f"Recorded maintenance at {data.kmAtService} km on {data.performedAt.isoformat()}")
        db.commit()

        warnings = _raise_odometer(db, data.vehicleId, data.kmAtService)
        return self.get_event(db, event.id, requesting_user_id), warnings

    def update_event(
        self, db: Session, event_id: int, data: MaintenanceEventRequest, requesting_user_id: int,
    ) -> tuple[dict, list[dict]]:
        """Replace every field of the event with `data`; no field is merged from the old row."""
        event = _get_owned_event(db, event_id, requesting_user_id)
        _check_references(db, data, requesting_user_id)

        for field, value in data.model_dump(include=set(_MUTABLE_FIELDS)).items():
            setattr(event, field, value)
        log_action(db, requesting_user_id, AuditAction.UPDATE, event,
                   f"Updated maintenance event #{event.id}")
        db.commit()
        # vehicle / component / type relationships still point at the old rows
        db.expire(event)

        warnings = _raise_odometer(db, data.vehicleId, data.kmAtService)
        return self.get_event(db, event.id, requesting_user_id), warnings

    def list_history(
        self, db: Session, vehicle_id: int, requesting_user_id: int,
        limit: int | None = None, now: date | datetime | None = None,
    ) -> list[dict]:
        """Events of one vehicle, newest first, each with its live progress."""
        vehicle = get_owned_vehicle(db, vehicle_id, requesting_user_id)
        q = (
            _event_query(db)
            .filter(MaintenanceEvent.vehicleId == vehicle.id)
            .order_by(MaintenanceEvent.performedAt.desc(), MaintenanceEvent.id.desc())
        )
        if limit:
            q = q.limit(limit)
        return [_serialize(e, now) for e in q.all()]

    def list_events_in_month(self, db: Session, requesting_user_id: int, year: int, month: int) -> list[dict]:
        """Events across all of the user's vehicles performed in the given calendar month."""
        if not 1 <= month <= 12:
            raise ValidationException("Month must be between 1 and 12", field="month")
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        items = (
            _event_query(db)
            .join(MaintenanceEvent.vehicle)
            .filter(
                Vehicle.userId == requesting_user_id,
                MaintenanceEvent.performedAt >= first,
                MaintenanceEvent.performedAt <= last,
            )
            .order_by(MaintenanceEvent.performedAt, MaintenanceEvent.id)
            .all()
        )
        return [_serialize(e) for e in items]


maintenance_event_service = MaintenanceEventService()
