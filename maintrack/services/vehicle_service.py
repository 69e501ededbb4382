from sqlalchemy.orm import Session

from maintrack.models.vehicle import Vehicle
from maintrack.schemas.vehicle import VehicleCreateRequest, MileageUpdateRequest
from maintrack.models.audit_log import AuditAction
from maintrack.utils.audit import log_action
from maintrack.utils.exceptions import NotFoundException


def _serialize(v: Vehicle) -> dict:
    return {
        "id":                v.id,
        "userId":            v.userId,
        "brand":             v.brand,
        "model":             v.model,
        "year":              v.year,
        "type":              v.type.value,
        "currentKm":         v.currentKm,
        "vin":               v.vin,
        "firstRegistration": v.firstRegistration.isoformat() if v.firstRegistration else None,
        "createdAt":         v.createdAt.isoformat() if v.createdAt else None,
    }


def get_owned_vehicle(db: Session, vehicle_id: int, user_id: int) -> Vehicle:
    """Load a vehicle of `user_id`; other users' vehicles are reported as missing."""
    v = db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.userId == user_id).first()
    if not v:
        raise NotFoundException("Vehicle")
    return v


class VehicleService:

    def list_vehicles(self, db: Session, user_id: int) -> list[dict]:
        items = (
            db.query(Vehicle)
            .filter(Vehicle.userId == user_id)
            .order_by(Vehicle.createdAt.desc(), Vehicle.id.desc())
            .all()
        )
        return [_serialize(v) for v in items]

    def get_vehicle(self, db: Session, vehicle_id: int, user_id: int) -> dict:
        return _serialize(get_owned_vehicle(db, vehicle_id, user_id))

    def create_vehicle(self, db: Session, data: VehicleCreateRequest, user_id: int) -> dict:
        vehicle = Vehicle(
            userId=user_id,
            brand=data.brand,
            model=data.model,
            year=data.year,
            type=data.type,
            currentKm=data.currentKm,
            vin=data.vin,
            firstRegistration=data.firstRegistration,
        )
        db.add(vehicle)
        db.flush()
        log_action(db, user_id, AuditAction.CREATE, vehicle,
                   f"Added {data.type.value} {data.brand} {data.model}")
        db.commit()
        db.refresh(vehicle)
        return _serialize(vehicle)

    def update_mileage(self, db: Session, vehicle_id: int, data: MileageUpdateRequest, user_id: int) -> dict:
        """Manual odometer correction; unlike the ledger's raise this may also lower the value."""
        v = get_owned_vehicle(db, vehicle_id, user_id)
        old_km = v.currentKm
        v.currentKm = data.currentKm
        log_action(db, user_id, AuditAction.UPDATE, v,
                   f"Mileage set {old_km} -> {data.currentKm} km")
        db.commit()
        db.refresh(v)
        return _serialize(v)

    def delete_vehicle(self, db: Session, vehicle_id: int, user_id: int) -> None:
        """Delete a vehicle with all its components, events and defaults. Irreversible."""
        v = get_owned_vehicle(db, vehicle_id, user_id)
        log_action(db, user_id, AuditAction.DELETE, v,
                   f"Deleted {v.brand} {v.model} with {len(v.events)} maintenance events")
        db.delete(v)
        db.commit()


vehicle_service = VehicleService()
