from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from maintrack.database import get_db
from maintrack.dependencies import get_current_user
from maintrack.models.user import User
from maintrack.models.vehicle import VehicleType
from maintrack.schemas.common import success_response
from maintrack.schemas.component import InstanceCreateRequest, InstanceAliasRequest
from maintrack.schemas.vehicle import VehicleCreateRequest, MileageUpdateRequest
from maintrack.services.component_service import component_service
from maintrack.services.maintenance_event_service import maintenance_event_service
from maintrack.services.vehicle_service import vehicle_service

router = APIRouter(prefix="/vehicles")


@router.get("", summary="List my vehicles (newest first)")
def list_vehicles(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return success_response("Vehicles retrieved", vehicle_service.list_vehicles(db, current_user.id))


@router.get("/{vehicle_id}", summary="Get vehicle by ID")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return success_response("Vehicle retrieved", vehicle_service.get_vehicle(db, vehicle_id, current_user.id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add vehicle")
def create_vehicle(
    body: VehicleCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = vehicle_service.create_vehicle(db, body, current_user.id)
    return success_response("Vehicle added successfully", data)


@router.patch("/{vehicle_id}/mileage", summary="Correct vehicle mileage")
def update_mileage(
    vehicle_id: int,
    body:       MileageUpdateRequest,
    db:         Session = Depends(get_db),
    current_user: User  = Depends(get_current_user),
):
    data = vehicle_service.update_mileage(db, vehicle_id, body, current_user.id)
    return success_response("Mileage updated", data)


@router.delete("/{vehicle_id}", summary="Delete vehicle with all components and maintenance history")
def delete_vehicle(
    vehicle_id: int,
    db:         Session = Depends(get_db),
    current_user: User  = Depends(get_current_user),
):
    vehicle_service.delete_vehicle(db, vehicle_id, current_user.id)
    return success_response("Vehicle deleted successfully", None)


# ─── Components of a vehicle ──────────────────────────────────────────────────
@router.get("/{vehicle_id}/components", summary="Components applicable to this vehicle")
def list_components(
    vehicle_id:  int,
    vehicleType: Optional[VehicleType] = Query(None, description="car | motorcycle (default: the vehicle's type)"),
    db:          Session = Depends(get_db),
    current_user: User   = Depends(get_current_user),
):
    data = component_service.list_applicable_components(db, vehicle_id, vehicleType, current_user.id)
    return success_response("Components retrieved", data)


@router.post("/{vehicle_id}/components", summary="Attach a catalog component (idempotent)")
def ensure_component(
    vehicle_id: int,
    body:       InstanceCreateRequest,
    db:         Session = Depends(get_db),
    current_user: User  = Depends(get_current_user),
):
    data = component_service.ensure_instance(db, vehicle_id, body.componentCatalogId, current_user.id)
    return success_response("Component attached", data)


@router.patch("/{vehicle_id}/components/{instance_id}", summary="Rename a component of this vehicle")
def rename_component(
    vehicle_id:  int,
    instance_id: int,
    body:        InstanceAliasRequest,
    db:          Session = Depends(get_db),
    current_user: User   = Depends(get_current_user),
):
    data = component_service.rename_instance(db, vehicle_id, instance_id, body, current_user.id)
    return success_response("Component renamed", data)


# ─── History ──────────────────────────────────────────────────────────────────
@router.get("/{vehicle_id}/history", summary="Maintenance history with interval progress")
def list_history(
    vehicle_id: int,
    limit:      Optional[int] = Query(None, ge=1, le=500, description="Only the most recent N events"),
    db:         Session = Depends(get_db),
    current_user: User  = Depends(get_current_user),
):
    data = maintenance_event_service.list_history(db, vehicle_id, current_user.id, limit)
    return success_response("Maintenance history retrieved", data)
