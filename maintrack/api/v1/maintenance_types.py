from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from maintrack.database import get_db
from maintrack.dependencies import get_current_user
from maintrack.models.user import User
from maintrack.schemas.common import success_response
from maintrack.schemas.maintenance_type import MaintenanceTypeCreateRequest, DefaultIntervalRequest
from maintrack.services.maintenance_type_service import maintenance_type_service

router = APIRouter(prefix="/maintenance-types")


@router.get("", summary="All maintenance types visible to me")
def list_types(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return success_response("Maintenance types retrieved",
                            maintenance_type_service.list_visible_types(db, current_user.id))


@router.get("/by-component/{component_catalog_id}", summary="Types mapped / not mapped to a component")
def list_by_component(
    component_catalog_id: int,
    db:           Session = Depends(get_db),
    current_user: User    = Depends(get_current_user),
):
    data = {
        "mapped":   maintenance_type_service.list_mapped_types(db, component_catalog_id, current_user.id),
        "unmapped": maintenance_type_service.list_unmapped_types(db, component_catalog_id, current_user.id),
    }
    return success_response("Maintenance types retrieved", data)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create my own maintenance type")
def create_type(
    body: MaintenanceTypeCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data, warnings = maintenance_type_service.create_user_type(db, body, current_user.id)
    message = "Maintenance type created" if not warnings else "Maintenance type created with warnings"
    return success_response(message, data, warnings)


@router.put("/{type_id}/components/{component_catalog_id}", summary="Link type to component (idempotent)")
def link_type(
    type_id:              int,
    component_catalog_id: int,
    db:           Session = Depends(get_db),
    current_user: User    = Depends(get_current_user),
):
    data = maintenance_type_service.link_type(db, type_id, component_catalog_id, current_user.id)
    return success_response("Maintenance type linked", data)


@router.delete("/{type_id}/components/{component_catalog_id}", summary="Unlink type from component")
def unlink_type(
    type_id:              int,
    component_catalog_id: int,
    db:           Session = Depends(get_db),
    current_user: User    = Depends(get_current_user),
):
    maintenance_type_service.unlink_type(db, type_id, component_catalog_id, current_user.id)
    return success_response("Maintenance type unlinked", None)


@router.get("/{type_id}/defaults", summary="Suggested interval for this type")
def get_default(
    type_id:   int,
    vehicleId: Optional[int] = Query(None),
    db:        Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = maintenance_type_service.resolve_default_interval(db, type_id, vehicleId, current_user.id)
    return success_response("Default interval retrieved", data)


@router.put("/{type_id}/defaults/{vehicle_id}", summary="Set my interval for this type on a vehicle")
def set_default(
    type_id:    int,
    vehicle_id: int,
    body:       DefaultIntervalRequest,
    db:         Session = Depends(get_db),
    current_user: User  = Depends(get_current_user),
):
    data = maintenance_type_service.set_vehicle_default(db, type_id, vehicle_id, body, current_user.id)
    return success_response("Default interval saved", data)
