from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from maintrack.database import get_db
from maintrack.dependencies import get_current_user
from maintrack.models.user import User
from maintrack.models.vehicle import VehicleType
from maintrack.schemas.common import success_response
from maintrack.schemas.component import ComponentCreateRequest
from maintrack.services.component_service import component_service

router = APIRouter(prefix="/components")


@router.get("/catalog", summary="Catalog components available for a vehicle type")
def list_catalog(
    vehicleType: VehicleType = Query(..., description="car | motorcycle"),
    db:          Session     = Depends(get_db),
    current_user: User       = Depends(get_current_user),
):
    return success_response("Catalog retrieved", component_service.list_catalog(db, vehicleType, current_user.id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create my own component")
def create_component(
    body: ComponentCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data, warnings = component_service.create_user_component(db, body, current_user.id)
    message = "Component created" if not warnings else "Component created with warnings"
    return success_response(message, data, warnings)
