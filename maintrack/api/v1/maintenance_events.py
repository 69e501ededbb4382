from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from maintrack.database import get_db
from maintrack.dependencies import get_current_user
from maintrack.models.user import User
from maintrack.schemas.common import success_response
from maintrack.schemas.maintenance_event import MaintenanceEventRequest
from maintrack.services.maintenance_event_service import maintenance_event_service

router = APIRouter(prefix="/maintenance-events")


@router.get("/calendar", summary="My maintenance events in one month")
def calendar_month(
    year:  int = Query(..., ge=1900, le=2100),
    month: int = Query(..., ge=1, le=12),
    db:    Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = maintenance_event_service.list_events_in_month(db, current_user.id, year, month)
    return success_response("Maintenance events retrieved", data)


@router.get("/{event_id}", summary="Get maintenance event")
def get_event(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return success_response("Maintenance event retrieved",
                            maintenance_event_service.get_event(db, event_id, current_user.id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record performed maintenance")
def record_event(
    body: MaintenanceEventRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data, warnings = maintenance_event_service.record_event(db, body, current_user.id)
    message = "Maintenance recorded" if not warnings else "Maintenance recorded with warnings"
    return success_response(message, data, warnings)


@router.put("/{event_id}", summary="Replace a maintenance event")
def update_event(
    event_id: int,
    body:     MaintenanceEventRequest,
    db:       Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data, warnings = maintenance_event_service.update_event(db, event_id, body, current_user.id)
    message = "Maintenance updated" if not warnings else "Maintenance updated with warnings"
    return success_response(message, data, warnings)
