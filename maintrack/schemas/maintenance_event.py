from pydantic import BaseModel, field_validator
from typing import Any, Optional
from datetime import date


class MaintenanceEventRequest(BaseModel):
    """
    Full field set of a maintenance event, used for both create and update.
    On update every field is authoritative: omitted optionals are stored as NULL.
    """
    vehicleId:          int
    vehicleComponentId: int
    performedAt:        date
    kmAtService:        int
    maintenanceTypeId:  Optional[int]            = None
    customName:         Optional[str]            = None
    note:               Optional[str]            = None
    intervalKm:         Optional[int]            = None
    intervalTimeMonths: Optional[int]            = None
    details:            Optional[dict[str, Any]] = None

    @field_validator("kmAtService")
    @classmethod
    def check_km(cls, v):
        if v < 0: raise ValueError("Mileage at service cannot be negative")
        return v

    @field_validator("intervalKm", "intervalTimeMonths")
    @classmethod
    def check_interval(cls, v):
        if v is not None and v <= 0: raise ValueError("Interval must be greater than 0")
        return v

    @field_validator("customName", "note")
    @classmethod
    def blank_to_none(cls, v):
        if v is None or not v.strip(): return None
        return v.strip()
