from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date
from maintrack.models.vehicle import VehicleType


# ─── Requests ─────────────────────────────────────────────────────────────────
class VehicleCreateRequest(BaseModel):
    brand:             str
    model:             str
    year:              Optional[int]  = None
    type:              VehicleType    = VehicleType.MOTORCYCLE
    currentKm:         int            = 0
    vin:               Optional[str]  = None
    firstRegistration: Optional[date] = None

    @field_validator("brand", "model")
    @classmethod
    def check_text(cls, v):
        if not v.strip(): raise ValueError("Brand and model cannot be empty")
        return v.strip()

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        if v is not None and not (1885 <= v <= 2100): raise ValueError("Year must be between 1885 and 2100")
        return v

    @field_validator("currentKm")
    @classmethod
    def check_km(cls, v):
        if v < 0: raise ValueError("Mileage cannot be negative")
        return v

    @field_validator("vin")
    @classmethod
    def check_vin(cls, v):
        if v is None or not v.strip(): return None
        return v.strip().upper()


class MileageUpdateRequest(BaseModel):
    currentKm: int

    @field_validator("currentKm")
    @classmethod
    def check_km(cls, v):
        if v < 0: raise ValueError("Mileage cannot be negative")
        return v
