from pydantic import BaseModel, field_validator
from typing import Optional
from maintrack.models.vehicle import VehicleType


class ComponentCreateRequest(BaseModel):
    name:        str
    vehicleType: VehicleType
    iconId:      Optional[str] = None
    vehicleId:   Optional[int] = None   # also attach the new component to this vehicle

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not v.strip(): raise ValueError("Name is required")
        return v.strip()

    @field_validator("iconId")
    @classmethod
    def check_icon(cls, v):
        if v is None or not v.strip(): return None
        return v.strip()


class InstanceCreateRequest(BaseModel):
    componentCatalogId: int


class InstanceAliasRequest(BaseModel):
    alias: Optional[str] = None   # None / blank = show the catalog name again

    @field_validator("alias")
    @classmethod
    def check_alias(cls, v):
        if v is None or not v.strip(): return None
        return v.strip()
