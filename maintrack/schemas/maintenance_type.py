from pydantic import BaseModel, field_validator, model_validator
from typing import Optional


class MaintenanceTypeCreateRequest(BaseModel):
    name:              str
    description:       Optional[str] = None
    linkToComponentId: Optional[int] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not v.strip(): raise ValueError("Name is required")
        return v.strip()

    @field_validator("description")
    @classmethod
    def check_desc(cls, v):
        if v is None or not v.strip(): return None
        return v.strip()


class DefaultIntervalRequest(BaseModel):
    defaultIntervalKm:         Optional[int] = None
    defaultIntervalTimeMonths: Optional[int] = None

    @field_validator("defaultIntervalKm", "defaultIntervalTimeMonths")
    @classmethod
    def check_positive(cls, v):
        if v is not None and v <= 0: raise ValueError("Interval must be greater than 0")
        return v

    @model_validator(mode="after")
    def check_any(self) -> "DefaultIntervalRequest":
        if self.defaultIntervalKm is None and self.defaultIntervalTimeMonths is None:
            raise ValueError("Provide a distance interval, a time interval, or both")
        return self
