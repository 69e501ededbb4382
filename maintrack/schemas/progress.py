from pydantic import BaseModel
from typing import Literal


class ProgressInfo(BaseModel):
    """How far a vehicle has moved toward the next due point of one maintenance event."""
    axis:     Literal["distance", "time"]
    percent:  float   # clamped to 0..100
    consumed: float   # km driven or months elapsed since the event, unclamped
    target:   int     # intervalKm or intervalTimeMonths
