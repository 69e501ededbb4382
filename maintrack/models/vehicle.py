import enum
from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base


class VehicleType(str, enum.Enum):
    CAR        = "car"
    MOTORCYCLE = "motorcycle"


VehicleTypeColumn = Enum(
    VehicleType,
    name="vehicle_type",
    values_callable=lambda members: [m.value for m in members],
)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id                = Column(Integer, primary_key=True, index=True)
    userId            = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    brand             = Column(String(100), nullable=False)
    model             = Column(String(100), nullable=False)
    year              = Column(Integer, nullable=True)
    type              = Column(VehicleTypeColumn, default=VehicleType.MOTORCYCLE, nullable=False)
    currentKm         = Column(Integer, default=0, nullable=False)
    vin               = Column(String(17), nullable=True)
    firstRegistration = Column(Date, nullable=True)
    createdAt         = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    owner      = relationship("User", back_populates="vehicles")
    components = relationship("VehicleComponent", back_populates="vehicle", cascade="all, delete-orphan")
    events     = relationship("MaintenanceEvent", back_populates="vehicle", cascade="all, delete-orphan")
    defaults   = relationship("MaintenanceDefaultUserVehicle", back_populates="vehicle",
                              cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('"currentKm" >= 0', name="vehicles_current_km_nonnegative"),
    )

    def __repr__(self):
        return f"<Vehicle id={self.id} {self.brand} {self.model} km={self.currentKm}>"
