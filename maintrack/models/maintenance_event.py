from sqlalchemy import Column, Integer, String, Text, Date, JSON, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base


class MaintenanceEvent(Base):
    __tablename__ = "maintenance_events"

    id                 = Column(Integer, primary_key=True, index=True)
    vehicleId          = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    vehicleComponentId = Column(Integer, ForeignKey("vehicle_components.id", ondelete="CASCADE"), nullable=False)
    maintenanceTypeId  = Column(Integer, ForeignKey("maintenance_type_catalog.id", ondelete="SET NULL"),
                                nullable=True)
    performedAt        = Column(Date, nullable=False)
    kmAtService        = Column(Integer, nullable=False)
    customName         = Column(String(200), nullable=True)
    note               = Column(Text, nullable=True)
    intervalKm         = Column(Integer, nullable=True)   # NULL = no distance interval
    intervalTimeMonths = Column(Integer, nullable=True)   # NULL = no time interval
    details            = Column(JSON, nullable=True)
    createdAt          = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    vehicle          = relationship("Vehicle", back_populates="events")
    component        = relationship("VehicleComponent", back_populates="events")
    maintenance_type = relationship("MaintenanceTypeCatalog")

    __table_args__ = (
        CheckConstraint('"kmAtService" >= 0', name="maintenance_events_km_nonnegative"),
        CheckConstraint('"intervalKm" IS NULL OR "intervalKm" > 0', name="maintenance_events_interval_km_positive"),
        CheckConstraint('"intervalTimeMonths" IS NULL OR "intervalTimeMonths" > 0',
                        name="maintenance_events_interval_months_positive"),
    )

    def __repr__(self):
        return f"<MaintenanceEvent id={self.id} vehicleId={self.vehicleId} km={self.kmAtService}>"
