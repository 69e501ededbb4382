from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base


class MaintenanceDefaultGlobal(Base):
    """Suggested interval for a maintenance type, shared by every user."""
    __tablename__ = "maintenance_defaults_global"

    id                        = Column(Integer, primary_key=True, index=True)
    maintenanceTypeId         = Column(Integer, ForeignKey("maintenance_type_catalog.id", ondelete="CASCADE"),
                                       unique=True, nullable=False)
    defaultIntervalKm         = Column(Integer, nullable=True)
    defaultIntervalTimeMonths = Column(Integer, nullable=True)
    createdAt                 = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    maintenance_type = relationship("MaintenanceTypeCatalog", back_populates="global_default")

    def __repr__(self):
        return f"<MaintenanceDefaultGlobal typeId={self.maintenanceTypeId}>"


class MaintenanceDefaultUserVehicle(Base):
    """A user's own interval for a maintenance type on one vehicle; wins over the global default."""
    __tablename__ = "maintenance_defaults_user_vehicle"

    id                        = Column(Integer, primary_key=True, index=True)
    userId                    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    vehicleId                 = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    maintenanceTypeId         = Column(Integer, ForeignKey("maintenance_type_catalog.id", ondelete="CASCADE"),
                                       nullable=False)
    defaultIntervalKm         = Column(Integer, nullable=True)
    defaultIntervalTimeMonths = Column(Integer, nullable=True)
    createdAt                 = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    vehicle          = relationship("Vehicle", back_populates="defaults")
    maintenance_type = relationship("MaintenanceTypeCatalog")

    __table_args__ = (
        UniqueConstraint("vehicleId", "maintenanceTypeId", name="maintenance_defaults_user_vehicle_key"),
    )

    def __repr__(self):
        return f"<MaintenanceDefaultUserVehicle vehicleId={self.vehicleId} typeId={self.maintenanceTypeId}>"
