from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base


class VehicleComponent(Base):
    """A catalog component attached to one vehicle, optionally renamed."""
    __tablename__ = "vehicle_components"

    id                 = Column(Integer, primary_key=True, index=True)
    vehicleId          = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    componentCatalogId = Column(Integer, ForeignKey("component_catalog.id", ondelete="CASCADE"), nullable=False)
    alias              = Column(String(150), nullable=True)
    createdAt          = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    vehicle = relationship("Vehicle", back_populates="components")
    catalog = relationship("ComponentCatalog", back_populates="instances")
    events  = relationship("MaintenanceEvent", back_populates="component", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("vehicleId", "componentCatalogId", name="vehicle_components_vehicle_catalog_key"),
    )

    @property
    def display_name(self) -> str:
        return self.alias or self.catalog.name

    def __repr__(self):
        return f"<VehicleComponent id={self.id} vehicleId={self.vehicleId} catalogId={self.componentCatalogId}>"
