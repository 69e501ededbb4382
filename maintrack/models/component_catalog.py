from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base
from maintrack.models.owner_scope import OwnerScopeType, SCOPE_OWNER_CHECK
from maintrack.models.vehicle import VehicleTypeColumn


class ComponentCatalog(Base):
    """A reusable component definition (brakes, oil filter), global or owned by one user."""
    __tablename__ = "component_catalog"

    id          = Column(Integer, primary_key=True, index=True)
    ownerScope  = Column(OwnerScopeType, nullable=False)
    ownerUserId = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    vehicleType = Column(VehicleTypeColumn, nullable=False)
    name        = Column(String(150), nullable=False)
    iconId      = Column(String(100), nullable=True)
    isActive    = Column(Boolean, default=True, nullable=False)
    sortOrder   = Column(Integer, default=0, nullable=False)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    instances = relationship("VehicleComponent", back_populates="catalog")
    type_links = relationship("MaintenanceTypeComponent", back_populates="component",
                              cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(SCOPE_OWNER_CHECK, name="component_catalog_scope_owner"),
    )

    def __repr__(self):
        return f"<ComponentCatalog id={self.id} name={self.name} scope={self.ownerScope}>"
