from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base
from maintrack.models.owner_scope import OwnerScopeType, SCOPE_OWNER_CHECK


class MaintenanceTypeCatalog(Base):
    """A reusable maintenance definition (oil change), global or owned by one user."""
    __tablename__ = "maintenance_type_catalog"

    id          = Column(Integer, primary_key=True, index=True)
    ownerScope  = Column(OwnerScopeType, nullable=False)
    ownerUserId = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    name        = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    isStandard  = Column(Boolean, default=True, nullable=False)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    component_links = relationship("MaintenanceTypeComponent", back_populates="maintenance_type",
                                   cascade="all, delete-orphan")
    global_default  = relationship("MaintenanceDefaultGlobal", back_populates="maintenance_type",
                                   uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(SCOPE_OWNER_CHECK, name="maintenance_type_catalog_scope_owner"),
    )

    def __repr__(self):
        return f"<MaintenanceTypeCatalog id={self.id} name={self.name} scope={self.ownerScope}>"


class MaintenanceTypeComponent(Base):
    """Many-to-many link between a maintenance type and a component catalog entry."""
    __tablename__ = "maintenance_type_components"

    id                 = Column(Integer, primary_key=True, index=True)
    maintenanceTypeId  = Column(Integer, ForeignKey("maintenance_type_catalog.id", ondelete="CASCADE"),
                                nullable=False)
    componentCatalogId = Column(Integer, ForeignKey("component_catalog.id", ondelete="CASCADE"),
                                nullable=False, index=True)
    createdAt          = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    maintenance_type = relationship("MaintenanceTypeCatalog", back_populates="component_links")
    component        = relationship("ComponentCatalog", back_populates="type_links")

    __table_args__ = (
        UniqueConstraint("maintenanceTypeId", "componentCatalogId",
                         name="maintenance_type_components_type_component_key"),
    )

    def __repr__(self):
        return f"<MaintenanceTypeComponent typeId={self.maintenanceTypeId} componentId={self.componentCatalogId}>"
