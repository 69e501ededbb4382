import enum
from sqlalchemy import Column, Integer, String, Text, Enum, ForeignKey, TIMESTAMP, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from maintrack.database import Base


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LINK   = "LINK"
    UNLINK = "UNLINK"
    SEED   = "SEED"


class AuditLog(Base):
    """Trail of catalog and ledger changes, one row per mutation."""
    __tablename__ = "audit_logs"

    id          = Column(Integer, primary_key=True, index=True)
    userId      = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)  # NULL = system
    action      = Column(Enum(AuditAction, name="audit_action",
                              values_callable=lambda members: [m.value for m in members]), nullable=False)
    entityType  = Column(String(100), nullable=False)   # model class name
    entityId    = Column(Integer, nullable=True)
    # plain column: the trail outlives a deleted vehicle
    vehicleId   = Column(Integer, nullable=True, index=True)
    description = Column(Text, nullable=True)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="audit_logs")

    __table_args__ = (
        Index("audit_logs_entity_idx", "entityType", "entityId"),
    )

    def __repr__(self):
        return f"<AuditLog {self.action.value} {self.entityType}:{self.entityId} vehicleId={self.vehicleId}>"
