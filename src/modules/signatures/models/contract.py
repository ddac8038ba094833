from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base


class Contract(Base):
    """One immutable version of signable content, keyed by its fingerprint."""
    __tablename__ = "contract"

    hash       = Column(String(64), primary_key=True)
    page_id    = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    # NULL while the owning page is live
    deleted_at = Column(DateTime, nullable=True, index=True)

    signatures = relationship(
        "Signature",
        back_populates="contract",
        order_by="Signature.signed_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
