# src/modules/signatures/models/signature.py

from sqlalchemy import Column, ForeignKey, DateTime, String
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base


class Signature(Base):
    __tablename__ = "signature"

    # Composite key: at most one signature per (contract, account)
    contract_hash = Column(String(64), ForeignKey("contract.hash", ondelete="CASCADE"), primary_key=True)
    account_id    = Column(String(128), primary_key=True, index=True)
    signed_at     = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    contract = relationship("Contract", back_populates="signatures")
