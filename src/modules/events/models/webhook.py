from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from database import Base


class Webhook(Base):
    __tablename__ = 'webhook'

    id = Column(Integer, primary_key=True)
    url = Column(String(2048), nullable=False)
    # Sent as X-Automation-Webhook-Token when set
    secret = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def has_secret(self) -> bool:
        return bool(self.secret)
