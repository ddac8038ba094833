from typing import Iterable, List, Tuple, Optional
from sqlalchemy.orm import Session

from modules.events.models.webhook import Webhook


class WebhookRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    def find_all(self) -> List[Webhook]:
        return self.db.query(Webhook).order_by(Webhook.id).all()

    def replace_all(self, webhooks: Iterable[Tuple[str, Optional[str]]]) -> List[Webhook]:
        """Replace the whole webhook configuration in one transaction."""
        self.db.query(Webhook).delete(synchronize_session=False)
        for url, secret in webhooks:
            self.db.add(Webhook(url=url, secret=secret))
        self.db.commit()
        return self.find_all()
