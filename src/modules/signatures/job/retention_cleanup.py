import logging

from apscheduler.schedulers.background import BackgroundScheduler

from database import SessionLocal
from modules.signatures.repositories.signature_repository import SignatureRepository
from settings import RETENTION_DAYS

logger = logging.getLogger(__name__)


def run_retention_cleanup(session_factory=SessionLocal, retention_days: int = RETENTION_DAYS) -> int:
    with session_factory() as session:
        removed = SignatureRepository(session).cleanup(retention_days)
    logger.info("Retention cleanup removed %d contract(s) older than %d day(s)", removed, retention_days)
    return removed


def start_cleanup_job() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(run_retention_cleanup, 'interval', days=1, id="retention-cleanup")  # every 24 hours
    scheduler.start()
    return scheduler
