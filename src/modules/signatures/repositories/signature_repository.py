import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from modules.signatures.models.contract import Contract
from modules.signatures.models.signature import Signature

logger = logging.getLogger(__name__)


class DuplicateSignatureError(Exception):
    """The account already signed this contract. Not retryable."""

    def __init__(self, fingerprint: str, account_id: str):
        self.fingerprint = fingerprint
        self.account_id = account_id
        super().__init__(f"{account_id} already signed {fingerprint}")


class SignatureRepository:
    """
    Persistence of contracts and their signatures.

    The composite primary key on ``signature`` is the only guard against two
    concurrent requests signing twice for the same account.
    """

    def __init__(self, db_session: Session):
        self.db = db_session

    def get_signature(self, fingerprint: str) -> Optional[Contract]:
        """Contract with its signatures ordered by signing time, or None if never signed."""
        if not fingerprint:
            raise ValueError("fingerprint is required")
        return self.db.get(Contract, fingerprint)

    def _signature_exists(self, fingerprint: str, account_id: str) -> bool:
        return self.db.get(Signature, (fingerprint, account_id)) is not None

    def _append_signature(self, fingerprint: str, page_id: str, account_id: str) -> Contract:
        contract = self.db.get(Contract, fingerprint)
        if contract is not None and self._signature_exists(fingerprint, account_id):
            raise DuplicateSignatureError(fingerprint, account_id)

        now = datetime.utcnow()
        if contract is None:
            contract = Contract(hash=fingerprint, page_id=page_id, created_at=now)
            self.db.add(contract)
        contract.signatures.append(Signature(account_id=account_id, signed_at=now))

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self._signature_exists(fingerprint, account_id):
                raise DuplicateSignatureError(fingerprint, account_id)
            raise

        self.db.refresh(contract)
        return contract

    def put_signature(self, fingerprint: str, page_id: str, account_id: str) -> Contract:
        """
        Append a signature, creating the contract on first use.

        Raises:
            ValueError: if an argument is missing
            DuplicateSignatureError: if the account already signed the contract
        """
        if not fingerprint or not page_id or not account_id:
            raise ValueError("fingerprint, page_id and account_id are required")

        try:
            contract = self._append_signature(fingerprint, page_id, account_id)
        except IntegrityError:
            if self.db.get(Contract, fingerprint) is None:
                raise
            # Another request created the contract row first
            logger.info("Contract %s created concurrently, retrying", fingerprint)
            contract = self._append_signature(fingerprint, page_id, account_id)

        logger.info("Signature added to %s by %s (%d total)",
                    fingerprint, account_id, len(contract.signatures))
        return contract

    def set_deleted(self, page_id: str) -> int:
        """Soft delete every active contract of a page. Returns rows newly marked."""
        if not page_id:
            raise ValueError("page_id is required")

        try:
            count = (
                self.db.query(Contract)
                .filter(Contract.page_id == page_id, Contract.deleted_at.is_(None))
                .update({Contract.deleted_at: datetime.utcnow()}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.expire_all()
        return count

    def _purge(self, contract_filter) -> int:
        # Signatures go first so no orphan is ever visible
        hashes = select(Contract.hash).where(contract_filter)
        try:
            (
                self.db.query(Signature)
                .filter(Signature.contract_hash.in_(hashes))
                .delete(synchronize_session=False)
            )
            count = (
                self.db.query(Contract)
                .filter(contract_filter)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.expire_all()
        return count

    def hard_delete(self, page_id: str) -> int:
        """Permanently remove every contract of a page and its signatures."""
        if not page_id:
            raise ValueError("page_id is required")
        return self._purge(Contract.page_id == page_id)

    def cleanup(self, retention_days) -> int:
        """Permanently remove contracts soft deleted more than ``retention_days`` ago."""
        if isinstance(retention_days, bool) or not isinstance(retention_days, (int, float)) or retention_days < 0:
            raise ValueError("retention_days must be a non-negative number")

        cutoff_date = datetime.utcnow() - timedelta(days=retention_days)
        return self._purge(Contract.deleted_at.is_not(None) & (Contract.deleted_at <= cutoff_date))

    def get_statistics(self) -> Dict[str, int]:
        total = self.db.query(func.count(Contract.hash)).scalar() or 0
        deleted = self.db.query(func.count(Contract.hash)).filter(Contract.deleted_at.is_not(None)).scalar() or 0
        signatures = self.db.query(func.count()).select_from(Signature).scalar() or 0
        return {
            "totalContracts": total,
            "activeContracts": total - deleted,
            "deletedContracts": deleted,
            "totalSignatures": signatures,
        }
