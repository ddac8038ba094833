import logging
from dataclasses import dataclass
from typing import Optional

from modules.signatures.models.contract import Contract
from modules.signatures.repositories.signature_repository import DuplicateSignatureError, SignatureRepository
from modules.signatures.schemas.signer_config import SignerConfiguration
from modules.signatures.services.authorization import (
    AuthorizationResult,
    ReasonCode,
    can_user_sign,
    has_signed,
    is_section_visible,
)
from modules.signatures.services.permission import PermissionResolver

logger = logging.getLogger(__name__)


@dataclass
class SigningOutcome:
    decision: AuthorizationResult
    contract: Optional[Contract]
    message: str

    @property
    def allowed(self) -> bool:
        return self.decision.allowed


@dataclass
class AuthorizationPreview:
    decision: AuthorizationResult
    signatures_visible: bool
    pending_visible: bool


class SigningService:
    """Composes storage and authorization into the sign / preview operations."""

    def __init__(self, repository: SignatureRepository, resolver: PermissionResolver):
        self.signature_repository = repository
        self.resolver = resolver

    def check_authorization(self, account_id: str, page_id: str, fingerprint: str,
                            config: SignerConfiguration) -> AuthorizationPreview:
        """Same evaluation as ``sign`` without touching the store."""
        contract = self.signature_repository.get_signature(fingerprint)
        decision = can_user_sign(account_id, page_id, config, contract, self.resolver)

        signed = has_signed(contract, account_id)
        is_signatory = decision.allowed or signed
        return AuthorizationPreview(
            decision=decision,
            signatures_visible=is_section_visible(config.signatures_visible, is_signatory, signed),
            pending_visible=is_section_visible(config.pending_visible, is_signatory, signed),
        )

    def sign(self, account_id: str, page_id: str, fingerprint: str,
             config: SignerConfiguration) -> SigningOutcome:
        """
        Re-check authorization and record the signature.

        Either the signature is committed or nothing changes. A duplicate
        reported by the store (two concurrent requests from the same account)
        is returned as an "already signed" denial.
        """
        contract = self.signature_repository.get_signature(fingerprint)
        decision = can_user_sign(account_id, page_id, config, contract, self.resolver)
        if not decision.allowed:
            return SigningOutcome(decision, contract, decision.reason)

        try:
            contract = self.signature_repository.put_signature(fingerprint, page_id, account_id)
        except DuplicateSignatureError:
            logger.info("Concurrent duplicate signature by %s on %s", account_id, fingerprint)
            decision = AuthorizationResult.deny(ReasonCode.ALREADY_SIGNED)
            return SigningOutcome(decision, self.signature_repository.get_signature(fingerprint), decision.reason)

        return SigningOutcome(
            decision,
            contract,
            f"Successfully signed. Total signatures: {len(contract.signatures)}",
        )
