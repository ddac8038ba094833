# src/modules/signatures/controllers/signature_controller.py
import logging
from typing import Optional, Tuple

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from modules.auth.dependencies import get_host_context
from modules.auth.schemas.context_schemas import HostContext
from modules.events.controllers.webhook_controller import get_event_publisher
from modules.events.services.event_publisher import EventPublisher, SignatureAddedEvent
from modules.signatures.dependencies import get_signature_repository, get_signing_service
from modules.signatures.models.contract import Contract
from modules.signatures.repositories.signature_repository import SignatureRepository
from modules.signatures.schemas.signature_schemas import (
    AuthorizationResponse,
    ContractResponse,
    SignatureResponse,
    SignaturesResponse,
    SignRequest,
    SignResponse,
)
from modules.signatures.schemas.signer_config import SignerConfiguration, load_signer_configuration
from modules.signatures.services.fingerprint import is_valid_fingerprint, verify_fingerprint
from modules.signatures.services.signing_service import SigningService

logger = logging.getLogger(__name__)

router = APIRouter()

UNEXPECTED_ERROR = "An unexpected error occurred"


def _validate_hash(fingerprint: Optional[str]) -> str:
    if not fingerprint:
        raise HTTPException(400, "Missing required field: hash")
    if not is_valid_fingerprint(fingerprint):
        raise HTTPException(400, "Invalid hash format: must be 64-character hexadecimal string")
    return fingerprint.lower()


def _validate_request(payload: SignRequest, context: HostContext) -> Tuple[str, str, SignerConfiguration]:
    """Reject malformed input before any authorization or storage work."""
    missing = [name for name, value in (("hash", payload.hash), ("pageId", payload.page_id)) if not value]
    if missing:
        raise HTTPException(400, f"Missing required field(s): {', '.join(missing)}")

    fingerprint = _validate_hash(payload.hash)

    if context.page_id is not None and context.page_id != payload.page_id:
        raise HTTPException(400, "pageId does not match the host context")

    try:
        config = load_signer_configuration(context.config)
        verify_fingerprint(fingerprint, payload.page_id, config)
    except ValueError as e:
        raise HTTPException(400, str(e))

    # Inherited permissions are looked up by page, so the page must be verified
    if context.page_id is None and (config.inherit_viewers or config.inherit_editors):
        raise HTTPException(400, "pageId is missing from the host context")

    return fingerprint, payload.page_id, config


def _signature_list(contract: Optional[Contract]) -> list:
    if contract is None:
        return []
    return [SignatureResponse.model_validate(sig) for sig in contract.signatures]


@router.post("/sign", response_model=SignResponse)
def sign(
    payload: SignRequest,
    background_tasks: BackgroundTasks,
    context: HostContext = Depends(get_host_context),
    service: SigningService = Depends(get_signing_service),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Adds the caller's signature to the content identified by ``hash``.

    Every denial is a 403; the reason travels in the body only.
    """
    fingerprint, page_id, config = _validate_request(payload, context)

    try:
        outcome = service.sign(context.account_id, page_id, fingerprint, config)
    except ValueError as e:
        raise HTTPException(400, str(e))
    except SQLAlchemyError:
        logger.exception("Storage failure while signing %s", fingerprint)
        raise HTTPException(500, UNEXPECTED_ERROR)

    if not outcome.allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "allowed": False,
                "reason": outcome.decision.reason,
                "code": outcome.decision.code.value,
            },
        )

    # Runs after the response; never affects the signing result
    background_tasks.add_task(publisher.publish, SignatureAddedEvent(outcome.contract, context.account_id))

    return SignResponse(
        allowed=True,
        reason=outcome.decision.reason,
        code=outcome.decision.code.value,
        message=outcome.message,
        contract=ContractResponse.model_validate(outcome.contract),
        signatures=_signature_list(outcome.contract),
    )


@router.post("/check-authorization", response_model=AuthorizationResponse)
def check_authorization(
    payload: SignRequest,
    context: HostContext = Depends(get_host_context),
    service: SigningService = Depends(get_signing_service),
):
    """Read-only preview of the decision ``sign`` would make."""
    fingerprint, page_id, config = _validate_request(payload, context)

    try:
        preview = service.check_authorization(context.account_id, page_id, fingerprint, config)
    except SQLAlchemyError:
        logger.exception("Storage failure while checking %s", fingerprint)
        raise HTTPException(500, UNEXPECTED_ERROR)

    return AuthorizationResponse(
        allowed=preview.decision.allowed,
        reason=preview.decision.reason,
        code=preview.decision.code.value,
        signatures_visible=preview.signatures_visible,
        pending_visible=preview.pending_visible,
    )


@router.get("/{hash}", response_model=SignaturesResponse)
def get_signatures(
    hash: str,
    repo: SignatureRepository = Depends(get_signature_repository),
):
    """
    Returns the contract and its signatures, oldest first.
    """
    fingerprint = _validate_hash(hash)

    try:
        contract = repo.get_signature(fingerprint)
    except SQLAlchemyError:
        logger.exception("Storage failure while reading %s", fingerprint)
        raise HTTPException(500, UNEXPECTED_ERROR)

    return SignaturesResponse(
        hash=fingerprint,
        contract=ContractResponse.model_validate(contract) if contract is not None else None,
        signatures=_signature_list(contract),
    )
