"""
Signature authorization.

``can_user_sign`` decides whether an account may add a signature to a
contract. Rules are evaluated in a fixed order and the first match wins:

    1. max signatures reached      -> deny
    2. account already signed      -> deny
    3. petition mode               -> allow
    4. named signer                -> allow
    5. member of a signer group    -> allow
    6. inherits page VIEW          -> allow
    7. inherits page EDIT          -> allow
    8. otherwise                   -> deny

The configuration must come from the trusted host context, never from the
request payload. A failed group or permission lookup denies the request
(fail closed) instead of falling through to the next rule.
"""

import logging
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Optional

from modules.signatures.models.contract import Contract
from modules.signatures.schemas.signer_config import SignerConfiguration, Visibility
from modules.signatures.services.permission import PageOperation, PermissionResolver

logger = logging.getLogger(__name__)


class ReasonCode(str, PyEnum):
    MAX_SIGNATURES_REACHED = "MAX_SIGNATURES_REACHED"
    ALREADY_SIGNED = "ALREADY_SIGNED"
    PETITION_MODE = "PETITION_MODE"
    NAMED_SIGNER = "NAMED_SIGNER"
    GROUP_MEMBER = "GROUP_MEMBER"
    HAS_VIEW_PERMISSION = "HAS_VIEW_PERMISSION"
    HAS_EDIT_PERMISSION = "HAS_EDIT_PERMISSION"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    AUTHORIZATION_CHECK_FAILED = "AUTHORIZATION_CHECK_FAILED"


REASON_MESSAGES = {
    ReasonCode.MAX_SIGNATURES_REACHED: "max signatures reached",
    ReasonCode.ALREADY_SIGNED: "already signed",
    ReasonCode.PETITION_MODE: "petition mode - no restrictions",
    ReasonCode.NAMED_SIGNER: "named signer",
    ReasonCode.GROUP_MEMBER: "member of group {group_id}",
    ReasonCode.HAS_VIEW_PERMISSION: "has view permission",
    ReasonCode.HAS_EDIT_PERMISSION: "has edit permission",
    ReasonCode.NOT_AUTHORIZED: "does not meet any authorization criteria",
    ReasonCode.AUTHORIZATION_CHECK_FAILED: "authorization check failed",
}


@dataclass(frozen=True)
class AuthorizationResult:
    allowed: bool
    code: ReasonCode
    reason: str

    @classmethod
    def allow(cls, code: ReasonCode, **params) -> "AuthorizationResult":
        return cls(True, code, REASON_MESSAGES[code].format(**params))

    @classmethod
    def deny(cls, code: ReasonCode) -> "AuthorizationResult":
        return cls(False, code, REASON_MESSAGES[code])


class _CheckFailed(Exception):
    pass


def _signature_count(contract: Optional[Contract]) -> int:
    return len(contract.signatures) if contract is not None else 0


def has_signed(contract: Optional[Contract], account_id: str) -> bool:
    if contract is None:
        return False
    return any(sig.account_id == account_id for sig in contract.signatures)


def _member_of_group(account_id: str, config: SignerConfiguration, resolver: PermissionResolver) -> Optional[str]:
    if not config.signer_groups:
        return None

    try:
        memberships = set(resolver.resolve_groups(account_id))
    except Exception as e:
        logger.warning("Group lookup for %s failed, denying", account_id, exc_info=True)
        raise _CheckFailed() from e

    for group_id in config.signer_groups:
        if not isinstance(group_id, str) or not group_id.strip():
            logger.warning("Skipping invalid signer group id %r", group_id)
            continue
        if group_id in memberships:
            return group_id
    return None


def _has_page_permission(page_id: str, account_id: str, operation: PageOperation,
                         resolver: PermissionResolver) -> bool:
    try:
        return bool(resolver.resolve_page_permission(page_id, account_id, operation))
    except Exception as e:
        logger.warning("%s permission lookup for %s on page %s failed, denying",
                       operation.value, account_id, page_id, exc_info=True)
        raise _CheckFailed() from e


def _evaluate(account_id: str, page_id: str, config: SignerConfiguration,
              contract: Optional[Contract], resolver: PermissionResolver) -> AuthorizationResult:
    # 0 or a negative limit blocks everything
    if config.max_signatures is not None and _signature_count(contract) >= config.max_signatures:
        return AuthorizationResult.deny(ReasonCode.MAX_SIGNATURES_REACHED)

    if has_signed(contract, account_id):
        return AuthorizationResult.deny(ReasonCode.ALREADY_SIGNED)

    if config.is_petition:
        return AuthorizationResult.allow(ReasonCode.PETITION_MODE)

    if account_id in config.signers:
        return AuthorizationResult.allow(ReasonCode.NAMED_SIGNER)

    group_id = _member_of_group(account_id, config, resolver)
    if group_id is not None:
        return AuthorizationResult.allow(ReasonCode.GROUP_MEMBER, group_id=group_id)

    if config.inherit_viewers and _has_page_permission(page_id, account_id, PageOperation.VIEW, resolver):
        return AuthorizationResult.allow(ReasonCode.HAS_VIEW_PERMISSION)

    if config.inherit_editors and _has_page_permission(page_id, account_id, PageOperation.EDIT, resolver):
        return AuthorizationResult.allow(ReasonCode.HAS_EDIT_PERMISSION)

    return AuthorizationResult.deny(ReasonCode.NOT_AUTHORIZED)


def can_user_sign(account_id: str, page_id: str, config: SignerConfiguration,
                  contract: Optional[Contract], resolver: PermissionResolver) -> AuthorizationResult:
    """
    Decide whether ``account_id`` may sign the content behind ``contract``.

    Args:
        account_id: platform-verified identity of the requester
        page_id: page holding the macro, used for inherited permissions
        config: trusted signer configuration of the macro instance
        contract: current contract with its signatures, or None if unsigned
        resolver: group and page permission lookups

    Returns:
        AuthorizationResult: never raises for lookup failures
    """
    try:
        result = _evaluate(account_id, page_id, config, contract, resolver)
    except _CheckFailed:
        result = AuthorizationResult.deny(ReasonCode.AUTHORIZATION_CHECK_FAILED)

    logger.info(
        "Authorization for %s on page %s: %s (%s)",
        account_id, page_id, "ALLOW" if result.allowed else "DENY", result.code.value,
    )
    return result


def is_section_visible(setting: Visibility, is_signatory: bool, signed: bool) -> bool:
    """Visibility rule for the signed and pending sections of a macro."""
    if setting == Visibility.IF_SIGNATORY:
        return is_signatory
    if setting == Visibility.IF_SIGNED:
        return signed
    return True
