from conftest import FakeResolver
from modules.signatures.repositories.signature_repository import DuplicateSignatureError, SignatureRepository
from modules.signatures.schemas.signer_config import SignerConfiguration, Visibility
from modules.signatures.services.authorization import ReasonCode
from modules.signatures.services.signing_service import SigningService

HASH = "c" * 64
PAGE_ID = "123"


def test_sign_then_resign_is_denied(session, resolver):
    service = SigningService(SignatureRepository(session), resolver)
    config = SignerConfiguration()

    first = service.sign("alice", PAGE_ID, HASH, config)
    assert first.allowed
    assert first.message == "Successfully signed. Total signatures: 1"

    second = service.sign("alice", PAGE_ID, HASH, config)
    assert not second.allowed
    assert second.decision.code == ReasonCode.ALREADY_SIGNED
    assert len(second.contract.signatures) == 1


def test_denied_sign_does_not_touch_store(session, resolver):
    repo = SignatureRepository(session)
    service = SigningService(repo, resolver)

    outcome = service.sign("mallory", PAGE_ID, HASH, SignerConfiguration(signers=["alice"]))
    assert not outcome.allowed
    assert outcome.decision.code == ReasonCode.NOT_AUTHORIZED
    assert repo.get_signature(HASH) is None


def test_max_signatures_enforced_across_accounts(session, resolver):
    service = SigningService(SignatureRepository(session), resolver)
    config = SignerConfiguration(max_signatures=2)

    assert service.sign("alice", PAGE_ID, HASH, config).allowed
    assert service.sign("bob", PAGE_ID, HASH, config).allowed
    third = service.sign("carol", PAGE_ID, HASH, config)
    assert third.decision.code == ReasonCode.MAX_SIGNATURES_REACHED


def test_concurrent_duplicate_reported_as_already_signed(session, resolver):
    class RacingRepository(SignatureRepository):
        def put_signature(self, fingerprint, page_id, account_id):
            super().put_signature(fingerprint, page_id, account_id)
            raise DuplicateSignatureError(fingerprint, account_id)

    service = SigningService(RacingRepository(session), resolver)
    outcome = service.sign("alice", PAGE_ID, HASH, SignerConfiguration())

    assert not outcome.allowed
    assert outcome.decision.code == ReasonCode.ALREADY_SIGNED
    assert len(outcome.contract.signatures) == 1


def test_check_authorization_does_not_sign(session, resolver):
    repo = SignatureRepository(session)
    service = SigningService(repo, resolver)

    preview = service.check_authorization("alice", PAGE_ID, HASH, SignerConfiguration())
    assert preview.decision.allowed
    assert repo.get_signature(HASH) is None


def test_check_authorization_visibility(session):
    resolver = FakeResolver()
    repo = SignatureRepository(session)
    service = SigningService(repo, resolver)
    config = SignerConfiguration(
        signers=["alice"],
        signatures_visible=Visibility.IF_SIGNATORY,
        pending_visible=Visibility.IF_SIGNED,
    )

    outsider = service.check_authorization("mallory", PAGE_ID, HASH, config)
    assert not outsider.signatures_visible
    assert not outsider.pending_visible

    signatory = service.check_authorization("alice", PAGE_ID, HASH, config)
    assert signatory.signatures_visible
    assert not signatory.pending_visible

    service.sign("alice", PAGE_ID, HASH, config)
    signed = service.check_authorization("alice", PAGE_ID, HASH, config)
    assert not signed.decision.allowed
    assert signed.signatures_visible
    assert signed.pending_visible
