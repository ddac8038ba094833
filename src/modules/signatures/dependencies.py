from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from modules.signatures.repositories.signature_repository import SignatureRepository
from modules.signatures.services.permission import HostPermissionResolver, PermissionResolver
from modules.signatures.services.signing_service import SigningService
from settings import HOST_API_BASE_URL, HOST_API_TIMEOUT_SECONDS, HOST_API_TOKEN


def get_permission_resolver():
    resolver = HostPermissionResolver.from_settings(HOST_API_BASE_URL, HOST_API_TOKEN, HOST_API_TIMEOUT_SECONDS)
    try:
        yield resolver
    finally:
        resolver.close()


def get_signature_repository(db: Session = Depends(get_db)) -> SignatureRepository:
    return SignatureRepository(db)


def get_signing_service(
    repo: SignatureRepository = Depends(get_signature_repository),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> SigningService:
    return SigningService(repo, resolver)
