import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.schemas.context_schemas import HostContext
from modules.auth.services.context_service import ContextService
from modules.signatures.dependencies import get_permission_resolver
from modules.signatures.services.permission import PermissionResolver
from settings import ADMIN_GROUP_ID

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_host_context(credentials: HTTPAuthorizationCredentials = Depends(security)) -> HostContext:
    """Dependency returning the verified host context of the request"""
    context = ContextService.decode_context(credentials.credentials) if credentials else None
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


def require_admin(
    context: HostContext = Depends(get_host_context),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> HostContext:
    """Allows only members of the administrators group"""
    try:
        is_admin = ADMIN_GROUP_ID in resolver.resolve_groups(context.account_id)
    except Exception:
        logger.warning("Admin check for %s failed", context.account_id, exc_info=True)
        is_admin = False

    if not is_admin:
        logger.warning("Non-admin user %s attempted to access admin endpoint", context.account_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Administrator privileges required.",
        )
    return context
