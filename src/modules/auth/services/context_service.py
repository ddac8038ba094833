from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from modules.auth.schemas.context_schemas import HostContext
from settings import CONTEXT_TOKEN_ALGORITHM, CONTEXT_TOKEN_EXPIRE_MINUTES, CONTEXT_TOKEN_SECRET


class ContextService:
    """
    Host context tokens.

    The host platform signs a short-lived token per request carrying the
    verified account id and the macro configuration. It is the only source
    of identity and policy; request payloads are never trusted for either.
    """

    @staticmethod
    def create_context_token(account_id: str, page_id: Optional[str] = None, config: Optional[dict] = None,
                             expires_delta: Optional[timedelta] = None,
                             secret: str = CONTEXT_TOKEN_SECRET) -> str:
        """Creates a context token the way the host platform issues them"""
        expire = datetime.utcnow() + (expires_delta or timedelta(minutes=CONTEXT_TOKEN_EXPIRE_MINUTES))
        to_encode = {
            "sub": account_id,
            "exp": expire,
            "context": {"pageId": page_id, "config": config},
        }
        return jwt.encode(to_encode, secret, algorithm=CONTEXT_TOKEN_ALGORITHM)

    @staticmethod
    def decode_context(token: str, secret: str = CONTEXT_TOKEN_SECRET) -> Optional[HostContext]:
        """Verifies a context token and returns the host context"""
        try:
            payload = jwt.decode(token, secret, algorithms=[CONTEXT_TOKEN_ALGORITHM])
        except JWTError:
            return None

        account_id = payload.get("sub")
        if not account_id:
            return None

        context = payload.get("context") or {}
        page_id = context.get("pageId")
        return HostContext(
            account_id=str(account_id),
            page_id=str(page_id) if page_id is not None else None,
            config=context.get("config"),
        )
