import logging
from abc import ABC, abstractmethod
from enum import Enum as PyEnum
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)


class PageOperation(str, PyEnum):
    VIEW = "VIEW"
    EDIT = "EDIT"


# Host restriction endpoints name the operations differently
RESTRICTION_OPERATIONS = {
    PageOperation.VIEW: "read",
    PageOperation.EDIT: "update",
}


class ResolverError(Exception):
    """Group or permission lookup against the host platform failed"""
    pass


class PermissionResolver(ABC):
    """Turns an identity plus policy inputs into booleans, per request."""

    @abstractmethod
    def resolve_groups(self, account_id: str) -> List[str]:
        """Return the ids of the groups the account currently belongs to."""

    @abstractmethod
    def resolve_page_permission(self, page_id: str, account_id: str, operation: PageOperation) -> bool:
        """Return whether the account holds ``operation`` on the page."""


class HostPermissionResolver(PermissionResolver):
    """
    Resolver backed by the host platform REST API.

    Nothing is cached: memberships and restrictions change at any time and
    every decision must see the current state.
    """

    def __init__(self, client: httpx.Client):
        self.client = client

    @classmethod
    def from_settings(cls, base_url: str, token: Optional[str], timeout: float) -> "HostPermissionResolver":
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return cls(httpx.Client(base_url=base_url, headers=headers, timeout=timeout))

    def close(self):
        self.client.close()

    def _get_json(self, path: str):
        try:
            response = self.client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ResolverError(f"Host API returned {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            raise ResolverError(f"Host API request to {path} failed: {e}") from e
        except ValueError as e:
            raise ResolverError(f"Host API returned invalid JSON for {path}") from e

    def resolve_groups(self, account_id: str) -> List[str]:
        data = self._get_json(f"/users/{account_id}/groups")

        if isinstance(data, dict):
            data = data.get("results")
        if not isinstance(data, list):
            raise ResolverError("Unexpected group membership payload")

        groups = [str(group["id"]) for group in data if isinstance(group, dict) and group.get("id") is not None]
        logger.debug("Account %s belongs to %d group(s)", account_id, len(groups))
        return groups

    def resolve_page_permission(self, page_id: str, account_id: str, operation: PageOperation) -> bool:
        op = RESTRICTION_OPERATIONS[PageOperation(operation)]
        data = self._get_json(f"/pages/{page_id}/restrictions/{op}")

        if not isinstance(data, dict):
            raise ResolverError("Unexpected page restriction payload")

        restricted_to = data.get("restrictedTo")
        # No explicit restriction: the page is open
        if not restricted_to:
            return True

        return any(
            isinstance(entry, dict) and entry.get("accountId") == account_id
            for entry in restricted_to
        )
