import os

# Must be set before anything imports settings/database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CLEANUP_JOB_ENABLED"] = "false"
os.environ["CONTEXT_TOKEN_SECRET"] = "test-secret"
os.environ["ADMIN_GROUP_ID"] = "admins"

import pytest

from database import Base, SessionLocal, engine
from modules.signatures.models import Contract, Signature  # noqa: F401
from modules.events.models.webhook import Webhook  # noqa: F401
from modules.signatures.services.permission import PermissionResolver, ResolverError


class FakeResolver(PermissionResolver):
    """In-memory resolver. ``fail=True`` makes every lookup raise."""

    def __init__(self, groups=None, view=None, edit=None, fail=False):
        self.groups = groups or {}
        self.view = view or set()
        self.edit = edit or set()
        self.fail = fail
        self.calls = []

    def resolve_groups(self, account_id):
        self.calls.append(("groups", account_id))
        if self.fail:
            raise ResolverError("host unavailable")
        return list(self.groups.get(account_id, []))

    def resolve_page_permission(self, page_id, account_id, operation):
        self.calls.append((operation.value, account_id))
        if self.fail:
            raise ResolverError("host unavailable")
        allowed = self.view if operation.value == "VIEW" else self.edit
        return account_id in allowed


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def resolver():
    return FakeResolver()
