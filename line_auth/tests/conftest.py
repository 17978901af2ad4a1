"""
Pytest configuration for line_auth. Firebase is replaced by an in-memory fake;
LINE HTTP calls are patched per test.
"""
import os

# Never talk to a real emulator or pick up a developer's channel during tests
os.environ.pop("FIREBASE_AUTH_EMULATOR_HOST", None)
os.environ["LINE_CHANNEL_ID"] = "MYCHANNEL"

import pytest

from line_auth.errors import UpstreamUserStoreError, UserAlreadyExists
from line_auth.identity import LocalUser
from line_auth.line_api import LineClient


class FakeIdentityPlatform:
    """Records every call. fail_on names the operation that should raise."""

    def __init__(self, users=None):
        self.users = {u.uid: u for u in (users or [])}
        self.lookups: list[str] = []
        self.created: list[LocalUser] = []
        self.minted: list[str] = []
        self.fail_on: str | None = None

    def lookup_user(self, uid):
        self.lookups.append(uid)
        if self.fail_on == "lookup":
            raise UpstreamUserStoreError("lookup unavailable")
        return self.users.get(uid)

    def create_user(self, user):
        if self.fail_on == "create":
            raise UpstreamUserStoreError("create unavailable")
        if user.uid in self.users:
            raise UserAlreadyExists(user.uid)
        self.created.append(user)
        self.users[user.uid] = user
        return user

    def create_custom_token(self, uid):
        if self.fail_on == "mint":
            raise UpstreamUserStoreError("signing key unavailable")
        self.minted.append(uid)
        return f"custom-token-for-{uid}"


@pytest.fixture
def platform():
    return FakeIdentityPlatform()


@pytest.fixture
def line():
    return LineClient("https://line.test/v1/oauth/verify", "https://line.test/v1/profile", timeout=1.0)


@pytest.fixture
def make_platform():
    """Factory for a fake platform pre-populated with users."""
    return FakeIdentityPlatform
