"""
LINE access token -> Firebase custom token exchange.
  1. Verify the LINE token and its channel.
  2. Find or create the Firebase user "line:<mid>".
  3. Mint a custom token for that uid.
"""
import logging
from dataclasses import dataclass

from line_auth.identity import get_or_create_user
from line_auth.line_api import LineClient, verify_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeResult:
    uid: str
    custom_token: str


def mint_custom_token(platform, uid: str) -> str:
    """Signed Firebase custom token for uid. Signing failures propagate."""
    if not uid:
        raise ValueError("uid is required")
    return platform.create_custom_token(uid)


class TokenExchange:
    """Runs the three steps in order for one access token. Holds no per-request state."""

    def __init__(self, channel_id: str, line: LineClient, platform):
        self.channel_id = channel_id
        self.line = line
        self.platform = platform

    def exchange(self, access_token: str) -> ExchangeResult:
        verification = verify_access_token(self.line, access_token, self.channel_id)
        user = get_or_create_user(self.platform, self.line, verification.mid, access_token)
        custom_token = mint_custom_token(self.platform, user.uid)
        logger.info("Created custom token for uid=%s", user.uid)
        return ExchangeResult(uid=user.uid, custom_token=custom_token)
