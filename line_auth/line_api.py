"""
LINE API client: access token verification and profile lookup.
Both calls authenticate with the caller's access token as a Bearer credential.
"""
import logging
from dataclasses import dataclass

import httpx

from line_auth.errors import AudienceMismatch, InvalidToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineVerification:
    mid: str
    channel_id: str


@dataclass(frozen=True)
class LineProfile:
    display_name: str | None
    picture_url: str | None


def _blank_to_none(value) -> str | None:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


class LineClient:
    """Single-attempt GETs against the LINE verify and profile endpoints."""

    def __init__(self, verify_url: str, profile_url: str, timeout: float = 10.0):
        self.verify_url = verify_url
        self.profile_url = profile_url
        self.timeout = timeout

    def _get_json(self, url: str, access_token: str) -> dict:
        try:
            r = httpx.get(
                url,
                headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise InvalidToken(f"LINE request to {url} failed: {e}") from e
        if r.status_code < 200 or r.status_code >= 300:
            raise InvalidToken(f"LINE responded {r.status_code} for {url}")
        try:
            data = r.json()
        except ValueError as e:
            raise InvalidToken(f"LINE returned a non-JSON body for {url}") from e
        if not isinstance(data, dict):
            raise InvalidToken(f"LINE returned an unexpected body for {url}")
        return data

    def verify(self, access_token: str) -> LineVerification:
        """Ask LINE whether the token is valid. Returns the subject (mid) and channel."""
        data = self._get_json(self.verify_url, access_token)
        mid = data.get("mid")
        channel_id = data.get("channelId")
        if not mid or channel_id is None:
            raise InvalidToken("LINE verify response is missing mid or channelId")
        return LineVerification(mid=str(mid), channel_id=str(channel_id))

    def get_profile(self, access_token: str) -> LineProfile:
        data = self._get_json(self.profile_url, access_token)
        return LineProfile(
            display_name=_blank_to_none(data.get("displayName")),
            picture_url=_blank_to_none(data.get("pictureUrl")),
        )


def verify_access_token(line: LineClient, access_token: str, channel_id: str) -> LineVerification:
    """
    Verify the token with LINE and require it to be issued for our channel.
    The profile API does not report the channel, so skipping this check would
    accept tokens minted for any other LINE app.
    """
    verification = line.verify(access_token)
    if verification.channel_id != channel_id:
        raise AudienceMismatch(expected=channel_id, actual=verification.channel_id)
    logger.debug("LINE token verified for mid=%s", verification.mid)
    return verification
