"""
LINE auth service configuration. Values from the environment.
LINE_CHANNEL_ID is required; everything else has a working default.
"""
import logging
import os

from line_auth.errors import ConfigurationError

# Channel this deployment is registered as at LINE; verify responses must match it
LINE_CHANNEL_ID = os.environ.get("LINE_CHANNEL_ID", "").strip() or None

# LINE endpoints (v1 verify returns mid + channelId; v1 profile returns displayName + pictureUrl)
LINE_VERIFY_URL = os.environ.get("LINE_VERIFY_URL", "https://api.line.me/v1/oauth/verify")
LINE_PROFILE_URL = os.environ.get("LINE_PROFILE_URL", "https://api.line.me/v1/profile")

# Per-call timeout (seconds) for outbound LINE requests
LINE_API_TIMEOUT = float(os.environ.get("LINE_API_TIMEOUT", "10.0"))

# Firebase service account key. If the file is missing, Application Default Credentials are used.
FIREBASE_SERVICE_ACCOUNT_PATH = os.environ.get("FIREBASE_SERVICE_ACCOUNT_PATH", "service-account.json")

# Per-call timeout (seconds) for Firebase Auth requests; the SDK default is 120
FIREBASE_HTTP_TIMEOUT = float(os.environ.get("FIREBASE_HTTP_TIMEOUT", "10.0"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def require_channel_id(channel_id: str | None = None) -> str:
    """Return the configured channel id; raise ConfigurationError if unset."""
    value = channel_id if channel_id is not None else LINE_CHANNEL_ID
    if not value or not value.strip():
        raise ConfigurationError("LINE_CHANNEL_ID is not set")
    return value.strip()


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
