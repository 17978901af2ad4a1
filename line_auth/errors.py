"""
Errors raised while exchanging a LINE access token for a Firebase custom token.
All pipeline errors share TokenExchangeError so the handler can map them to one response.
"""


class TokenExchangeError(Exception):
    """Base class for failures in the token exchange pipeline."""


class MissingInput(TokenExchangeError):
    """Request did not carry an access token."""


class InvalidToken(TokenExchangeError):
    """LINE rejected the access token or could not be reached."""


class AudienceMismatch(TokenExchangeError):
    """Token was issued for a different LINE channel."""

    def __init__(self, expected: str, actual: str):
        super().__init__(f"LINE channel ID mismatched: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class UpstreamUserStoreError(TokenExchangeError):
    """Firebase user lookup, creation or custom token signing failed."""


class UserAlreadyExists(UpstreamUserStoreError):
    """User creation lost a race with another first sign-in for the same uid."""


class ConfigurationError(RuntimeError):
    """A required setting is missing; the service must not start."""
