"""
Firebase user mapping for LINE identities.
A LINE mid maps to Firebase uid "line:<mid>"; the user is created from the LINE
profile on first sign-in and left untouched afterwards.
"""
import logging
from dataclasses import dataclass
from pathlib import Path

import firebase_admin
from firebase_admin import auth, credentials, exceptions

from line_auth.errors import UpstreamUserStoreError, UserAlreadyExists
from line_auth.line_api import LineClient

logger = logging.getLogger(__name__)

UID_NAMESPACE = "line"


@dataclass(frozen=True)
class LocalUser:
    uid: str
    display_name: str | None = None
    photo_url: str | None = None


def local_uid(mid: str) -> str:
    """Firebase uid for a LINE mid. Depends on nothing but the mid."""
    if not mid:
        raise ValueError("mid is required")
    return f"{UID_NAMESPACE}:{mid}"


def init_firebase_app(
    service_account_path: str | None,
    name: str = "[DEFAULT]",
    http_timeout: float | None = None,
):
    """
    Initialize the Firebase app once at startup. Uses the service account key file
    when it exists, Application Default Credentials otherwise. http_timeout bounds
    every Firebase HTTP call (seconds).
    """
    if service_account_path and Path(service_account_path).exists():
        cred = credentials.Certificate(service_account_path)
        logger.info("Using Firebase service account from %s", service_account_path)
    else:
        cred = credentials.ApplicationDefault()
        logger.info("Firebase service account file not found; using application default credentials")
    options = {"httpTimeout": http_timeout} if http_timeout is not None else None
    return firebase_admin.initialize_app(cred, options=options, name=name)


def _to_local_user(record) -> LocalUser:
    return LocalUser(uid=record.uid, display_name=record.display_name, photo_url=record.photo_url)


class FirebaseIdentityPlatform:
    """Reads and creates Firebase Auth users and signs custom tokens for them."""

    def __init__(self, app=None):
        self.app = app

    def lookup_user(self, uid: str) -> LocalUser | None:
        """Return the user, or None if Firebase has no user with this uid."""
        try:
            record = auth.get_user(uid, app=self.app)
        except auth.UserNotFoundError:
            return None
        except (exceptions.FirebaseError, ValueError) as e:
            raise UpstreamUserStoreError(f"Firebase user lookup failed for uid={uid}: {e}") from e
        return _to_local_user(record)

    def create_user(self, user: LocalUser) -> LocalUser:
        try:
            record = auth.create_user(
                uid=user.uid,
                display_name=user.display_name,
                photo_url=user.photo_url,
                app=self.app,
            )
        except auth.UidAlreadyExistsError as e:
            raise UserAlreadyExists(f"Firebase user already exists: uid={user.uid}") from e
        except (exceptions.FirebaseError, ValueError) as e:
            raise UpstreamUserStoreError(f"Firebase user creation failed for uid={user.uid}: {e}") from e
        return _to_local_user(record)

    def create_custom_token(self, uid: str) -> str:
        try:
            token = auth.create_custom_token(uid, app=self.app)
        except (exceptions.FirebaseError, ValueError) as e:
            raise UpstreamUserStoreError(f"Firebase custom token signing failed for uid={uid}: {e}") from e
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return token


def get_or_create_user(platform, line: LineClient, mid: str, access_token: str) -> LocalUser:
    """
    Look up the Firebase user for a LINE mid. An existing user is returned as is.
    A missing user is created from the LINE profile fetched with the same access token.
    """
    uid = local_uid(mid)

    existing = platform.lookup_user(uid)
    if existing is not None:
        return existing

    profile = line.get_profile(access_token)
    logger.info("Creating Firebase user for LINE mid=%s", mid)
    try:
        return platform.create_user(
            LocalUser(uid=uid, display_name=profile.display_name, photo_url=profile.picture_url)
        )
    except UserAlreadyExists:
        # Concurrent first sign-in created it between our lookup and create
        existing = platform.lookup_user(uid)
        if existing is None:
            raise
        logger.info("Firebase user uid=%s was created concurrently; using it", uid)
        return existing
