"""Identity Verifier — Firebase ID-token verification behind a narrow async contract.

Invariants:
    - verify(token) returns Claims(uid, email) or raises UnauthenticatedError
    - Claims.email is always lower-cased and non-empty
    - Every firebase verification failure (expired, revoked, bad signature,
      malformed) maps to UnauthenticatedError — callers never see SDK exceptions
    - A call that exceeds timeout_seconds raises UpstreamTimeoutError

Design Decisions:
    - firebase_admin.auth.verify_id_token is blocking (it may fetch public
      certificates), so it runs in a worker thread via asyncio.to_thread
    - A dedicated firebase App (name="blood-center") instead of the default app:
      tests and scripts can initialise their own without collisions
    - check_revoked=True: a disabled or signed-out account stops working
      immediately instead of at token expiry
"""

import asyncio
import logging
from dataclasses import dataclass

import firebase_admin
from firebase_admin import auth, credentials

from blood_center.core.errors import UnauthenticatedError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

_APP_NAME = "blood-center"


@dataclass(frozen=True)
class Claims:
    """Verified identity attributes for one request."""
    uid: str
    email: str
    name: str | None = None


class FirebaseIdentityVerifier:
    """Verifies Firebase ID tokens with a per-call timeout."""

    def __init__(
        self,
        credentials_path: str | None = None,
        project_id: str | None = None,
        timeout_seconds: float = 10.0,
    ):
        self.timeout_seconds = timeout_seconds
        self._app = _get_or_init_app(credentials_path, project_id)

    async def verify(self, token: str) -> Claims:
        try:
            decoded = await asyncio.wait_for(
                asyncio.to_thread(
                    auth.verify_id_token, token, self._app, True,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError("Identity verification", self.timeout_seconds)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.UserDisabledError,
                auth.CertificateFetchError) as e:
            logger.warning(f"Token rejected: {type(e).__name__}")
            raise UnauthenticatedError("Unauthorized: Invalid token")

        return claims_from_token(decoded)


def claims_from_token(decoded: dict) -> Claims:
    """Build Claims from a decoded token payload; email is mandatory."""
    email = (decoded.get("email") or "").strip().lower()
    if not email:
        raise UnauthenticatedError("Unauthorized: Token carries no email")
    uid = decoded.get("uid") or decoded.get("sub") or ""
    return Claims(uid=uid, email=email, name=decoded.get("name"))


def _get_or_init_app(
    credentials_path: str | None, project_id: str | None,
) -> firebase_admin.App:
    try:
        return firebase_admin.get_app(_APP_NAME)
    except ValueError:
        pass
    cred = (
        credentials.Certificate(credentials_path)
        if credentials_path
        else credentials.ApplicationDefault()
    )
    options = {"projectId": project_id} if project_id else None
    logger.info("Initialising Firebase app for token verification")
    return firebase_admin.initialize_app(cred, options, name=_APP_NAME)
