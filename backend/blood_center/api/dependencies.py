"""Request Dependencies — identity verification, directory lookup, and policy guards.

Invariants:
    - Stage 1 (get_current_claims): Authorization header → verifier → Claims,
      or UnauthenticatedError. Runs at most once per request (FastAPI caches it)
    - Stage 2 (require_policy): stored user + core/access_policy.authorize,
      or ForbiddenError. Runs strictly after stage 1 and before the handler
      body, so a denial short-circuits every side effect
    - External adapters are read from app.state, never imported as globals

Design Decisions:
    - HTTPBearer(auto_error=False): we raise our own UnauthenticatedError so the
      401 body has the same shape as every other error
    - Dependency factory over decorators: policies are visible in the route
      signature and overridable in tests
"""

import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.core.access_policy import authorize
from blood_center.core.domain_types import Policy
from blood_center.core.errors import ForbiddenError, UnauthenticatedError
from blood_center.infrastructure.database import get_db
from blood_center.infrastructure.identity_verifier import (
    Claims, FirebaseIdentityVerifier,
)
from blood_center.infrastructure.payment_gateway import StripePaymentGateway
from blood_center.models.user import User
from blood_center.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> FirebaseIdentityVerifier:
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        raise RuntimeError("Identity verifier not initialized")
    return verifier


def get_payment_gateway(request: Request) -> StripePaymentGateway:
    gateway = getattr(request.app.state, "payment_gateway", None)
    if gateway is None:
        raise RuntimeError("Payment gateway not initialized")
    return gateway


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: FirebaseIdentityVerifier = Depends(get_identity_verifier),
) -> Claims:
    """Stage 1 — verified identity or 401."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Unauthorized: No token provided")
    return await verifier.verify(credentials.credentials)


async def get_current_user(
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Directory record for the verified identity (None if never registered)."""
    return await UserDirectory(db).get_by_email(claims.email)


def require_policy(policy: Policy) -> Callable:
    """Stage 2 — build a dependency that enforces policy on the stored user."""

    async def guard(
        user: User | None = Depends(get_current_user),
        claims: Claims = Depends(get_current_claims),
    ) -> User:
        denial = authorize(user, policy)
        if denial:
            logger.warning(
                f"Access denied ({policy.value}): {denial['message']}",
                extra={"user_email": claims.email, "error_code": denial["code"]},
            )
            raise ForbiddenError(denial["message"], denial["code"])
        return user

    return guard


require_staff = require_policy(Policy.STAFF)
require_admin = require_policy(Policy.ADMIN)
