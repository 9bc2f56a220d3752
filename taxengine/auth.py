"""
auth.py — Bearer identity-token check for every /api/tax route.

Tokens are issued by the auth collaborator and signed with the shared
settings.secret_key (HS256). This module only verifies them; it never issues
tokens in production code.

Usage:
    @router.post("/compute")
    async def compute(body: ..., identity: Identity = Depends(require_identity)):
        ...
"""
from __future__ import annotations

import logging
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict

from taxengine.config import settings
from taxengine.errors import UnauthorizedError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """The verified caller. user_id is the token's `sub` claim."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None


def decode_token(token: str) -> dict:
    """Verify signature and expiry. Raises jwt.InvalidTokenError on any failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


async def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """FastAPI dependency: 401 unless a valid bearer token carrying `sub` is present."""
    if credentials is None:
        raise UnauthorizedError("Missing bearer token")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired") from None
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected identity token: %s", type(exc).__name__)
        raise UnauthorizedError("Invalid token") from None

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("Token has no subject")

    return Identity(
        user_id=str(subject),
        email=payload.get("email"),
        name=payload.get("name"),
    )


__all__ = ["Identity", "decode_token", "require_identity", "security"]
