"""
OpenID Connect identity extraction.

The frontend logs in against the OpenID provider and sends the ID token as
``Authorization: Bearer <token>``. The token is verified with the provider's
JWKS (``OPENID_JWKS_URL``) or, for providers without one, an HS256 shared
secret (``OPENID_SECRET``).
"""

import logging
from functools import lru_cache
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.database import get_async_session
from db.users import User
from services import users as users_service

logger = logging.getLogger(__name__)

JWKS_ALGORITHMS = ["RS256", "RS384", "RS512", "ES256", "ES384", "ES512"]


class OidcUser(BaseModel):
    id: UUID
    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: dict) -> "OidcUser":
        try:
            user_id = UUID(str(claims.get("sub")))
        except ValueError:
            logger.warning("OpenID subject %r is not a UUID", claims.get("sub"))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="The identity provider returned a subject that is not a UUID",
            )
        return cls(
            id=user_id,
            username=claims.get("preferred_username"),
            name=claims.get("name"),
            email=claims.get("email"),
        )

    def __str__(self):
        label = self.name or self.email or self.username
        return f'OidcUser {self.id} "{label}"' if label else f"OidcUser {self.id}"


@lru_cache
def _jwks_client(url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(url)


def decode_id_token(token: str) -> dict:
    options = {"verify_aud": bool(settings.openid_client_id)}
    audience = settings.openid_client_id or None
    issuer = settings.openid_issuer or None

    if settings.openid_jwks_url:
        signing_key = _jwks_client(settings.openid_jwks_url).get_signing_key_from_jwt(token)
        return jwt.decode(
            token, signing_key.key, algorithms=JWKS_ALGORITHMS,
            audience=audience, issuer=issuer, options=options,
        )
    if settings.openid_secret:
        return jwt.decode(
            token, settings.openid_secret, algorithms=["HS256"],
            audience=audience, issuer=issuer, options=options,
        )
    raise jwt.InvalidTokenError("No OpenID verification key is configured")


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_oidc_claims(request: Request) -> Optional[dict]:
    """Verified claims of the bearer token, None when the token is missing or rejected."""
    token = bearer_token(request)
    if token is None:
        return None
    try:
        return decode_id_token(token)
    except jwt.PyJWTError as e:
        logger.warning("Rejected identity token: %s", e)
        return None


def optional_oidc_user(claims: Optional[dict] = Depends(get_oidc_claims)) -> Optional[OidcUser]:
    if claims is None:
        return None
    return OidcUser.from_claims(claims)


def current_oidc_user(
    request: Request,
    oidc_user: Optional[OidcUser] = Depends(optional_oidc_user),
) -> OidcUser:
    if oidc_user is None:
        if bearer_token(request) is not None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid identity token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="You need to be logged in")
    return oidc_user


async def current_user(
    oidc_user: OidcUser = Depends(current_oidc_user),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    user = await users_service.find_user_by_id(db, oidc_user.id)
    if user is None:
        logger.warning("%s is not registered", oidc_user)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You need to call /user/me once before using this route",
        )
    if user.is_banned:
        logger.warning("Banned %s tried to access the api", user)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are banned")
    return user


async def optional_user(
    oidc_user: Optional[OidcUser] = Depends(optional_oidc_user),
    db: AsyncSession = Depends(get_async_session),
) -> Optional[User]:
    if oidc_user is None:
        return None
    user = await users_service.find_user_by_id(db, oidc_user.id)
    if user is None or user.is_banned:
        return None
    return user


async def current_admin(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        logger.warning("%s tried to access an admin route", user)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You need to be an admin")
    return user


async def optional_admin(user: Optional[User] = Depends(optional_user)) -> Optional[User]:
    if user is None or not user.is_admin:
        return None
    return user
