"""
Bearer-token authentication and the admin role check.

``get_current_claims`` verifies the token only; it never reads the store.
``require_admin`` adds one user lookup per request and is meant to be stacked
on top of it with ``Depends``.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import Settings
from errors import Forbidden, Unauthenticated
from repositories import UserRepository, get_user_repository

logger = logging.getLogger(__name__)

JWT_ALGO = "HS256"
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def create_token(claims: dict, settings: Settings) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.token_expire_minutes)
    to_encode = {**claims, "exp": exp}
    return jwt.encode(to_encode, settings.token_secret, algorithm=JWT_ALGO)


def decode_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.token_secret, algorithms=[JWT_ALGO])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        raise Unauthenticated()
    except jwt.InvalidTokenError:
        logger.debug("Rejected invalid token")
        raise Unauthenticated()
    if not payload.get("email"):
        raise Unauthenticated()
    return payload


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return decode_token(credentials.credentials, settings)


def require_admin(
    claims: dict = Depends(get_current_claims),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    if users.role_of(claims["email"]) != "admin":
        logger.info("Denied admin route to %s", claims["email"])
        raise Forbidden()
    return claims
