"""
Bearer-token authentication.

Tokens are HS256 JWTs whose `sub` claim is the teacher id.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from examhub.config import settings
from examhub.errors import AccessDenied, Unauthenticated


class TokenData(BaseModel):
    sub: str
    roles: List[str] = []


bearer = HTTPBearer(auto_error=False)


def create_token(user_id: str, roles: Optional[List[str]] = None, ttl_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = ttl_minutes if ttl_minutes is not None else settings.access_token_expire_minutes
    payload = {
        "sub": user_id,
        "roles": roles or ["teacher"],
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl)).timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError as e:
        raise Unauthenticated(str(e)) from e
    if not payload.get("sub"):
        raise AccessDenied("Token carries no subject", message="Access denied")
    return TokenData(sub=str(payload["sub"]), roles=payload.get("roles", []))


def get_current_teacher(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> TokenData:
    """Resolve the caller. A missing identity is an access-denied condition."""
    if creds is None or not creds.credentials:
        raise AccessDenied("Missing token", message="Access denied")
    return decode_token(creds.credentials)
