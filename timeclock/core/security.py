from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Header

from timeclock.api.deps import get_authenticator
from timeclock.core.config import settings
from timeclock.core.exceptions import UnauthorizedException
from timeclock.services.manager_auth import ManagerSessionAuthenticator


ALGORITHM = "HS256"
MANAGER_SCOPE = "manager"


def create_jwt(payload: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = payload.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=12)
    exp = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": exp})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise UnauthorizedException(detail="Invalid manager token") from exc


def create_manager_token(session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    # The session itself expires server-side; the token only names which session it belongs to
    return create_jwt({"sid": session_id, "scope": MANAGER_SCOPE}, expires_delta)


async def require_manager_session(
    authorization: Optional[str] = Header(None),
    authenticator: ManagerSessionAuthenticator = Depends(get_authenticator),
) -> ManagerSessionAuthenticator:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise UnauthorizedException()
    token = authorization.split(" ", 1)[1]
    payload = decode_jwt(token)
    if payload.get("scope") != MANAGER_SCOPE or not payload.get("sid"):
        raise UnauthorizedException(detail="Invalid manager token")
    if payload["sid"] != authenticator.session_id or not authenticator.is_valid():
        raise UnauthorizedException(detail="Manager session expired or replaced")
    return authenticator
