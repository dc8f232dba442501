"""
Request authentication helpers shared by every protected route.

The caller identifies itself with the auth header (`X-User-UID` by default),
which maps onto `User.uid`. Use the dependencies directly:

    @router.get("/things")
    def things(user: User = Depends(current_user)): ...
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from config import settings
from db import get_session
from models import User
from services import storage

logger = logging.getLogger(__name__)

ADMIN_ROLES = frozenset({"admin", "owner"})


def request_uid(request: Request) -> Optional[str]:
    uid = (request.headers.get(settings.auth_header) or "").strip()
    if not uid:
        auth = request.headers.get("authorization") or ""
        if auth.lower().startswith("bearer "):
            uid = auth[7:].strip()
    return uid or None


def current_user(request: Request, session: Session = Depends(get_session)) -> User:
    uid = request_uid(request)
    if not uid:
        raise HTTPException(status_code=401, detail="Authentication required")
    user = storage.get_user_by_uid(session, uid)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")
    return user


def require_admin(user: User = Depends(current_user)) -> User:
    if user.role not in ADMIN_ROLES:
        logger.warning("admin access denied uid=%s role=%s", user.uid, user.role)
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_owner(user: User = Depends(current_user)) -> User:
    if user.role != "owner":
        logger.warning("owner access denied uid=%s role=%s", user.uid, user.role)
        raise HTTPException(status_code=403, detail="Owner access required")
    return user


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
