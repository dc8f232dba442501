from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlmodel import Session

from config import settings
from db import get_session
from models import User
from schemas import LoginRequest
from services import storage
from services.auth import current_user

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/login")
def login(req: LoginRequest, session: Session = Depends(get_session)) -> Dict[str, Any]:
    """
    Registers the caller on first sign-in and refreshes name/email afterwards.
    UIDs listed in OWNER_UIDS are promoted to owner.
    """
    role = "owner" if req.uid in settings.owner_uids else None
    user = storage.upsert_user(session, req.uid, name=req.name, email=req.email, role=role)
    return {"success": True, "user": storage.user_to_dict(user)}


@router.get("/me")
def me(user: User = Depends(current_user)) -> Dict[str, Any]:
    return {"success": True, "user": storage.user_to_dict(user)}
