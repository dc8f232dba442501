from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from config import settings
from db import get_session
from models import EVENT_STATUSES, ROLES, User
from schemas import EventCreate, UserUpdate
from services import storage
from services.auth import client_ip, require_admin, require_owner

router = APIRouter(prefix="/api/admin", tags=["admin"])

logger = logging.getLogger(__name__)


def clamp_limit(limit: Optional[int]) -> int:
    """Missing -> default, below 1 -> fallback, above the cap -> cap."""
    if limit is None:
        return settings.actions_default_limit
    if limit < 1:
        return settings.actions_fallback_limit
    return min(limit, settings.actions_max_limit)


# ---------- Users ----------

@router.get("/users")
def list_users(
    _owner: User = Depends(require_owner),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    try:
        users = storage.list_users(session)
    except SQLAlchemyError:
        logger.exception("admin.users failed")
        raise HTTPException(status_code=500, detail="Failed to load users")
    return {"success": True, "users": users}


@router.put("/users/{user_id}")
def update_user(
    user_id: int,
    req: UserUpdate,
    request: Request,
    owner: User = Depends(require_owner),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    if req.role is None and req.is_active is None:
        raise HTTPException(status_code=400, detail="Nothing to update")
    if req.role is not None and req.role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role: {req.role}")
    if user_id == owner.id:
        raise HTTPException(status_code=400, detail="You cannot modify your own account")

    target = session.get(User, user_id)
    if target is None:
        raise HTTPException(status_code=404, detail="User not found")

    changes = []
    if req.role is not None and req.role != target.role:
        changes.append(("update_user_role", f"role {target.role} -> {req.role}"))
    if req.is_active is not None and bool(req.is_active) != target.is_active:
        action = "activate_user" if req.is_active else "deactivate_user"
        changes.append((action, f"is_active -> {req.is_active}"))

    target = storage.update_user(
        session,
        target,
        role=req.role,
        is_active=None if req.is_active is None else bool(req.is_active),
    )
    ip = client_ip(request)
    for action, details in changes:
        storage.log_admin_action(
            session,
            admin_id=owner.id,
            action=action,
            target_type="user",
            target_id=target.id,
            details=details,
            ip_address=ip,
        )
        logger.info("admin action=%s by=%s target=%s", action, owner.uid, target.uid)
    return {"success": True, "user": storage.user_to_dict(target)}


# ---------- Events ----------

@router.post("/events")
def create_event(
    req: EventCreate,
    request: Request,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    if req.missing_fields():
        raise HTTPException(status_code=400, detail="Please fill all required fields.")
    if req.status not in EVENT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status: {req.status}")
    genre_ids = storage.existing_genre_ids(session, req.genres)
    if not genre_ids:
        raise HTTPException(status_code=400, detail="Please select at least one genre.")

    data = req.model_dump(exclude={"genres"})
    event = storage.create_event(session, data, genre_ids, created_by=admin.id)
    storage.log_admin_action(
        session,
        admin_id=admin.id,
        action="create_event",
        target_type="event",
        target_id=event["id"],
        details=event["name"],
        ip_address=client_ip(request),
    )
    logger.info("event created id=%s by=%s", event["id"], admin.uid)
    return {"success": True, "event": event}


# ---------- Audit log ----------

@router.get("/actions")
def list_actions(
    limit: Optional[int] = Query(None),
    _owner: User = Depends(require_owner),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    try:
        actions = storage.list_admin_actions(session, clamp_limit(limit))
    except SQLAlchemyError:
        logger.exception("admin.actions failed")
        raise HTTPException(status_code=500, detail="Failed to load admin actions")
    return {"success": True, "actions": actions}
