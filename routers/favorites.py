from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from db import get_session
from models import Event, User
from schemas import FavoriteIn
from services import storage
from services.auth import current_user

router = APIRouter(prefix="/api/favorites", tags=["favorites"])

logger = logging.getLogger(__name__)


@router.get("")
def list_favorites(
    user: User = Depends(current_user),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    return {"success": True, "favorites": storage.list_favorites(session, user.id)}


@router.post("")
def add_favorite(
    req: FavoriteIn,
    user: User = Depends(current_user),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    if session.get(Event, req.event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    created = storage.add_favorite(session, user.id, req.event_id)
    logger.info("favorite add uid=%s event=%s created=%s", user.uid, req.event_id, created)
    return {"success": True, "event_id": req.event_id, "created": created}


@router.delete("")
def remove_favorite(
    event_id: int = Query(...),
    user: User = Depends(current_user),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    removed = storage.remove_favorite(session, user.id, event_id)
    logger.info("favorite remove uid=%s event=%s removed=%s", user.uid, event_id, removed)
    return {"success": True, "event_id": event_id, "removed": removed}
