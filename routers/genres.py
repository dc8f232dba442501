from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from db import get_session
from services import storage

router = APIRouter(prefix="/api/genres", tags=["genres"])

logger = logging.getLogger(__name__)


@router.get("")
def list_genres(session: Session = Depends(get_session)) -> Dict[str, Any]:
    try:
        genres = storage.list_genres(session)
    except SQLAlchemyError:
        logger.exception("genres.list failed")
        raise HTTPException(status_code=500, detail="Failed to load genres")
    return {"success": True, "genres": genres}
