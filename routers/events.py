from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from db import get_session
from services import storage
from services.listing import EventQuery, search_events

router = APIRouter(prefix="/api/events", tags=["events"])

logger = logging.getLogger(__name__)


@router.get("")
def list_events(
    *,
    genre: Optional[str] = Query(None, description="Genre slug or label"),
    date: Optional[str] = Query(None, description="Exact date, YYYY-MM-DD"),
    location: Optional[str] = Query(None, description="Location substring"),
    max_price: Optional[float] = Query(None, ge=0),
    sort: str = Query("date", description="date, price_asc, price_desc, name, distance"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, description="Kilometres around lat/lng"),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    """
    Published events, optionally narrowed by genre/date/location/price.
    With lat/lng every event carries `distance_km`.
    """
    q = EventQuery(
        genre=genre,
        date=date,
        location=location,
        max_price=max_price,
        sort=sort,
        lat=lat,
        lng=lng,
        radius=radius,
    )
    try:
        events = search_events(session, q)
    except SQLAlchemyError:
        logger.exception("events.list failed")
        raise HTTPException(status_code=500, detail="Failed to load events")
    return {"success": True, "events": events, "count": len(events)}


@router.get("/{event_id}")
def get_event(event_id: int, session: Session = Depends(get_session)) -> Dict[str, Any]:
    try:
        event = storage.get_event(session, event_id)
    except SQLAlchemyError:
        logger.exception("events.get failed id=%s", event_id)
        raise HTTPException(status_code=500, detail="Failed to load event")
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"success": True, "event": event}
