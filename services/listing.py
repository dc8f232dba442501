from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from services import storage
from services.filtering import filter_events
from services.geo import distance_km

SORTS = ("date", "price_asc", "price_desc", "name", "distance")

_FAR = float("inf")


@dataclass
class EventQuery:
    genre: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None
    max_price: Optional[float] = None
    sort: str = "date"
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: Optional[float] = None


def _as_card(ev: Dict[str, Any]) -> Dict[str, Any]:
    # same tag sources the client cards expose
    return {
        "event": ev,
        "event_slug": ev.get("genre_slug"),
        "type": ev.get("genre_name"),
        "genre_tags": ev.get("genres") or [],
    }


def _sort_key(sort: str):
    if sort == "price_asc":
        return lambda e: (e.get("price") or 0.0, e.get("date") or "")
    if sort == "price_desc":
        return lambda e: (-(e.get("price") or 0.0), e.get("date") or "")
    if sort == "name":
        return lambda e: (e.get("name") or "").lower()
    if sort == "distance":
        return lambda e: (
            _FAR if e.get("distance_km") is None else e["distance_km"],
            e.get("date") or "",
        )
    return lambda e: (e.get("date") or "9999-12-31", e.get("time") or "")


def search_events(session: Session, q: EventQuery) -> List[Dict[str, Any]]:
    """
    Published events narrowed by the query:
    - genre uses the same fuzzy category match as the client filter
    - date is exact, location a case-insensitive substring
    - max_price inclusive
    - lat/lng annotate `distance_km`; radius drops events farther away
      (events without coordinates are dropped too once a radius is set)
    """
    events = storage.list_events(session)

    if q.genre:
        events = [c["event"] for c in filter_events([_as_card(e) for e in events], q.genre).visible]
    if q.date:
        events = [e for e in events if e.get("date") == q.date]
    if q.location:
        needle = q.location.strip().lower()
        events = [e for e in events if needle in (e.get("location") or "").lower()]
    if q.max_price is not None:
        events = [e for e in events if (e.get("price") or 0.0) <= q.max_price]

    if q.lat is not None and q.lng is not None:
        for e in events:
            e["distance_km"] = distance_km(q.lat, q.lng, e.get("latitude"), e.get("longitude"))
        if q.radius is not None:
            events = [
                e for e in events
                if e["distance_km"] is not None and e["distance_km"] <= q.radius
            ]

    return sorted(events, key=_sort_key(q.sort if q.sort in SORTS else "date"))
