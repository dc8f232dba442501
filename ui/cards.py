from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config import settings
from ui.state import ViewState


@dataclass
class EventCard:
    """
    One rendered event. `event_slug`, `type`, `genre` and `genre_tags` are
    the tag sources the category filter reads.
    """

    id: Optional[int]
    title: str
    info: str
    price_label: str
    image_url: str
    description: str = ""
    event_slug: Optional[str] = None
    type: Optional[str] = None
    genre: Optional[str] = None
    genre_tags: List[str] = field(default_factory=list)
    favorited: bool = False
    can_favorite: bool = False
    event: Dict[str, Any] = field(default_factory=dict, repr=False)


def price_label(price: Any) -> str:
    try:
        value = float(price)
    except (TypeError, ValueError):
        return "FREE"
    return f"${value:.2f}" if value > 0 else "FREE"


def info_line(event: Dict[str, Any]) -> str:
    parts = [event.get("location") or "Location TBA", event.get("date") or "TBA"]
    if event.get("time"):
        parts.append(str(event["time"]))
    if event.get("distance_km") is not None:
        parts.append(f"{event['distance_km']} km away")
    return " • ".join(parts)


def build_card(event: Dict[str, Any], state: ViewState) -> EventCard:
    event_id = event.get("id")
    fid = int(event_id) if event_id is not None else None
    tags = event.get("genres")
    if not tags and event.get("genre_name"):
        tags = [event["genre_name"]]
    return EventCard(
        id=fid,
        title=event.get("name") or event.get("title") or "Untitled Event",
        info=info_line(event),
        price_label=price_label(event.get("price")),
        image_url=event.get("image_url") or settings.placeholder_image,
        description=event.get("description") or "",
        event_slug=event.get("genre_slug"),
        type=event.get("genre_name"),
        genre=event.get("genre"),
        genre_tags=list(tags or []),
        favorited=fid in state.favorites,
        can_favorite=state.logged_in,
        event=event,
    )


def view_details_url(event_id: Any) -> str:
    return f"{settings.details_base_url}?id={int(event_id)}"
