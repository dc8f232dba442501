"""
Event list behaviour, independent of Streamlit widgets.

The Streamlit page (ui/app.py) keeps one `ViewState` per session and calls
these functions; they talk to the backend through an `EventboardApi`-like
object and never raise network failures to the page. Failures end up in
`state.message` instead.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from config import settings
from services.filtering import filter_events
from ui.cards import EventCard, build_card
from ui.client import ApiError
from ui.state import ViewState

logger = logging.getLogger(__name__)


# ---------- Loading ----------

def load_current_user(state: ViewState, api) -> bool:
    try:
        state.current_user = api.me()
    except ApiError as exc:
        logger.error("Failed to load user: %s", exc)
        state.current_user = None
        return False
    return True


def load_genres(state: ViewState, api) -> bool:
    try:
        state.genres = api.genres()
    except ApiError as exc:
        logger.error("Failed to load genres: %s", exc)
        state.message = f"Unable to load genres: {exc}"
        return False
    return True


def load_events(state: ViewState, api, filters: Optional[Dict[str, Any]] = None) -> bool:
    """
    Fetch events with the advanced filters (date, location, price, sort...).
    The genre is sent too, the client-side filter still applies on render.
    """
    params = dict(filters or {})
    if state.selected_genre:
        params["genre"] = state.selected_genre
    if state.user_location:
        params["lat"], params["lng"] = state.user_location
    try:
        state.events = api.events(**params)
    except ApiError as exc:
        logger.error("Failed to load events: %s", exc)
        state.message = f"Unable to load events: {exc}"
        return False
    state.message = None
    return True


def load_favorites(state: ViewState, api) -> bool:
    if not state.logged_in:
        state.favorites = set()
        return True
    try:
        state.favorites = {int(f["id"]) for f in api.favorites()}
    except ApiError as exc:
        logger.error("Failed to load favorites: %s", exc)
        return False
    return True


# ---------- Genre chips ----------

def genre_chips(state: ViewState) -> List[Dict[str, Any]]:
    chips = [{"label": "All Events", "genre": "", "category_slug": "", "active": not state.selected_genre}]
    for g in state.genres:
        slug = g.get("slug") or g.get("name") or ""
        chips.append(
            {
                "label": g.get("name") or slug,
                "genre": slug,
                "category_slug": slug,
                "active": slug == state.selected_genre,
            }
        )
    return chips


def select_genre(state: ViewState, genre_slug: Optional[str]) -> str:
    """Store the selection and return the list heading."""
    state.selected_genre = genre_slug or ""
    if not state.selected_genre:
        return "All Events"
    genre = next(
        (g for g in state.genres if state.selected_genre in (g.get("slug"), g.get("name"))),
        None,
    )
    return f"{genre['name'] if genre else state.selected_genre} Events"


# ---------- Cards ----------

def render_cards(state: ViewState) -> List[EventCard]:
    return [build_card(ev, state) for ev in state.events]


def visible_cards(state: ViewState) -> List[EventCard]:
    return filter_events(render_cards(state), state.selected_genre).visible


def search_events(state: ViewState, query: str) -> List[EventCard]:
    """Substring search over name/title, description and location of all loaded events."""
    q = (query or "").strip().lower()
    if not q:
        return visible_cards(state)
    cards = render_cards(state)
    return [
        c for c in cards
        if q in (c.event.get("name") or c.event.get("title") or "").lower()
        or q in (c.event.get("description") or "").lower()
        or q in (c.event.get("location") or "").lower()
    ]


# ---------- Favorites ----------

def toggle_favorite(state: ViewState, api, event_id: Any, now: Optional[float] = None) -> bool:
    """
    Optimistic toggle: local state flips first, the request follows, and a
    failure rolls the flip back. Returns True when the server confirmed.

    Toggles for an event are ignored while its request is in flight and for
    `favorite_cooldown_seconds` after the previous toggle. Each Streamlit
    rerun handles one click, so a double click shows up as two quick
    toggles and only the first one goes through.
    """
    if not state.logged_in:
        state.message = "Please log in to add favorites"
        return False
    fid = int(event_id)
    started = time.monotonic()
    now = started if now is None else now
    if fid in state.pending_favorites:
        return False
    last = state.last_toggled.get(fid)
    if last is not None and now - last < settings.favorite_cooldown_seconds:
        logger.info("toggle_favorite ignored event=%s (cooldown)", fid)
        return False

    was_favorited = fid in state.favorites
    if was_favorited:
        state.favorites.discard(fid)
    else:
        state.favorites.add(fid)
    state.pending_favorites.add(fid)
    try:
        if was_favorited:
            api.remove_favorite(fid)
        else:
            api.add_favorite(fid)
    except ApiError as exc:
        logger.error("toggle_favorite failed event=%s: %s", fid, exc)
        if was_favorited:
            state.favorites.add(fid)
        else:
            state.favorites.discard(fid)
        state.message = f"Failed to update favorite: {exc}"
        return False
    finally:
        state.pending_favorites.discard(fid)
        # cooldown counts from when the request finished
        state.last_toggled[fid] = now + (time.monotonic() - started)
    return True
