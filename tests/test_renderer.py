import pytest

from ui import renderer
from ui.cards import build_card, info_line, price_label, view_details_url
from ui.client import ApiError
from ui.state import ViewState

EVENTS = [
    {"id": 1, "name": "Jazz Night", "genre_name": "Music", "genre_slug": "music", "genres": ["Music"],
     "location": "Blue Room", "date": "2026-11-02", "time": "20:00", "price": 15},
    {"id": 2, "name": "Street Food Fair", "genre_name": "Food & Drinks", "genre_slug": "food-and-drinks",
     "genres": ["Food & Drinks"], "description": "Tacos and more", "location": "Old Town", "price": 0},
    {"id": 3, "title": "Rock Show", "genre_name": "Music, Concert", "location": "Kaunas Arena"},
]
GENRES = [{"id": 1, "name": "Music", "slug": "music"}, {"id": 2, "name": "Food & Drinks", "slug": "food-and-drinks"}]


class FakeApi:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def _maybe_fail(self):
        if self.fail:
            raise ApiError("boom", 500)

    def me(self):
        self._maybe_fail()
        return {"id": 7, "name": "Uma", "role": "user"}

    def genres(self):
        self._maybe_fail()
        return list(GENRES)

    def events(self, **params):
        self.calls.append(("events", params))
        self._maybe_fail()
        return [dict(e) for e in EVENTS]

    def favorites(self):
        self._maybe_fail()
        return [{"id": 2}]

    def add_favorite(self, event_id):
        self.calls.append(("add", event_id))
        self._maybe_fail()
        return {"success": True}

    def remove_favorite(self, event_id):
        self.calls.append(("remove", event_id))
        self._maybe_fail()
        return {"success": True}


@pytest.fixture
def state():
    s = ViewState(events=[dict(e) for e in EVENTS], genres=list(GENRES))
    return s


def test_price_label():
    assert price_label(15) == "$15.00"
    assert price_label("9.5") == "$9.50"
    assert price_label(0) == "FREE"
    assert price_label(None) == "FREE"
    assert price_label("n/a") == "FREE"


def test_card_fallbacks(state):
    card = build_card({"id": "4"}, state)
    assert card.id == 4
    assert card.title == "Untitled Event"
    assert card.info == "Location TBA • TBA"
    assert card.price_label == "FREE"
    assert card.image_url.startswith("https://placehold.co/")
    assert card.can_favorite is False


def test_card_info_with_distance():
    assert info_line({"location": "Hall", "date": "2026-01-01", "time": "19:00", "distance_km": 2.4}) == \
        "Hall • 2026-01-01 • 19:00 • 2.4 km away"


def test_card_exposes_tag_sources(state):
    card = build_card(EVENTS[2], state)
    assert card.title == "Rock Show"
    assert card.type == "Music, Concert"
    assert card.genre_tags == ["Music, Concert"]


def test_view_details_url():
    assert view_details_url("12") == "/event?id=12"


def test_genre_chips_and_heading(state):
    chips = renderer.genre_chips(state)
    assert [c["label"] for c in chips] == ["All Events", "Music", "Food & Drinks"]
    assert chips[0]["active"] is True

    assert renderer.select_genre(state, "food-and-drinks") == "Food & Drinks Events"
    assert [c["active"] for c in renderer.genre_chips(state)] == [False, False, True]
    assert renderer.select_genre(state, "Theatre") == "Theatre Events"
    assert renderer.select_genre(state, None) == "All Events"


def test_visible_cards_follow_selected_genre(state):
    assert [c.id for c in renderer.visible_cards(state)] == [1, 2, 3]
    renderer.select_genre(state, "music")
    assert [c.id for c in renderer.visible_cards(state)] == [1, 3]
    # same category after a re-render gives the same set
    assert [c.id for c in renderer.visible_cards(state)] == [1, 3]
    assert len(state.events) == 3


def test_search_does_not_overwrite_events(state):
    assert [c.id for c in renderer.search_events(state, "TACOS")] == [2]
    assert [c.id for c in renderer.search_events(state, "kaunas")] == [3]
    assert renderer.search_events(state, "nothing here") == []
    assert len(state.events) == 3
    renderer.select_genre(state, "music")
    assert [c.id for c in renderer.search_events(state, "  ")] == [1, 3]


def test_load_events_sends_genre_and_location(state):
    api = FakeApi()
    state.selected_genre = "music"
    state.user_location = (54.68, 25.27)
    assert renderer.load_events(state, api, {"sort": "price_asc"}) is True
    assert api.calls[0] == ("events", {"sort": "price_asc", "genre": "music", "lat": 54.68, "lng": 25.27})


def test_load_failures_become_messages(state):
    api = FakeApi(fail=True)
    assert renderer.load_events(state, api) is False
    assert state.message == "Unable to load events: boom"
    assert len(state.events) == 3
    assert renderer.load_genres(state, api) is False
    assert renderer.load_current_user(state, api) is False
    assert state.current_user is None


def test_load_user_and_favorites(state):
    api = FakeApi()
    assert renderer.load_favorites(state, api) is True
    assert state.favorites == set()
    renderer.load_current_user(state, api)
    renderer.load_favorites(state, api)
    assert state.favorites == {2}
    assert build_card(EVENTS[1], state).favorited is True


def test_toggle_requires_login(state):
    api = FakeApi()
    assert renderer.toggle_favorite(state, api, 1) is False
    assert state.message == "Please log in to add favorites"
    assert api.calls == []


def test_toggle_favorite_optimistic(state):
    api = FakeApi()
    state.current_user = {"id": 7}
    assert renderer.toggle_favorite(state, api, "1", now=100.0) is True
    assert state.favorites == {1}
    assert renderer.toggle_favorite(state, api, 1, now=110.0) is True
    assert state.favorites == set()
    assert api.calls == [("add", 1), ("remove", 1)]
    assert state.pending_favorites == set()


def test_toggle_favorite_rolls_back_on_failure(state):
    api = FakeApi(fail=True)
    state.current_user = {"id": 7}
    state.favorites = {2}
    assert renderer.toggle_favorite(state, api, 1) is False
    assert state.favorites == {2}
    assert renderer.toggle_favorite(state, api, 2) is False
    assert state.favorites == {2}
    assert state.message.startswith("Failed to update favorite")
    assert state.pending_favorites == set()


def test_toggle_ignored_while_in_flight(state):
    api = FakeApi()
    state.current_user = {"id": 7}
    state.pending_favorites.add(1)
    assert renderer.toggle_favorite(state, api, 1) is False
    assert api.calls == []
    assert state.favorites == set()


def test_double_click_sends_one_request(state):
    api = FakeApi()
    state.current_user = {"id": 7}
    assert renderer.toggle_favorite(state, api, 1, now=50.0) is True
    # next rerun arrives right after the first one finished
    assert renderer.toggle_favorite(state, api, 1, now=50.2) is False
    assert api.calls == [("add", 1)]
    assert state.favorites == {1}

    # other events are not held back
    assert renderer.toggle_favorite(state, api, 2, now=50.3) is True

    assert renderer.toggle_favorite(state, api, 1, now=52.0) is True
    assert api.calls == [("add", 1), ("add", 2), ("remove", 1)]
    assert state.favorites == {2}


def test_toggle_without_explicit_time_uses_clock(state):
    api = FakeApi()
    state.current_user = {"id": 7}
    assert renderer.toggle_favorite(state, api, 3) is True
    assert renderer.toggle_favorite(state, api, 3) is False
    assert api.calls == [("add", 3)]
