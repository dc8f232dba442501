# ui/app.py
import streamlit as st

from config import settings
from ui import renderer
from ui.cards import view_details_url
from ui.client import ApiError, EventboardApi
from ui.state import ViewState

# ----------------------------
# Basic page setup
# ----------------------------
st.set_page_config(page_title="Eventboard", page_icon="🎟️", layout="wide")
st.title("Eventboard")
st.caption(f"API: `{settings.api_base}`")

if "view" not in st.session_state:
    st.session_state.view = ViewState()
if "uid" not in st.session_state:
    st.session_state.uid = ""

state: ViewState = st.session_state.view
api = EventboardApi(uid=st.session_state.uid or None)

# ----------------------------
# Sidebar: sign in
# ----------------------------
with st.sidebar:
    st.header("Account")
    if state.logged_in:
        user = state.current_user
        st.write(f"Signed in as **{user.get('name') or user.get('uid')}**")
        if state.is_admin:
            st.caption(f"Role: {user.get('role', '').upper()}")
        if st.button("Sign out"):
            st.session_state.uid = ""
            state.current_user = None
            state.favorites = set()
            st.rerun()
    else:
        with st.form("login_form"):
            uid = st.text_input("User ID")
            name = st.text_input("Name")
            if st.form_submit_button("Sign in") and uid.strip():
                try:
                    state.current_user = api.login(uid.strip(), name=name.strip() or None)
                    st.session_state.uid = uid.strip()
                    renderer.load_favorites(state, api)
                    st.rerun()
                except ApiError as e:
                    st.error(f"Sign in failed: {e}")

    st.header("Advanced Filters")
    with st.form("filter_form"):
        f_date = st.text_input("Date (YYYY-MM-DD)")
        f_location = st.text_input("Location")
        f_price = st.number_input("Max price", min_value=0.0, value=0.0, step=5.0)
        f_sort = st.selectbox("Sort", ["date", "price_asc", "price_desc", "name", "distance"])
        use_location = st.checkbox("Use my location")
        c1, c2 = st.columns(2)
        lat = c1.number_input("Lat", value=0.0, format="%.4f")
        lng = c2.number_input("Lng", value=0.0, format="%.4f")
        f_radius = st.number_input("Radius (km)", min_value=0.0, value=0.0)
        applied = st.form_submit_button("Apply")

filters = {
    "date": f_date.strip() or None,
    "location": f_location.strip() or None,
    "max_price": f_price or None,
    "sort": f_sort,
    "radius": (f_radius or None) if use_location else None,
}
state.user_location = (lat, lng) if use_location else None

# ----------------------------
# Data
# ----------------------------
if not state.genres:
    renderer.load_genres(state, api)
if applied or not state.events:
    renderer.load_events(state, api, filters)
if state.logged_in and applied:
    renderer.load_favorites(state, api)

# ----------------------------
# Genre chips
# ----------------------------
chips = renderer.genre_chips(state)
cols = st.columns(min(len(chips), 8) or 1)
for i, chip in enumerate(chips):
    col = cols[i % len(cols)]
    label = f"● {chip['label']}" if chip["active"] else chip["label"]
    if col.button(label, key=f"chip_{i}"):
        renderer.select_genre(state, chip["category_slug"])
        st.rerun()

heading = renderer.select_genre(state, state.selected_genre)
st.header(heading)

query = st.text_input("Search events", placeholder="Name, description or location")

if state.message:
    st.warning(state.message)

cards = renderer.search_events(state, query)
if not cards:
    st.info("No events found. Try adjusting your search or filters.")

for card in cards:
    with st.container():
        left, right = st.columns([1, 2])
        with left:
            st.image(card.image_url, use_container_width=True)
        with right:
            st.markdown(f"### {card.title}")
            st.caption(card.info)
            if card.genre_tags:
                st.caption(" · ".join(card.genre_tags))
            st.write(f"**{card.price_label}**")
            b1, b2 = st.columns(2)
            b1.link_button("View Details", view_details_url(card.id))
            fav_label = "❤️ Favorited" if card.favorited else "♡ Add to Favorites"
            if b2.button(fav_label, key=f"fav_{card.id}", disabled=not card.can_favorite):
                renderer.toggle_favorite(state, api, card.id)
                st.rerun()
        st.divider()

st.caption("🎟️ Eventboard")
