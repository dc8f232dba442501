# ui/admin.py
import streamlit as st

from ui.client import ApiError, EventboardApi
from ui.forms import FormError, action_row, format_date, user_stats, validate_event_form

st.set_page_config(page_title="Eventboard Admin", page_icon="🛠️", layout="wide")
st.title("Eventboard Admin")

uid = st.session_state.get("uid") or st.sidebar.text_input("Admin user ID")
if not uid:
    st.warning("Sign in with an admin account first.")
    st.stop()

api = EventboardApi(uid=uid)
try:
    me = api.me()
except ApiError as e:
    st.error(f"Authentication failed: {e}")
    st.stop()

if me.get("role") not in ("admin", "owner"):
    st.error("Not authorized")
    st.stop()

is_owner = me.get("role") == "owner"
tabs = st.tabs(["➕ Add Event", "👥 Users", "📜 Actions"])

# ---------- ADD EVENT ----------
with tabs[0]:
    try:
        genres = api.genres()
    except ApiError as e:
        genres = []
        st.error(f"Couldn't load genres: {e}")

    with st.form("add_event_form", clear_on_submit=True):
        name = st.text_input("Title *")
        description = st.text_area("Description *")
        c1, c2 = st.columns(2)
        date = c1.date_input("Date *", value=None)
        time = c2.time_input("Time *", value=None)
        location = st.text_input("Location *")
        price = st.number_input("Price", min_value=0.0, value=0.0, step=1.0)
        image_url = st.text_input("Image URL")
        picked = st.multiselect(
            "Genres *",
            options=[g["id"] for g in genres],
            format_func=lambda gid: next((g["name"] for g in genres if g["id"] == gid), str(gid)),
        )
        if st.form_submit_button("Add Event", type="primary"):
            try:
                payload = validate_event_form(
                    {
                        "name": name,
                        "description": description,
                        "date": date.isoformat() if date else "",
                        "time": time.strftime("%H:%M") if time else "",
                        "location": location,
                        "price": price,
                    },
                    picked,
                    image_url=image_url.strip() or None,
                )
                created = api.create_event(payload)
                st.success(f"Event created successfully! (#{created['id']})")
            except (FormError, ApiError) as e:
                st.error(str(e))

# ---------- USERS ----------
with tabs[1]:
    if not is_owner:
        st.info("Owner access required.")
    else:
        try:
            users = api.admin_users()
        except ApiError as e:
            users = []
            st.error(f"Failed to load users: {e}")

        stats = user_stats(users)
        s1, s2, s3, s4 = st.columns(4)
        s1.metric("Total", stats["total"])
        s2.metric("Owners", stats["owners"])
        s3.metric("Admins", stats["admins"])
        s4.metric("Users", stats["users"])

        if not users:
            st.info("No users found")
        roles = ["user", "admin", "owner"]
        for u in users:
            is_self = u["id"] == me["id"]
            with st.container():
                st.markdown(f"**{u.get('name') or 'User'}** {'(You)' if is_self else ''}")
                st.caption(
                    f"{u.get('email') or 'Unknown'} • ID {u['id']} • Joined {format_date(u.get('joined_at'))}"
                )
                c1, c2, c3 = st.columns([2, 1, 1])
                role = c1.selectbox(
                    "Role", roles, index=roles.index(u.get("role") or "user"),
                    key=f"role_{u['id']}", disabled=is_self,
                )
                active = bool(u.get("is_active"))
                if c2.button("Deactivate" if active else "Activate", key=f"status_{u['id']}", disabled=is_self):
                    try:
                        api.update_user(u["id"], is_active=0 if active else 1)
                        st.rerun()
                    except ApiError as e:
                        st.error(str(e))
                if c3.button("Save Changes", key=f"save_{u['id']}", disabled=is_self):
                    try:
                        api.update_user(u["id"], role=role)
                        st.success("User role updated successfully!")
                        st.rerun()
                    except ApiError as e:
                        st.error(str(e))
                st.divider()

# ---------- ACTIONS ----------
with tabs[2]:
    if not is_owner:
        st.info("Owner access required.")
    else:
        st.button("🔄 Refresh")
        try:
            rows = [action_row(a) for a in api.admin_actions(limit=150)]
        except ApiError as e:
            rows = []
            st.error(f"Unable to load admin actions: {e}")
        if rows:
            st.dataframe(rows, use_container_width=True)
        else:
            st.info("No admin activity yet")
