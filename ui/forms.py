from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

REQUIRED_EVENT_FIELDS = ("name", "description", "date", "time", "location")


class FormError(ValueError):
    pass


def validate_event_form(
    fields: Dict[str, Any],
    genre_ids: Iterable[Any],
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the create-event payload or raise FormError with a user-facing message."""
    clean = {k: str(fields.get(k) or "").strip() for k in REQUIRED_EVENT_FIELDS}
    if not all(clean.values()):
        raise FormError("Please fill all required fields.")
    genres = [int(g) for g in genre_ids]
    if not genres:
        raise FormError("Please select at least one genre.")
    payload: Dict[str, Any] = dict(clean)
    try:
        payload["price"] = float(fields.get("price") or 0)
    except (TypeError, ValueError):
        raise FormError("Price must be a number.")
    if payload["price"] < 0:
        raise FormError("Price must be a number.")
    payload["image_url"] = image_url or None
    payload["genres"] = genres
    payload["status"] = "published"
    return payload


def user_stats(users: List[Dict[str, Any]]) -> Dict[str, int]:
    roles = Counter(u.get("role") for u in users)
    return {
        "total": len(users),
        "owners": roles["owner"],
        "admins": roles["admin"],
        "users": roles["user"],
    }


def format_date(value: Any, with_time: bool = False) -> str:
    if not value:
        return "-"
    try:
        dt = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
    except ValueError:
        return str(value)
    return dt.strftime("%Y-%m-%d %H:%M" if with_time else "%Y-%m-%d")


def action_row(action: Dict[str, Any]) -> Dict[str, str]:
    return {
        "action": action.get("action") or "action",
        "ip": action.get("ip_address") or "",
        "admin": action.get("admin_name") or "Unknown",
        "target": action.get("target_name") or action.get("target_type") or "-",
        "details": action.get("details") or "-",
        "when": format_date(action.get("created_at"), with_time=True),
    }
