"""
Typed access to the backend envelope API for the Streamlit screens.

Every call returns the decoded payload on `{"success": true}` and raises
`ApiError` otherwise (HTTP error, `success: false`, or network failure).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from config import settings
from utils.http_client import HttpClient


class ApiError(Exception):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class EventboardApi:
    def __init__(self, base_url: Optional[str] = None, uid: Optional[str] = None,
                 http: Optional[HttpClient] = None) -> None:
        self.uid = uid
        self.http = http or HttpClient(
            base_url or settings.api_base,
            timeout=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
        )

    def _call(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        headers = {settings.auth_header: self.uid} if self.uid else {}
        try:
            resp, data = self.http.request_json(method, path, headers=headers, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(f"Network error: {exc}") from exc
        if not isinstance(data, dict):
            data = {}
        if not resp.ok or not data.get("success"):
            raise ApiError(data.get("error") or f"HTTP {resp.status_code}", resp.status_code)
        return data

    # ---------- public ----------

    def genres(self) -> List[Dict[str, Any]]:
        return self._call("GET", "/api/genres").get("genres") or []

    def events(self, **filters: Any) -> List[Dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        return self._call("GET", "/api/events", params=params).get("events") or []

    def event(self, event_id: int) -> Dict[str, Any]:
        return self._call("GET", f"/api/events/{int(event_id)}")["event"]

    # ---------- signed in ----------

    def login(self, uid: str, name: Optional[str] = None, email: Optional[str] = None) -> Dict[str, Any]:
        user = self._call("POST", "/api/auth/login",
                          json_body={"uid": uid, "name": name, "email": email})["user"]
        self.uid = uid
        return user

    def me(self) -> Dict[str, Any]:
        return self._call("GET", "/api/me")["user"]

    def favorites(self) -> List[Dict[str, Any]]:
        return self._call("GET", "/api/favorites").get("favorites") or []

    def add_favorite(self, event_id: int) -> Dict[str, Any]:
        return self._call("POST", "/api/favorites", json_body={"event_id": int(event_id)})

    def remove_favorite(self, event_id: int) -> Dict[str, Any]:
        return self._call("DELETE", "/api/favorites", params={"event_id": int(event_id)})

    # ---------- admin ----------

    def admin_users(self) -> List[Dict[str, Any]]:
        return self._call("GET", "/api/admin/users").get("users") or []

    def update_user(self, user_id: int, **changes: Any) -> Dict[str, Any]:
        return self._call("PUT", f"/api/admin/users/{int(user_id)}", json_body=changes)["user"]

    def create_event(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("POST", "/api/admin/events", json_body=payload)["event"]

    def admin_actions(self, limit: int = 150) -> List[Dict[str, Any]]:
        return self._call("GET", "/api/admin/actions", params={"limit": limit}).get("actions") or []
