from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple


@dataclass
class ViewState:
    """Everything the event list screen remembers between reruns."""

    events: List[Dict[str, Any]] = field(default_factory=list)
    genres: List[Dict[str, Any]] = field(default_factory=list)
    selected_genre: str = ""
    favorites: Set[int] = field(default_factory=set)
    current_user: Optional[Dict[str, Any]] = None
    user_location: Optional[Tuple[float, float]] = None
    pending_favorites: Set[int] = field(default_factory=set)
    # event id -> monotonic time of its last favorite toggle
    last_toggled: Dict[int, float] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def logged_in(self) -> bool:
        return self.current_user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.current_user) and self.current_user.get("role") in ("admin", "owner")
