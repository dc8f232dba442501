from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, UniqueConstraint

ROLES = ("user", "admin", "owner")
EVENT_STATUSES = ("published", "draft")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    uid: str = Field(index=True, unique=True)  # external auth identity
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "user"  # user/admin/owner
    is_active: bool = True
    age: Optional[int] = None
    joined_at: datetime = Field(default_factory=utcnow)


class Genre(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)
    slug: Optional[str] = Field(default=None, index=True)


class Event(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM
    location: Optional[str] = None
    price: float = 0.0
    image_url: Optional[str] = None
    status: str = "published"  # published/draft
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_by: Optional[int] = Field(default=None, foreign_key="user.id")
    created_at: datetime = Field(default_factory=utcnow)


class EventGenre(SQLModel, table=True):
    event_id: int = Field(foreign_key="event.id", primary_key=True)
    genre_id: int = Field(foreign_key="genre.id", primary_key=True)


class Favorite(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "event_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    event_id: int = Field(foreign_key="event.id")
    created_at: datetime = Field(default_factory=utcnow)


class AdminAction(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    admin_id: int = Field(foreign_key="user.id", index=True)
    action: str
    target_type: Optional[str] = None
    target_id: Optional[int] = None
    details: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, index=True)


class HttpMetric(SQLModel, table=True):
    __tablename__ = "http_metrics"

    id: Optional[int] = Field(default=None, primary_key=True)
    ts: datetime = Field(default_factory=utcnow)
    route: str
    method: str
    status: int
    duration_ms: int
