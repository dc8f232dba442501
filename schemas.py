from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    uid: str = Field(..., min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None

    # request_uid strips the header, so stored uids must be stripped too
    @field_validator("uid", mode="before")
    @classmethod
    def _strip_uid(cls, v):
        return v.strip() if isinstance(v, str) else v


class FavoriteIn(BaseModel):
    event_id: int


class UserUpdate(BaseModel):
    role: Optional[str] = None
    is_active: Optional[int] = Field(default=None, ge=0, le=1)


class EventCreate(BaseModel):
    name: str = ""
    description: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    price: float = Field(default=0.0, ge=0)
    image_url: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    genres: List[int] = Field(default_factory=list)
    status: str = "published"

    @field_validator("name", "description", "date", "time", "location", mode="before")
    @classmethod
    def _strip(cls, v):
        return (v or "").strip() if isinstance(v, str) or v is None else v

    def missing_fields(self) -> List[str]:
        return [
            f for f in ("name", "description", "date", "time", "location")
            if not getattr(self, f)
        ]
