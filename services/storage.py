# services/storage.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import aliased
from sqlmodel import Session, col, select

from models import AdminAction, Event, EventGenre, Favorite, Genre, User
from services.normalize import slugify

logger = logging.getLogger(__name__)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat(sep=" ", timespec="seconds") if dt else None


# ---------- Genres ----------

def list_genres(session: Session) -> List[Dict[str, Any]]:
    rows = session.exec(select(Genre).order_by(Genre.name)).all()
    return [{"id": g.id, "name": g.name, "slug": g.slug or slugify(g.name)} for g in rows]


def existing_genre_ids(session: Session, ids: Iterable[int]) -> List[int]:
    wanted = list(dict.fromkeys(int(i) for i in ids))
    if not wanted:
        return []
    found = set(session.exec(select(Genre.id).where(col(Genre.id).in_(wanted))).all())
    return [i for i in wanted if i in found]


def _genres_by_event(session: Session, event_ids: List[int]) -> Dict[int, List[Genre]]:
    out: Dict[int, List[Genre]] = {i: [] for i in event_ids}
    if not event_ids:
        return out
    rows = session.exec(
        select(EventGenre.event_id, Genre)
        .join(Genre, Genre.id == EventGenre.genre_id)
        .where(col(EventGenre.event_id).in_(event_ids))
        .order_by(Genre.name)
    ).all()
    for event_id, genre in rows:
        out[event_id].append(genre)
    return out


# ---------- Events ----------

def event_to_dict(event: Event, genres: List[Genre]) -> Dict[str, Any]:
    names = [g.name for g in genres]
    slugs = [g.slug or slugify(g.name) for g in genres]
    return {
        "id": event.id,
        "name": event.name,
        "description": event.description,
        "date": event.date,
        "time": event.time,
        "location": event.location,
        "price": event.price,
        "image_url": event.image_url,
        "status": event.status,
        "latitude": event.latitude,
        "longitude": event.longitude,
        "genres": names,
        "genre_name": ", ".join(names) or None,
        "genre_slug": ",".join(slugs) or None,
        "created_at": _iso(event.created_at),
    }


def _serialize(session: Session, events: List[Event]) -> List[Dict[str, Any]]:
    genres = _genres_by_event(session, [e.id for e in events])
    return [event_to_dict(e, genres.get(e.id, [])) for e in events]


def list_events(session: Session, *, status: Optional[str] = "published") -> List[Dict[str, Any]]:
    stmt = select(Event).order_by(Event.date, Event.time, Event.id)
    if status:
        stmt = stmt.where(Event.status == status)
    return _serialize(session, list(session.exec(stmt).all()))


def get_event(session: Session, event_id: int) -> Optional[Dict[str, Any]]:
    event = session.get(Event, event_id)
    if event is None:
        return None
    return _serialize(session, [event])[0]


def create_event(
    session: Session,
    data: Dict[str, Any],
    genre_ids: List[int],
    *,
    created_by: Optional[int] = None,
) -> Dict[str, Any]:
    event = Event(**data, created_by=created_by)
    session.add(event)
    session.flush()
    for gid in genre_ids:
        session.add(EventGenre(event_id=event.id, genre_id=gid))
    session.commit()
    session.refresh(event)
    return _serialize(session, [event])[0]


# ---------- Users ----------

def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "uid": user.uid,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "is_active": 1 if user.is_active else 0,
        "age": user.age,
        "joined_at": _iso(user.joined_at),
    }


def get_user_by_uid(session: Session, uid: str) -> Optional[User]:
    return session.exec(select(User).where(User.uid == uid)).first()


def upsert_user(
    session: Session,
    uid: str,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
    role: Optional[str] = None,
) -> User:
    user = get_user_by_uid(session, uid)
    if user is None:
        user = User(uid=uid, name=name, email=email, role=role or "user")
        logger.info("created user uid=%s role=%s", uid, user.role)
    else:
        user.name = name or user.name
        user.email = email or user.email
        if role:
            user.role = role
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def list_users(session: Session) -> List[Dict[str, Any]]:
    rows = session.exec(select(User).order_by(User.joined_at, User.id)).all()
    return [user_to_dict(u) for u in rows]


def update_user(
    session: Session,
    user: User,
    *,
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> User:
    if role is not None:
        user.role = role
    if is_active is not None:
        user.is_active = is_active
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


# ---------- Favorites ----------

def favorite_ids(session: Session, user_id: int) -> List[int]:
    return list(session.exec(select(Favorite.event_id).where(Favorite.user_id == user_id)).all())


def add_favorite(session: Session, user_id: int, event_id: int) -> bool:
    """Returns False when the event was already a favorite."""
    exists = session.exec(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.event_id == event_id)
    ).first()
    if exists:
        return False
    session.add(Favorite(user_id=user_id, event_id=event_id))
    session.commit()
    return True


def remove_favorite(session: Session, user_id: int, event_id: int) -> bool:
    row = session.exec(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.event_id == event_id)
    ).first()
    if row is None:
        return False
    session.delete(row)
    session.commit()
    return True


def list_favorites(session: Session, user_id: int) -> List[Dict[str, Any]]:
    events = session.exec(
        select(Event)
        .join(Favorite, Favorite.event_id == Event.id)
        .where(Favorite.user_id == user_id)
        .order_by(col(Favorite.created_at).desc(), col(Favorite.id).desc())
    ).all()
    return _serialize(session, list(events))


# ---------- Admin audit log ----------

def log_admin_action(
    session: Session,
    *,
    admin_id: int,
    action: str,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AdminAction:
    row = AdminAction(
        admin_id=admin_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details,
        ip_address=ip_address,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def list_admin_actions(session: Session, limit: int) -> List[Dict[str, Any]]:
    admin = aliased(User)
    target = aliased(User)
    rows = session.exec(
        select(AdminAction, admin, target)
        .outerjoin(admin, admin.id == AdminAction.admin_id)
        .outerjoin(
            target,
            (target.id == AdminAction.target_id) & (AdminAction.target_type == "user"),
        )
        .order_by(col(AdminAction.created_at).desc(), col(AdminAction.id).desc())
        .limit(limit)
    ).all()
    out: List[Dict[str, Any]] = []
    for action, by, on in rows:
        out.append(
            {
                "id": action.id,
                "action": action.action,
                "target_type": action.target_type,
                "target_id": action.target_id,
                "details": action.details,
                "ip_address": action.ip_address,
                "created_at": _iso(action.created_at),
                "admin_name": by.name if by else None,
                "admin_email": by.email if by else None,
                "target_name": on.name if on else None,
                "target_email": on.email if on else None,
            }
        )
    return out
