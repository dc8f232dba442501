import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OWNER_UIDS", '["owner-uid"]')

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from db import engine, get_session
from main import app
from models import Event, EventGenre, Genre, User
from services.normalize import slugify


@pytest.fixture
def session():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(session):
    def _override():
        yield session

    app.dependency_overrides[get_session] = _override
    # no context manager: skip lifespan so the file database is never touched
    yield TestClient(app)
    app.dependency_overrides.clear()


def _genre(session, name):
    g = Genre(name=name, slug=slugify(name))
    session.add(g)
    session.commit()
    session.refresh(g)
    return g


def _event(session, name, genres, **kw):
    ev = Event(name=name, **kw)
    session.add(ev)
    session.commit()
    session.refresh(ev)
    for g in genres:
        session.add(EventGenre(event_id=ev.id, genre_id=g.id))
    session.commit()
    return ev


@pytest.fixture
def catalog(session):
    music = _genre(session, "Music")
    food = _genre(session, "Food & Drinks")
    concert = _genre(session, "Concert")
    events = [
        _event(session, "Jazz Night", [music], date="2026-11-02", time="20:00",
               location="Blue Room, Vilnius", price=15.0, latitude=54.6872, longitude=25.2797),
        _event(session, "Street Food Fair", [food], date="2026-11-01", time="12:00",
               location="Old Town", price=0.0, latitude=54.6800, longitude=25.2900),
        _event(session, "Rock Show", [music, concert], date="2026-11-03", time="21:00",
               location="Kaunas Arena", price=40.0, latitude=54.8985, longitude=23.9036),
        _event(session, "Secret Draft", [music], date="2026-11-04", status="draft"),
    ]
    return {"genres": {"music": music, "food": food, "concert": concert}, "events": events}


def _user(session, uid, role="user", name=None, is_active=True):
    u = User(uid=uid, role=role, name=name or uid, email=f"{uid}@example.com", is_active=is_active)
    session.add(u)
    session.commit()
    session.refresh(u)
    return u


@pytest.fixture
def users(session):
    return {
        "owner": _user(session, "owner-uid", role="owner", name="Olive"),
        "admin": _user(session, "admin-uid", role="admin", name="Adam"),
        "user": _user(session, "user-uid", name="Uma"),
        "inactive": _user(session, "gone-uid", is_active=False),
    }

