from __future__ import annotations

import logging
from typing import Iterator

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from config import settings
from models import Genre
from services.normalize import slugify

logger = logging.getLogger(__name__)


def _make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    # in-memory databases live on a single connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = _make_engine(settings.database_url)


def init_db() -> None:
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_genres(session, settings.seed_genres)


def seed_genres(session: Session, names: list[str]) -> int:
    """Insert the default genres when the table is empty. Returns rows added."""
    if session.exec(select(Genre)).first() is not None:
        return 0
    for name in names:
        session.add(Genre(name=name, slug=slugify(name)))
    session.commit()
    logger.info("seeded %d genres", len(names))
    return len(names)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
