from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import case, func
from sqlmodel import Session, col, select

from db import engine
from models import HttpMetric


def log_http(route: str, method: str, status: int, duration_ms: int) -> None:
    with Session(engine) as session:
        session.add(
            HttpMetric(route=route, method=method, status=int(status), duration_ms=int(duration_ms))
        )
        session.commit()


def _bucket(lo: int, hi: int):
    return func.sum(case((col(HttpMetric.status).between(lo, hi), 1), else_=0))


def summary_http(session: Session, limit_routes: int = 50) -> Dict[str, Any]:
    """
    Returns aggregate per-route metrics + totals.
    """
    columns = (
        func.count(col(HttpMetric.id)),
        func.avg(HttpMetric.duration_ms),
        _bucket(200, 299),
        _bucket(400, 499),
        _bucket(500, 599),
    )
    totals = session.exec(select(*columns)).one()
    rows = session.exec(
        select(HttpMetric.route, *columns)
        .group_by(HttpMetric.route)
        .order_by(func.count(col(HttpMetric.id)).desc())
        .limit(limit_routes)
    ).all()

    def _pack(requests, avg_ms, s2xx, s4xx, s5xx) -> Dict[str, Any]:
        return dict(
            requests=requests or 0,
            avg_ms=round(avg_ms or 0, 1),
            s2xx=s2xx or 0,
            s4xx=s4xx or 0,
            s5xx=s5xx or 0,
        )

    per_route: List[Dict[str, Any]] = [dict(route=r[0], **_pack(*r[1:])) for r in rows]
    return dict(totals=_pack(*totals), routes=per_route)
