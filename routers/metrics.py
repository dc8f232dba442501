from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from db import get_session
from services.metrics import summary_http

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("")
def get_metrics(
    limit_routes: int = Query(50, ge=1, le=500),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    return {"success": True, "metrics": summary_http(session, limit_routes=limit_routes)}
