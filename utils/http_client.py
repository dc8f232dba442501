from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional
import json
import logging
import os

from requests import Response, Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)


def _build_retry(total: int = 4, backoff_factor: float = 0.6) -> Retry:
    """
    Exponential backoff via urllib3 Retry.
    Only idempotent reads are retried; writes go out once.
    """
    return Retry(
        total=total,
        read=total,
        connect=total,
        status=total,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 502, 503, 504),
        allowed_methods=frozenset({"HEAD", "GET", "OPTIONS"}),
        raise_on_status=False,
        respect_retry_after_header=True,
    )


class HttpClient:
    """
    Small wrapper around requests.Session with sane defaults:
    - Retries + backoff
    - Per-request timeout
    - JSON helper that tolerates empty / non-JSON bodies
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 8.0,
        max_retries: int = 4,
        user_agent: Optional[str] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = Session()

        adapter = HTTPAdapter(max_retries=_build_retry(total=max_retries))
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

        ua = user_agent or os.getenv("HTTP_USER_AGENT", "Eventboard/1.0")
        self._default_headers: dict[str, str] = {
            "User-Agent": ua,
            "Accept": "application/json",
        }

    @property
    def session(self) -> Session:
        return self._session

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Response:
        merged: MutableMapping[str, str] = dict(self._default_headers)
        if headers:
            merged.update(headers)
        return self._session.request(
            method,
            self.url(path),
            params=params,
            json=json_body,
            headers=merged,
            timeout=timeout or self._timeout,
        )

    def request_json(self, method: str, path: str, **kwargs: Any) -> tuple[Response, Any]:
        """Returns (response, decoded body); body is {} when empty or not JSON."""
        resp = self.request(method, path, **kwargs)
        if not resp.content:
            return resp, {}
        try:
            return resp, resp.json()
        except json.JSONDecodeError:
            logger.warning("Non-JSON response from %s (status %s)", resp.url, resp.status_code)
            return resp, {}
