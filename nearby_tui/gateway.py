"""HTTP access to the geo service.

Both endpoints are plain GETs returning JSON. The blocking ``requests`` call
runs in a worker thread so the UI event loop keeps handling input while a
query is in flight. Transport failures are mapped onto ``QueryError``
subclasses here; response *contents* are validated by the orchestrator.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import CENTER_PATH, NEARBY_PATH, USER_AGENT, Settings
from .errors import MalformedResponse, NetworkError, QueryTimeout

log = logging.getLogger(__name__)


# ---------------- HTTP session ----------------
def make_session(retries: int = 2) -> requests.Session:
    s = requests.Session()
    s.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    retry = Retry(total=retries, connect=retries, read=retries, backoff_factor=0.2,
                  status_forcelist=(429, 500, 502, 503, 504),
                  allowed_methods=frozenset(["GET"]))
    adapter = HTTPAdapter(pool_connections=4, pool_maxsize=4, max_retries=retry)
    s.mount("https://", adapter); s.mount("http://", adapter)
    return s


class HttpGateway:
    """Talks to ``/load-dummy`` and ``/find-nearby`` on ``settings.base_url``.

    ``settings.timeout_s`` is the deadline for one query, retries included.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.base_url = settings.base_url.rstrip("/")
        self.timeout_s = settings.timeout_s
        self.session = session if session is not None else make_session(settings.retries)

    async def fetch_city(self, code: int) -> Any:
        return await self._call(CENTER_PATH, {"city": code})

    async def fetch_nearby(self, lat: float, lon: float, radius_km: float) -> Any:
        return await self._call(NEARBY_PATH, {"lat": lat, "lon": lon, "radius": radius_km})

    def close(self) -> None:
        self.session.close()

    async def _call(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.get_json, path, params), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            raise QueryTimeout(f"{path} did not answer within {self.timeout_s:g}s") from None

    def get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = self.base_url + path
        log.debug("GET %s %s", url, params)
        try:
            r = self.session.get(url, params=params, timeout=self.timeout_s)
            r.raise_for_status()
        except requests.Timeout as e:
            raise QueryTimeout(f"{path} timed out: {e}") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text.strip() if e.response is not None else ""
            raise NetworkError(f"{path} failed with HTTP {status}: {body}", status_code=status) from e
        except requests.RequestException as e:
            raise NetworkError(f"{path} failed: {e}") from e
        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponse(f"{path} did not return JSON") from e
