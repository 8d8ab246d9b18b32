import asyncio
import json
import time

import pytest
import requests

from nearby_tui.config import Settings
from nearby_tui.errors import MalformedResponse, NetworkError, QueryTimeout
from nearby_tui.gateway import HttpGateway, make_session


def response(status=200, body=b""):
    r = requests.Response()
    r.status_code = status
    r._content = body
    r.url = "http://geo.test"
    return r


class StubSession:
    def __init__(self, answer):
        self.answer = answer
        self.requests = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if isinstance(self.answer, Exception):
            raise self.answer
        if callable(self.answer):
            return self.answer()
        return self.answer

    def close(self):
        self.closed = True


def gateway(answer, **kw):
    settings = Settings(base_url="http://geo.test/", **kw)
    session = StubSession(answer)
    return HttpGateway(settings, session=session), session


def test_fetch_city_request_and_body():
    body = {"lat": 19.07, "lon": 72.87, "placeData": []}
    gw, s = gateway(response(body=json.dumps(body).encode()))
    assert asyncio.run(gw.fetch_city(1)) == body
    assert s.requests == [("http://geo.test/load-dummy", {"city": 1}, 10.0)]


def test_fetch_nearby_params():
    gw, s = gateway(response(body=b"[]"), timeout_s=3)
    assert asyncio.run(gw.fetch_nearby(19.07, 72.87, 5.0)) == []
    url, params, timeout = s.requests[0]
    assert url == "http://geo.test/find-nearby"
    assert params == {"lat": 19.07, "lon": 72.87, "radius": 5.0}
    assert timeout == 3


def test_http_error_maps_to_network_error():
    gw, _ = gateway(response(400, b"Invalid city code"))
    with pytest.raises(NetworkError) as ei:
        asyncio.run(gw.fetch_city(9))
    assert ei.value.status_code == 400
    assert "Invalid city code" in str(ei.value)


def test_connection_error_maps_to_network_error():
    gw, _ = gateway(requests.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        asyncio.run(gw.fetch_city(1))


def test_requests_timeout_maps_to_query_timeout():
    gw, _ = gateway(requests.ReadTimeout("slow"))
    with pytest.raises(QueryTimeout):
        asyncio.run(gw.fetch_nearby(0, 0, 1))


def test_deadline_expires():
    def slow():
        time.sleep(0.3)
        return response(body=b"[]")

    gw, _ = gateway(slow, timeout_s=0.05)
    with pytest.raises(TimeoutError):
        asyncio.run(gw.fetch_nearby(0, 0, 1))


def test_non_json_body_is_malformed():
    gw, _ = gateway(response(body=b"<html>oops</html>"))
    with pytest.raises(MalformedResponse):
        asyncio.run(gw.fetch_city(1))


def test_close_closes_session():
    gw, s = gateway(response(body=b"[]"))
    gw.close()
    assert s.closed


def test_make_session_headers_and_retries():
    s = make_session(retries=3)
    assert s.headers["Accept"] == "application/json"
    assert s.get_adapter("http://geo.test").max_retries.total == 3
    s.close()
