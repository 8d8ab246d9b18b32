import asyncio

import pytest

MUMBAI = {
    "lat": "19.07",
    "lon": "72.87",
    "placeData": [{"name": "A", "latitude": 19.1, "longitude": 72.9}],
}
NEW_YORK = {
    "lat": 40.7128,
    "lon": -74.006,
    "placeData": [
        {"name": "Central Park", "latitude": 40.785091, "longitude": -73.968285},
        {"name": "Times Square", "latitude": 40.758, "longitude": -73.9855},
    ],
}
NEARBY = [
    {"name": "far", "latitude": 19.2, "longitude": 72.95, "distance": 5.0},
    {"name": "near", "latitude": 19.08, "longitude": 72.88, "distance": 1.0},
    {"name": "mid", "latitude": 19.1, "longitude": 72.9, "distance": 3.0},
]


def _answer(v):
    if isinstance(v, Exception):
        raise v
    return v


class FakeGateway:
    """In-memory gateway; ``cities`` maps remote code to payload (or exception)."""

    def __init__(self, cities=None, nearby=None):
        self.cities = {1: MUMBAI, 2: NEW_YORK} if cities is None else cities
        self.nearby = NEARBY if nearby is None else nearby
        self.calls = []

    def nearby_calls(self):
        return [c for c in self.calls if c[0] == "nearby"]

    async def fetch_city(self, code):
        self.calls.append(("city", code))
        return _answer(self.cities[code])

    async def fetch_nearby(self, lat, lon, radius_km):
        self.calls.append(("nearby", lat, lon, radius_km))
        return _answer(self.nearby)


class GatedGateway(FakeGateway):
    """Every call blocks on a future the test resolves, in any order."""

    def __init__(self, **kw):
        super().__init__(**kw)
        self.gates = []

    async def _gate(self):
        fut = asyncio.get_running_loop().create_future()
        self.gates.append(fut)
        return await fut

    async def fetch_city(self, code):
        self.calls.append(("city", code))
        return await self._gate()

    async def fetch_nearby(self, lat, lon, radius_km):
        self.calls.append(("nearby", lat, lon, radius_km))
        return await self._gate()


async def wait_for_gates(gw, n):
    while len(gw.gates) < n:
        await asyncio.sleep(0)


class RecordingSink:
    def __init__(self):
        self.cities = []
        self.nearby = []

    def show_city(self, center, table):
        self.cities.append((center, table))

    def show_nearby(self, view):
        self.nearby.append(view)


class FakeView:
    def __init__(self):
        self.active = None
        self.radius_text = None
        self.status = []
        self.errors = []

    def set_active_city(self, city):
        self.active = city

    def set_radius_text(self, text):
        self.radius_text = text

    def set_status(self, msg):
        self.status.append(msg)

    def show_error(self, msg):
        self.errors.append(msg)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def sink():
    return RecordingSink()
