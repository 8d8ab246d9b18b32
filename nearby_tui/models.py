"""Session data and the parsers that turn raw service JSON into it.

The service sends coordinates either as numbers or as numeric strings
(the center of a city arrives as ``"19.07"``). Anything missing or not
parseable as a finite float is a :class:`MalformedResponse`; no defaults
are guessed.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .cities import CityId
from .config import DEFAULT_RADIUS_KM
from .errors import MalformedResponse


@dataclass(frozen=True)
class Place:
    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class NearbyPlace:
    name: str
    latitude: float
    longitude: float
    distance_km: float


@dataclass(frozen=True)
class CityPayload:
    lat: float
    lon: float
    places: Tuple[Place, ...]


@dataclass
class SessionState:
    selected_city: Optional[CityId] = None
    center_lat: float = 0.0
    center_lon: float = 0.0
    radius_km: float = DEFAULT_RADIUS_KM
    places: Tuple[Place, ...] = field(default_factory=tuple)
    nearby: Tuple[NearbyPlace, ...] = field(default_factory=tuple)


def _number(obj: Any, key: str, where: str) -> float:
    if not isinstance(obj, dict) or key not in obj:
        raise MalformedResponse(f"{where}: missing field {key!r}")
    v = obj[key]
    if isinstance(v, bool) or not isinstance(v, (int, float, str)):
        raise MalformedResponse(f"{where}: field {key!r} is not numeric: {v!r}")
    try:
        x = float(v)
    except (ValueError, OverflowError):
        raise MalformedResponse(f"{where}: field {key!r} is not numeric: {v!r}") from None
    if not math.isfinite(x):
        raise MalformedResponse(f"{where}: field {key!r} is not finite: {v!r}")
    return x


def _name(obj: Any, where: str) -> str:
    if not isinstance(obj, dict) or not isinstance(obj.get("name"), str):
        raise MalformedResponse(f"{where}: missing or non-string 'name'")
    return obj["name"]


def parse_city_payload(data: Any) -> CityPayload:
    """Parse the center+places response ``{lat, lon, placeData: [...]}``."""
    lat = _number(data, "lat", "center")
    lon = _number(data, "lon", "center")
    raw_places = data.get("placeData")
    if not isinstance(raw_places, list):
        raise MalformedResponse("center: 'placeData' is not a list")
    places: List[Place] = []
    for i, p in enumerate(raw_places):
        where = f"placeData[{i}]"
        places.append(Place(_name(p, where), _number(p, "latitude", where), _number(p, "longitude", where)))
    return CityPayload(lat, lon, tuple(places))


def parse_nearby_payload(data: Any) -> List[NearbyPlace]:
    """Parse the nearby response, an unordered list of places with ``distance``.

    ``null`` is how the service encodes "nothing in range".
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise MalformedResponse("nearby: response is not a list")
    out: List[NearbyPlace] = []
    for i, p in enumerate(data):
        where = f"nearby[{i}]"
        out.append(NearbyPlace(
            _name(p, where),
            _number(p, "latitude", where),
            _number(p, "longitude", where),
            _number(p, "distance", where),
        ))
    return out
