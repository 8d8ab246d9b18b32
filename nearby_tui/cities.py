from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Union

from .errors import UnknownCity


class CityId(str, Enum):
    mum = "mum"
    ny = "ny"


@dataclass(frozen=True)
class CityEntry:
    id: CityId
    display_name: str
    remote_code: int


CITIES: Dict[CityId, CityEntry] = {
    e.id: e for e in (
        CityEntry(CityId.mum, "Mumbai", 1),
        CityEntry(CityId.ny, "New York", 2),
    )
}


def parse_city_id(value: Union[CityId, str]) -> CityId:
    try:
        return CityId(value)
    except ValueError:
        raise UnknownCity(value) from None


def lookup(city: Union[CityId, str]) -> CityEntry:
    return CITIES[parse_city_id(city)]


def resolve_code(city: Union[CityId, str]) -> int:
    return lookup(city).remote_code


def resolve_display_name(city: Union[CityId, str]) -> str:
    return lookup(city).display_name


def iter_cities() -> Iterator[CityEntry]:
    """Entries in registry order (the order the city tags are shown)."""
    return iter(CITIES.values())
