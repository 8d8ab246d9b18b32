"""Pure transforms from session data to view models.

The Textual app turns these into widgets; nothing here touches the UI.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .cities import CityEntry
from .models import NearbyPlace, Place

PLACE_TABLE_HEADER = ("Place Name", "Latitude", "Longitude")
NEARBY_LIST_HEADER = ("S.No.", "Place", "Latitude", "Longitude", "Distance")

Row = Tuple[str, ...]


@dataclass(frozen=True)
class TableView:
    header: Row
    rows: Tuple[Row, ...]


@dataclass(frozen=True)
class ListView:
    header: Row
    rows: Tuple[Row, ...]


@dataclass(frozen=True)
class CenterView:
    city: str
    lat: str
    lon: str


def fmt_km(x: float) -> str:
    return f"{x:.3f} KM"


def render_center(entry: CityEntry, lat: float, lon: float) -> CenterView:
    return CenterView(entry.display_name, str(lat), str(lon))


def render_place_table(places: Sequence[Place]) -> TableView:
    """One row per place, in the order the service listed them."""
    rows = tuple((p.name, str(p.latitude), str(p.longitude)) for p in places)
    return TableView(PLACE_TABLE_HEADER, rows)


def render_nearby_list(nearby: Sequence[NearbyPlace]) -> ListView:
    """Numbered rows in input order; callers sort by distance beforehand."""
    rows = tuple(
        (str(i), p.name, f"{p.latitude:.5f}", f"{p.longitude:.5f}", fmt_km(p.distance_km))
        for i, p in enumerate(nearby, 1)
    )
    return ListView(NEARBY_LIST_HEADER, rows)
