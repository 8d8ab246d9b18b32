"""Session state and the two remote queries that feed it.

A city switch loads the city's center and places, then runs a nearby
query around that center with the default radius. A radius change runs a
nearby query around the current center. Every issued query takes a new
generation number for its type; a response whose number is no longer the
latest of that type is dropped, so overlapping requests resolve to the
most recently *issued* one rather than the last to arrive.

Session fields change only when a response commits. A request that is
still in flight is tracked on the side, so a failure never has anything
to roll back.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from enum import Enum
from operator import attrgetter
from typing import Any, Optional, Protocol, Tuple, Union

from .cities import CITIES, CityEntry, CityId, parse_city_id
from .config import DEFAULT_RADIUS_KM
from .errors import InvalidRadius, QueryError
from .models import SessionState, parse_city_payload, parse_nearby_payload
from .render import CenterView, ListView, TableView, render_center, render_nearby_list, render_place_table

log = logging.getLogger(__name__)


class Phase(str, Enum):
    idle = "idle"
    loading_city = "loading_city"
    loading_nearby = "loading_nearby"
    ready = "ready"
    error = "error"


class QueryGateway(Protocol):
    async def fetch_city(self, code: int) -> Any: ...
    async def fetch_nearby(self, lat: float, lon: float, radius_km: float) -> Any: ...


class ResultSink(Protocol):
    def show_city(self, center: CenterView, table: TableView) -> None: ...
    def show_nearby(self, view: ListView) -> None: ...


def normalize_radius(value: Union[float, int, str]) -> float:
    try:
        r = float(value)
    except (TypeError, ValueError):
        raise InvalidRadius(value, "not a number") from None
    if not math.isfinite(r) or r <= 0:
        raise InvalidRadius(value)
    return r


class QueryOrchestrator:
    def __init__(self, gateway: QueryGateway, sink: Optional[ResultSink] = None,
                 default_radius_km: float = DEFAULT_RADIUS_KM):
        self.gateway = gateway
        self.sink = sink
        self.default_radius_km = normalize_radius(default_radius_km)
        self.phase = Phase.idle
        self._state = SessionState(radius_km=self.default_radius_km)
        self._city_gen = 0
        self._nearby_gen = 0
        # (generation, value) of the latest issued request, until it settles
        self._pending_city: Optional[Tuple[int, CityId]] = None
        self._pending_radius: Optional[Tuple[int, float]] = None
        # nearby does not belong to the committed center (its query failed)
        self._nearby_stale = False

    @property
    def state(self) -> SessionState:
        """A copy of the session; mutating it does not affect the orchestrator."""
        return replace(self._state)

    def _retry_due(self) -> bool:
        return self._nearby_stale and self.phase is Phase.error

    async def select_city(self, city: Union[CityId, str]) -> SessionState:
        city = parse_city_id(city)
        st = self._state
        pending = self._pending_city
        if pending is not None and pending[0] == self._city_gen:
            if pending[1] == city:
                return self.state
        elif city == st.selected_city:
            if self._retry_due():
                log.info("Retrying nearby query for %s", CITIES[city].display_name)
                await self._nearby_query(st.center_lat, st.center_lon, st.radius_km)
            return self.state

        entry = CITIES[city]
        self._city_gen += 1
        gen = self._city_gen
        self._pending_city = (gen, city)
        self.phase = Phase.loading_city
        log.info("Loading %s (code %d)", entry.display_name, entry.remote_code)

        try:
            data = await self.gateway.fetch_city(entry.remote_code)
            if gen != self._city_gen:
                log.info("Dropping superseded center response for %s", entry.display_name)
                return self.state
            payload = parse_city_payload(data)
        except QueryError:
            if gen != self._city_gen:
                log.info("Ignoring failure of superseded center query for %s", entry.display_name)
                return self.state
            self.phase = Phase.error
            raise
        finally:
            if self._pending_city is not None and self._pending_city[0] == gen:
                self._pending_city = None

        st.selected_city = city
        st.center_lat, st.center_lon, st.places = payload.lat, payload.lon, payload.places
        st.radius_km = self.default_radius_km
        st.nearby = ()
        self._nearby_stale = True
        log.info("%s center %.5f,%.5f with %d place(s)",
                 entry.display_name, payload.lat, payload.lon, len(payload.places))
        self._render_city(entry)
        try:
            await self._nearby_query(st.center_lat, st.center_lon, st.radius_km)
        except QueryError:
            # the list on screen still belongs to the previous city
            if self.sink is not None:
                self.sink.show_nearby(render_nearby_list(()))
            raise
        return self.state

    async def set_radius(self, new_radius: Union[float, int, str]) -> SessionState:
        r = normalize_radius(new_radius)
        st = self._state
        pending = self._pending_radius
        if pending is not None and pending[0] == self._nearby_gen:
            if r == pending[1]:
                return self.state
        elif r == st.radius_km and not self._retry_due():
            return self.state
        if st.selected_city is None:
            # no center yet; loading a city resets the radius anyway
            log.debug("Ignoring radius %g km before any city was loaded", r)
            return self.state
        await self._nearby_query(st.center_lat, st.center_lon, r)
        return self.state

    async def _nearby_query(self, lat: float, lon: float, radius_km: float) -> bool:
        """Returns False when the response was superseded and dropped.

        Raises only for failures of the latest nearby query. ``radius_km``
        is committed together with the results.
        """
        self._nearby_gen += 1
        gen = self._nearby_gen
        self._pending_radius = (gen, radius_km)
        self.phase = Phase.loading_nearby
        log.debug("Nearby query #%d: %.5f,%.5f r=%g km", gen, lat, lon, radius_km)
        try:
            data = await self.gateway.fetch_nearby(lat, lon, radius_km)
            if gen != self._nearby_gen:
                log.info("Dropping superseded nearby response #%d", gen)
                return False
            nearby = sorted(parse_nearby_payload(data), key=attrgetter("distance_km"))
        except QueryError:
            if gen != self._nearby_gen:
                log.info("Ignoring failure of superseded nearby query #%d", gen)
                return False
            self.phase = Phase.error
            raise
        finally:
            if self._pending_radius is not None and self._pending_radius[0] == gen:
                self._pending_radius = None

        st = self._state
        st.nearby = tuple(nearby)
        st.radius_km = radius_km
        self._nearby_stale = False
        self.phase = Phase.ready
        log.info("%d place(s) within %g km", len(nearby), radius_km)
        if self.sink is not None:
            self.sink.show_nearby(render_nearby_list(st.nearby))
        return True

    def _render_city(self, entry: CityEntry) -> None:
        if self.sink is None:
            return
        st = self._state
        self.sink.show_city(render_center(entry, st.center_lat, st.center_lon),
                            render_place_table(st.places))
