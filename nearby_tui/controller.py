from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

from .cities import CityId, parse_city_id, resolve_display_name
from .errors import InvalidRadius, NearbyError
from .models import SessionState
from .orchestrator import Phase, QueryOrchestrator, normalize_radius

log = logging.getLogger(__name__)


class ControlView(Protocol):
    def set_active_city(self, city: CityId) -> None: ...
    def set_radius_text(self, text: str) -> None: ...
    def set_status(self, msg: str) -> None: ...
    def show_error(self, msg: str) -> None: ...


def fmt_radius(r: float) -> str:
    return f"{r:g}"


def parse_radius(raw: str) -> float:
    """Parse the radius field; anything but a positive finite number is rejected."""
    s = (raw or "").strip()
    if not s:
        raise InvalidRadius(raw, "empty")
    return normalize_radius(s)


class InteractionController:
    """Turns city tag clicks and radius submissions into orchestrator calls.

    Every recoverable error ends here: it is logged, shown on the status
    line, and the method returns None. The session keeps its last good state.
    """

    def __init__(self, orchestrator: QueryOrchestrator, view: ControlView):
        self.orchestrator = orchestrator
        self.view = view

    async def on_city_tag_activated(self, city: Union[CityId, str]) -> Optional[SessionState]:
        try:
            city = parse_city_id(city)
        except NearbyError as e:
            self._report(e)
            return None
        self.view.set_active_city(city)
        if city != self.orchestrator.state.selected_city:
            self.view.set_radius_text(fmt_radius(self.orchestrator.default_radius_km))
            self.view.set_status(f"Loading {resolve_display_name(city)}…")
        try:
            st = await self.orchestrator.select_city(city)
        except NearbyError as e:
            prev = self.orchestrator.state.selected_city
            if prev is not None:
                self.view.set_active_city(prev)
            self._report(e)
            return None
        self._done(st)
        return st

    async def on_radius_submitted(self, raw: str) -> Optional[SessionState]:
        try:
            r = parse_radius(raw)
        except InvalidRadius as e:
            self._report(e)
            return None
        if r != self.orchestrator.state.radius_km:
            self.view.set_status(f"Searching within {fmt_radius(r)} km…")
        try:
            st = await self.orchestrator.set_radius(r)
        except NearbyError as e:
            self._report(e)
            return None
        self._done(st)
        return st

    def _done(self, st: SessionState) -> None:
        # a superseded request leaves the status to the newer one
        if self.orchestrator.phase is Phase.ready:
            self.view.set_status(
                f"Done. Found {len(st.nearby)} place(s) within {fmt_radius(st.radius_km)} km.")

    def _report(self, e: NearbyError) -> None:
        log.warning("%s", e)
        self.view.show_error(str(e))
