#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations
import argparse
import dataclasses
import logging
import os
import sys
import traceback
import webbrowser
from typing import List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static

from .cities import CityId, iter_cities, parse_city_id
from .config import Settings
from .controller import InteractionController, fmt_radius
from .errors import UnknownCity
from .gateway import HttpGateway
from .logging_config import setup_logging
from .orchestrator import QueryGateway, QueryOrchestrator
from .render import CenterView, ListView, TableView, PLACE_TABLE_HEADER, NEARBY_LIST_HEADER

log = logging.getLogger(__name__)

CITY_BTN_PREFIX = "city-"


class StatusBar(Static):
    def set(self, msg: str) -> None:
        self.remove_class("error"); self.update(msg)

    def set_error(self, msg: str) -> None:
        self.add_class("error"); self.update(f"Error: {msg}")


def _cells(row) -> List[Text]:
    # place names come from the service; never interpret them as markup
    return [Text(c) for c in row]


class NearbyTUI(App):
    CSS = """
    Screen { layout: vertical; }
    DataTable { height: 1fr; }
    #cities { height: auto; padding: 0 2; }
    .city-tag { margin-right: 1; }
    .city-tag.active-city { background: $accent; text-style: bold; }
    #center { padding: 0 2; }
    #radius-row { height: auto; padding: 0 2; }
    #radius-row Label { padding: 1 1; }
    #radius { width: 16; }
    #status { padding: 0 2; color: $text 50%; }
    #status.error { color: $error; }
    """
    BINDINGS = [
        Binding("/", "focus_radius", "Radius"),
        Binding("o", "open_map", "Open Map"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, settings: Optional[Settings] = None, gateway: Optional[QueryGateway] = None):
        super().__init__()
        self.settings = settings or Settings()
        self.gateway = gateway if gateway is not None else HttpGateway(self.settings)
        self.orchestrator = QueryOrchestrator(self.gateway, self, self.settings.default_radius_km)
        self.controller = InteractionController(self.orchestrator, self)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Label("Nearby Places\nPick a city, then search around its center")
        with Horizontal(id="cities"):
            for e in iter_cities():
                yield Button(e.display_name, id=CITY_BTN_PREFIX + e.id.value, classes="city-tag")
        self.center_label = Label("", id="center", markup=False); yield self.center_label
        self.places_table = DataTable(id="places", zebra_stripes=True); yield self.places_table
        with Horizontal(id="radius-row"):
            yield Label("Radius km:")
            self.radius_input = Input(value=fmt_radius(self.orchestrator.default_radius_km), id="radius")
            yield self.radius_input
            self.search_btn = Button("Search", id="search_btn", variant="primary"); yield self.search_btn
        self.nearby_table = DataTable(id="nearby", zebra_stripes=True, cursor_type="row"); yield self.nearby_table
        self.status = StatusBar(id="status", markup=False); yield self.status
        yield Footer()

    def on_mount(self) -> None:
        self.places_table.add_columns(*PLACE_TABLE_HEADER)
        self.nearby_table.add_columns(*NEARBY_LIST_HEADER)
        self.select_city(self.settings.default_city)

    def on_unmount(self) -> None:
        close = getattr(self.gateway, "close", None)
        if close is not None:
            close()

    # ---------------- user actions ----------------
    def select_city(self, city: str) -> None:
        self.run_worker(self.controller.on_city_tag_activated(city), group="queries")

    def submit_radius(self) -> None:
        self.run_worker(self.controller.on_radius_submitted(self.radius_input.value), group="queries")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if event.button is self.search_btn:
            self.submit_radius()
        elif bid.startswith(CITY_BTN_PREFIX):
            self.select_city(bid[len(CITY_BTN_PREFIX):])

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input is self.radius_input:
            self.submit_radius()

    def action_focus_radius(self) -> None:
        self.radius_input.focus()

    def action_open_map(self) -> None:
        nearby = self.orchestrator.state.nearby
        row = self.nearby_table.cursor_row
        if not nearby or row < 0 or row >= len(nearby):
            return
        p = nearby[row]
        url = f"https://www.openstreetmap.org/?mlat={p.latitude:.6f}&mlon={p.longitude:.6f}#map=18/{p.latitude:.6f}/{p.longitude:.6f}"
        webbrowser.open(url); self.status.set(f"Opened {p.name} in browser.")

    # ---------------- view (controller side) ----------------
    def set_active_city(self, city: CityId) -> None:
        for btn in self.query(".city-tag").results(Button):
            btn.set_class(btn.id == CITY_BTN_PREFIX + city.value, "active-city")

    def set_radius_text(self, text: str) -> None:
        self.radius_input.value = text

    def set_status(self, msg: str) -> None:
        self.status.set(msg)

    def show_error(self, msg: str) -> None:
        self.status.set_error(msg)

    # ---------------- sink (orchestrator side) ----------------
    def show_city(self, center: CenterView, table: TableView) -> None:
        self.center_label.update(f"{center.city}   center lat {center.lat}   lon {center.lon}")
        self.places_table.clear()
        for row in table.rows:
            self.places_table.add_row(*_cells(row))

    def show_nearby(self, view: ListView) -> None:
        self.nearby_table.clear()
        for row in view.rows:
            self.nearby_table.add_row(*_cells(row))
        if view.rows:
            self.nearby_table.move_cursor(row=0)


# ---------------- Entrypoint ----------------
def build_settings(argv: Optional[List[str]] = None) -> Settings:
    parser = argparse.ArgumentParser(prog="nearby-tui", add_help=True)
    parser.add_argument("--base-url", help="Geo service root (default: $NEARBY_TUI_BASE_URL or http://localhost:8000)")
    parser.add_argument("--timeout", type=float, help="Deadline per query in seconds")
    parser.add_argument("--retries", type=int, help="Transport retries for failed GETs (0 disables)")
    parser.add_argument("--city", help="City to load on startup: " + ", ".join(e.id.value for e in iter_cities()))
    parser.add_argument("--log-file", help="Append logs to this file")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--dev", action="store_true", help="Enable Textual devtools")
    parser.add_argument("--no-color", action="store_true", help="Force a dumb TERM (debug)")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        parser.error(str(e))
    overrides = {}
    if args.base_url: overrides["base_url"] = args.base_url.rstrip("/")
    if args.timeout is not None: overrides["timeout_s"] = args.timeout
    if args.retries is not None: overrides["retries"] = args.retries
    if args.city: overrides["default_city"] = args.city
    if args.log_file: overrides["log_file"] = args.log_file
    if args.debug: overrides["log_level"] = logging.DEBUG
    settings = dataclasses.replace(settings, **overrides)

    try:
        parse_city_id(settings.default_city)
    except UnknownCity as e:
        parser.error(str(e))
    if settings.timeout_s <= 0:
        parser.error("--timeout must be positive")
    if settings.retries < 0:
        parser.error("--retries must not be negative")

    os.environ.setdefault("TERM", "xterm-256color")
    if args.no_color:
        os.environ["TERM"] = "dumb"
    if args.dev:
        os.environ["TEXTUAL_DEVTOOLS"] = "1"
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    settings = build_settings(argv)
    setup_logging(settings.log_level, settings.log_file)
    log.info("Starting against %s", settings.base_url)
    try:
        NearbyTUI(settings).run()
    except Exception:
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
